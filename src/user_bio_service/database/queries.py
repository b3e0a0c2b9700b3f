"""Aggregation pipelines for user queries."""

import re
from typing import Any, Dict, List, Optional, Tuple

from .models import ROLES_COLLECTION

# Sort keys accepted by the list endpoint mapped to document fields
SORT_FIELDS = {
    "name": "name",
    "email": "email",
    "role": "roleInfo.name",
    "status": "status",
    "createdAt": "createdAt",
    "updatedAt": "updatedAt",
}

USER_PROJECTION = {
    "_id": 1,
    "name": 1,
    "email": 1,
    "status": 1,
    "bio": 1,
    "role": 1,
    "roleInfo": {"_id": 1, "name": 1, "description": 1},
    "createdAt": 1,
    "updatedAt": 1,
}


def role_lookup_stages(preserve_missing: bool = False) -> List[Dict[str, Any]]:
    """Join each user with its role document as ``roleInfo``."""
    return [
        {
            "$lookup": {
                "from": ROLES_COLLECTION,
                "localField": "role",
                "foreignField": "_id",
                "as": "roleInfo",
            }
        },
        {"$unwind": {"path": "$roleInfo", "preserveNullAndEmptyArrays": preserve_missing}},
    ]


def build_match_conditions(
    status: Optional[str] = None,
    role: Optional[str] = None,
    search: Optional[str] = None,
) -> Dict[str, Any]:
    conditions: Dict[str, Any] = {}
    if status:
        conditions["status"] = status
    if role:
        conditions["roleInfo.name"] = role
    if search:
        pattern = re.escape(search)
        conditions["$or"] = [
            {"name": {"$regex": pattern, "$options": "i"}},
            {"email": {"$regex": pattern, "$options": "i"}},
            {"roleInfo.name": {"$regex": pattern, "$options": "i"}},
        ]
    return conditions


def build_user_list_pipeline(
    page: int = 1,
    page_size: int = 10,
    status: Optional[str] = None,
    role: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Build the page and count pipelines for listing users.

    Returns:
        Tuple of (page pipeline, count pipeline)
    """
    pipeline: List[Dict[str, Any]] = role_lookup_stages()

    conditions = build_match_conditions(status=status, role=role, search=search)
    if conditions:
        pipeline.append({"$match": conditions})

    sort_field = SORT_FIELDS.get(sort_by, "createdAt")
    pipeline.append({"$sort": {sort_field: -1 if sort_order == "desc" else 1}})

    count_pipeline = [*pipeline, {"$count": "total"}]

    pipeline.append({"$skip": (page - 1) * page_size})
    pipeline.append({"$limit": page_size})
    pipeline.append({"$project": USER_PROJECTION})

    return pipeline, count_pipeline


def email_match(email: str) -> Dict[str, Any]:
    """Case-insensitive exact match on email."""
    return {"$regex": f"^{re.escape(email)}$", "$options": "i"}
