"""Repositories for users and roles."""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument

from user_bio_service.telemetry import get_logger

from .models import (
    DEFAULT_ROLES,
    ROLES_COLLECTION,
    USERS_COLLECTION,
    new_role_document,
    new_user_document,
    utcnow,
)
from .queries import USER_PROJECTION, build_user_list_pipeline, email_match, role_lookup_stages

logger = get_logger(__name__)


def to_object_id(value: Any) -> ObjectId:
    return value if isinstance(value, ObjectId) else ObjectId(str(value))


class RoleRepository:
    """Access to the roles collection."""

    def __init__(self, db):
        self.collection = db[ROLES_COLLECTION]

    async def find_by_id(self, role_id: str) -> Optional[Dict[str, Any]]:
        if not ObjectId.is_valid(str(role_id)):
            return None
        return await self.collection.find_one({"_id": to_object_id(role_id)})

    async def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"name": name})

    async def find_active(self) -> List[Dict[str, Any]]:
        cursor = self.collection.find({"isActive": True}).sort("name", 1)
        return await cursor.to_list(length=None)

    async def create(self, name: str, description: str = "") -> Dict[str, Any]:
        document = new_role_document(name, description)
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def initialize_defaults(self) -> List[Dict[str, Any]]:
        """Upsert the default roles; returns every role in the collection."""
        now = utcnow()
        for role in DEFAULT_ROLES:
            await self.collection.find_one_and_update(
                {"name": role["name"]},
                {
                    "$set": {"description": role["description"], "updatedAt": now},
                    "$setOnInsert": {"isActive": True, "createdAt": now},
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        logger.info("Default roles initialized successfully", count=len(DEFAULT_ROLES))
        return await self.collection.find({}).sort("name", 1).to_list(length=None)


class UserRepository:
    """Access to the users collection."""

    def __init__(self, db):
        self.collection = db[USERS_COLLECTION]

    async def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Find a user with its role joined as ``roleInfo``."""
        pipeline = [
            {"$match": {"_id": to_object_id(user_id)}},
            *role_lookup_stages(preserve_missing=True),
            {"$project": USER_PROJECTION},
        ]
        cursor = await self.collection.aggregate(pipeline)
        results = await cursor.to_list(length=1)
        return results[0] if results else None

    async def find_by_email(
        self, email: str, exclude_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        query: Dict[str, Any] = {"email": email_match(email)}
        if exclude_id is not None:
            query["_id"] = {"$ne": to_object_id(exclude_id)}
        return await self.collection.find_one(query)

    async def create(self, name: str, email: str, role_id: Any, bio: str = "") -> str:
        document = new_user_document(name, email, to_object_id(role_id), bio)
        result = await self.collection.insert_one(document)
        return str(result.inserted_id)

    async def update(self, user_id: str, fields: Dict[str, Any]) -> bool:
        """Apply ``fields`` and bump ``updatedAt``. Returns False if no such user."""
        if "role" in fields:
            fields = {**fields, "role": to_object_id(fields["role"])}
        result = await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {**fields, "updatedAt": utcnow()}},
        )
        return result.matched_count > 0

    async def delete(self, user_id: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one_and_delete({"_id": to_object_id(user_id)})

    async def list(self, **filters) -> Tuple[List[Dict[str, Any]], int]:
        """Return one page of users and the total number matching the filters."""
        pipeline, count_pipeline = build_user_list_pipeline(**filters)

        users, count_result = await asyncio.gather(
            self._aggregate(pipeline), self._aggregate(count_pipeline)
        )
        total = count_result[0]["total"] if count_result else 0

        return users, total

    async def _aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        cursor = await self.collection.aggregate(pipeline)
        return await cursor.to_list(length=None)
