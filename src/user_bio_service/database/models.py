"""Document shapes for the users and roles collections."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

USERS_COLLECTION = "users"
ROLES_COLLECTION = "roles"

USER_STATUSES = ("ACTIVE", "INACTIVE")

DEFAULT_ROLES = [
    {"name": "ADMIN", "description": "System administrator with full access"},
    {"name": "USER", "description": "Regular user with basic access"},
    {"name": "MODERATOR", "description": "Content moderator with limited admin access"},
    {"name": "DEVELOPER", "description": "Software developer with technical access"},
    {"name": "MANAGER", "description": "Team manager with management access"},
]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_role_document(name: str, description: str = "") -> Dict[str, Any]:
    now = utcnow()
    return {
        "name": name,
        "description": description,
        "isActive": True,
        "createdAt": now,
        "updatedAt": now,
    }


def new_user_document(name: str, email: str, role_id: Any, bio: str = "") -> Dict[str, Any]:
    now = utcnow()
    return {
        "name": name,
        "email": email,
        "role": role_id,
        "status": "ACTIVE",
        "bio": bio,
        "createdAt": now,
        "updatedAt": now,
    }


def role_summary(role: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Reduce a role document to the fields embedded in user profiles."""
    if not role:
        return None
    return {
        "id": str(role["_id"]),
        "name": role.get("name"),
        "description": role.get("description", ""),
    }


def role_public_profile(role: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(role["_id"]),
        "name": role.get("name"),
        "description": role.get("description", ""),
        "isActive": role.get("isActive", True),
        "createdAt": role.get("createdAt"),
        "updatedAt": role.get("updatedAt"),
    }


def user_public_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """Public view of a user document.

    ``role`` is the populated role summary when the document carries a
    ``roleInfo`` lookup result, otherwise the raw role id.
    """
    role = role_summary(user.get("roleInfo"))
    if role is None and user.get("role") is not None:
        role = user["role"] if isinstance(user["role"], dict) else str(user["role"])
    return {
        "id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "role": role,
        "status": user.get("status", "ACTIVE"),
        "bio": user.get("bio", ""),
        "createdAt": user.get("createdAt"),
        "updatedAt": user.get("updatedAt"),
    }
