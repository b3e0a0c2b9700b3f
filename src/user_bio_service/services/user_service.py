"""User and role workflows, including bio generation on create and role change."""

import math
import re
import time
from typing import Any, Dict, List, Optional

from bson import ObjectId

from user_bio_service.database.models import (
    USER_STATUSES,
    role_public_profile,
    user_public_profile,
)
from user_bio_service.database.repositories import RoleRepository, UserRepository
from user_bio_service.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)
from user_bio_service.schemas import (
    CreateRoleRequest,
    CreateUserRequest,
    ListUsersRequest,
    UpdateUserRequest,
)
from user_bio_service.telemetry import get_logger

from .bio_orchestrator import BioOrchestrator

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
MAX_EMAIL_LENGTH = 254


def normalize_email(email: Optional[str]) -> str:
    """Trim, lowercase and validate an email address."""
    if not email or not email.strip():
        raise ValidationException("Email is required and cannot be empty", field="email")

    normalized = email.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationException("Please provide a valid email address format", field="email")
    if len(normalized) > MAX_EMAIL_LENGTH:
        raise ValidationException(
            f"Email address is too long (maximum {MAX_EMAIL_LENGTH} characters)", field="email"
        )
    return normalized


def normalize_role_name(name: str) -> str:
    """``"team lead"`` -> ``"TEAM_LEAD"``."""
    return re.sub(r"\s+", "_", name.strip()).upper()


def validate_object_id(value: str, message: str = "Invalid user ID format") -> str:
    if not ObjectId.is_valid(value):
        raise ValidationException(message, field="id")
    return value


class UserService:
    """Orchestrates repositories and bio generation for the users API."""

    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        bio_orchestrator: BioOrchestrator,
    ):
        self.users = users
        self.roles = roles
        self.bio_orchestrator = bio_orchestrator

    async def create_user(self, request: CreateUserRequest) -> Dict[str, Any]:
        """Create a user with a generated bio. Fails if the bio cannot be generated."""
        logger.info("Starting user creation process", name=request.name, role_id=request.role)

        email = normalize_email(request.email)

        existing = await self.users.find_by_email(email)
        if existing:
            logger.warning(
                "User creation failed: email already exists",
                existing_user_id=str(existing["_id"]),
            )
            raise ConflictException(
                "A user with this email address already exists", field="email", value=email
            )

        role = await self.roles.find_by_id(request.role)
        if not role:
            logger.error("Role validation failed: invalid role ID", role_id=request.role)
            raise ValidationException("Invalid role ID provided", field="role")

        bio_start = time.perf_counter()
        try:
            bio = await self.bio_orchestrator.generate_bio(request.name, role["name"])
        except Exception as e:
            logger.error(
                "AI bio generation failed",
                error=str(e),
                user_name=request.name,
                role_name=role["name"],
            )
            raise
        logger.info(
            "AI bio generated",
            duration_ms=round((time.perf_counter() - bio_start) * 1000),
            bio_length=len(bio),
        )

        user_id = await self.users.create(request.name, email, role["_id"], bio)
        user = await self.users.find_by_id(user_id)
        logger.info("User created", user_id=user_id)
        return user_public_profile(user)

    async def list_users(self, request: ListUsersRequest) -> Dict[str, Any]:
        users, total = await self.users.list(
            page=request.page,
            page_size=request.page_size,
            status=request.status,
            role=request.role,
            search=request.search,
            sort_by=request.sort_by,
            sort_order=request.sort_order,
        )
        total_pages = math.ceil(total / request.page_size)
        logger.info(
            "Retrieved users",
            count=len(users),
            page=request.page,
            total=total,
        )
        return {
            "data": [user_public_profile(user) for user in users],
            "pagination": {
                "currentPage": request.page,
                "totalPages": total_pages,
                "totalUsers": total,
                "hasNextPage": request.page < total_pages,
                "hasPrevPage": request.page > 1,
                "pageSize": request.page_size,
            },
        }

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        validate_object_id(user_id)
        user = await self.users.find_by_id(user_id)
        if not user:
            raise NotFoundException("User not found")
        return user_public_profile(user)

    async def update_user(self, user_id: str, request: UpdateUserRequest) -> Dict[str, Any]:
        """Apply a partial update; a role change regenerates the bio on a best-effort basis."""
        validate_object_id(user_id)
        updates = request.model_dump(exclude_unset=True, exclude_none=True)

        role = None
        if "role" in updates:
            role = await self.roles.find_by_id(updates["role"])
            if not role:
                raise ValidationException("Invalid role ID provided", field="role")

        if "email" in updates:
            updates["email"] = normalize_email(updates["email"])
            if await self.users.find_by_email(updates["email"], exclude_id=user_id):
                raise ConflictException(
                    "A user with this email address already exists",
                    field="email",
                    value=updates["email"],
                )

        if not await self.users.update(user_id, updates):
            raise NotFoundException("User not found")

        user = await self.users.find_by_id(user_id)

        if role is not None:
            try:
                logger.info("Regenerating bio", user_id=user_id, role_name=role["name"])
                bio = await self.bio_orchestrator.generate_bio(user["name"], role["name"])
            except Exception as e:
                logger.warning("Failed to regenerate bio", user_id=user_id, error=str(e))
            else:
                await self.users.update(user_id, {"bio": bio})
                user = await self.users.find_by_id(user_id)

        logger.info("User updated successfully", user_id=user_id)
        return user_public_profile(user)

    async def delete_user(self, user_id: str) -> Dict[str, Any]:
        validate_object_id(user_id)
        user = await self.users.delete(user_id)
        if not user:
            raise NotFoundException("User not found")
        logger.info("User deleted successfully", user_id=user_id)
        return user_public_profile(user)

    async def list_roles(self) -> List[Dict[str, Any]]:
        roles = await self.roles.find_active()
        return [role_public_profile(role) for role in roles]

    async def create_role(self, request: CreateRoleRequest) -> Dict[str, Any]:
        name = normalize_role_name(request.name)
        if await self.roles.find_by_name(name):
            raise ValidationException("Role with this name already exists", field="name")

        role = await self.roles.create(name, request.description or "")
        logger.info("Role created", role_id=str(role["_id"]), requested=request.name, stored=name)
        return role_public_profile(role)

    async def initialize_default_roles(self) -> List[Dict[str, Any]]:
        roles = await self.roles.initialize_defaults()
        return [role_public_profile(role) for role in roles]

    @staticmethod
    def status_options() -> List[str]:
        return list(USER_STATUSES)
