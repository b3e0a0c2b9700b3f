"""User, role and bio endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status

from user_bio_service.middleware.rate_limit import ai_service_limit, create_user_limit
from user_bio_service.schemas import (
    CreateRoleRequest,
    CreateUserRequest,
    ListUsersRequest,
    TestBioRequest,
    UpdateUserRequest,
)
from user_bio_service.services import BioOrchestrator, UserService
from user_bio_service.telemetry import get_logger

from .dependencies import get_bio_orchestrator, get_user_service

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def envelope(message: str, data: Any, **extra: Any) -> Dict[str, Any]:
    return {"success": True, "message": message, "data": data, **extra}


@router.get("/ai/status")
@ai_service_limit
async def get_ai_status(
    request: Request,
    bio_orchestrator: BioOrchestrator = Depends(get_bio_orchestrator),
) -> Dict[str, Any]:
    """Report which bio providers are configured."""
    service_status = bio_orchestrator.get_status()
    return envelope(
        "AI service status retrieved",
        {
            "services": service_status.model_dump(by_alias=True),
            "configured": service_status.any_configured,
        },
    )


@router.post("/ai/test-bio")
@ai_service_limit
async def test_bio(
    request: Request,
    payload: TestBioRequest,
    bio_orchestrator: BioOrchestrator = Depends(get_bio_orchestrator),
) -> Dict[str, Any]:
    """Generate a bio without creating a user."""
    logger.info("Testing AI bio generation", name=payload.name, role=payload.role)
    bio = await bio_orchestrator.generate_bio(payload.name, payload.role)
    return envelope(
        "AI bio generated successfully",
        {"name": payload.name, "role": payload.role, "bio": bio},
    )


@router.get("/status-options")
async def get_status_options() -> Dict[str, Any]:
    return envelope("User status options retrieved successfully", UserService.status_options())


@router.get("/roles")
async def list_roles(service: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    roles = await service.list_roles()
    return envelope("Roles retrieved successfully", roles)


@router.post("/roles", status_code=status.HTTP_201_CREATED)
async def create_role(
    payload: CreateRoleRequest, service: UserService = Depends(get_user_service)
) -> Dict[str, Any]:
    role = await service.create_role(payload)
    return envelope("Role created successfully", role)


@router.post("", status_code=status.HTTP_201_CREATED)
@create_user_limit
async def create_user(
    request: Request,
    payload: CreateUserRequest,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Create a user; the bio is generated from the name and role."""
    user = await service.create_user(payload)
    return envelope("User created successfully", user)


@router.post("/list")
async def list_users(
    payload: ListUsersRequest, service: UserService = Depends(get_user_service)
) -> Dict[str, Any]:
    result = await service.list_users(payload)
    return envelope("Users retrieved successfully", result["data"], pagination=result["pagination"])


@router.get("/{user_id}")
async def get_user(user_id: str, service: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    user = await service.get_user(user_id)
    return envelope("User retrieved successfully", user)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: UpdateUserRequest,
    service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = await service.update_user(user_id, payload)
    return envelope("User updated successfully", user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: str, service: UserService = Depends(get_user_service)
) -> Dict[str, Any]:
    user = await service.delete_user(user_id)
    return envelope("User deleted successfully", {"deletedUser": user})
