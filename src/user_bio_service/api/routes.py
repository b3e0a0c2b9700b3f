"""API router aggregating the resource routers."""

from fastapi import APIRouter

from user_bio_service import __version__

from .users import router as users_router

api_router = APIRouter(
    responses={
        404: {"description": "Not found"},
        500: {"description": "Internal server error"},
    }
)

api_router.include_router(users_router)


@api_router.get("")
async def index():
    """Endpoint index."""
    return {
        "success": True,
        "message": "User Bio Service API",
        "version": __version__,
        "endpoints": {
            "users": {
                "POST /api/users": "Create a new user with a generated bio",
                "POST /api/users/list": "List users (pagination, search, filtering)",
                "GET /api/users/{id}": "Get user by ID",
                "PUT /api/users/{id}": "Update user by ID",
                "DELETE /api/users/{id}": "Delete user by ID",
                "GET /api/users/roles": "List active roles",
                "POST /api/users/roles": "Create a role",
                "GET /api/users/status-options": "List user status options",
                "GET /api/users/ai/status": "Get AI service status",
                "POST /api/users/ai/test-bio": "Generate a bio without creating a user",
            }
        },
    }
