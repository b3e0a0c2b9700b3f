"""FastAPI dependencies shared by the API routers."""

from fastapi import Depends, Request

from user_bio_service.config import Settings, get_settings
from user_bio_service.database import RoleRepository, UserRepository, get_database
from user_bio_service.services import BioOrchestrator, UserService


def get_bio_orchestrator(
    request: Request, settings: Settings = Depends(get_settings)
) -> BioOrchestrator:
    """Return the application's orchestrator, creating it on first use."""
    orchestrator = getattr(request.app.state, "bio_orchestrator", None)
    if orchestrator is None:
        orchestrator = BioOrchestrator.from_settings(settings)
        request.app.state.bio_orchestrator = orchestrator
    return orchestrator


def get_user_service(
    bio_orchestrator: BioOrchestrator = Depends(get_bio_orchestrator),
) -> UserService:
    db = get_database()
    return UserService(
        users=UserRepository(db),
        roles=RoleRepository(db),
        bio_orchestrator=bio_orchestrator,
    )
