"""Pytest configuration and fixtures."""

import os
from typing import Callable, List, Optional
from unittest.mock import AsyncMock, MagicMock

# Ensure test environment is set before imports
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ["OPENAI_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ.pop("MONGODB_URI", None)

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from user_bio_service.providers.base import BioProvider, GenerationRequest, ProviderCallError
from user_bio_service.services import BioOrchestrator, RetryHandler


class ScriptedProvider(BioProvider):
    """Provider that replays a script of results and exceptions."""

    def __init__(self, name: str, script: Optional[List] = None):
        super().__init__(api_key="test-key", model=f"{name}-model")
        self.name = name
        self.script = list(script or [])
        self.requests: List[GenerationRequest] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def build_prompt(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        return f"{request.subject_name}|{request.role_label}"

    async def send(self, prompt: str) -> str:
        if not self.script:
            raise AssertionError(f"{self.name} called more times than scripted")
        outcome = self.script.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def call_error(
    provider: str = "openai",
    status_code: Optional[int] = 500,
    error_code: Optional[str] = None,
    message: str = "upstream failure",
) -> ProviderCallError:
    return ProviderCallError(message, provider=provider, status_code=status_code, error_code=error_code)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_orchestrator(recording_sleep) -> Callable[..., BioOrchestrator]:
    """Build an orchestrator over scripted providers with no real waiting."""

    def factory(
        primary: Optional[List] = None,
        fallback: Optional[List] = None,
        max_attempts: int = 3,
        base_delay: float = 1.0,
    ) -> BioOrchestrator:
        return BioOrchestrator(
            primary=ScriptedProvider("openai", primary) if primary is not None else None,
            fallback=ScriptedProvider("gemini", fallback) if fallback is not None else None,
            retry_handler=RetryHandler(
                max_attempts=max_attempts, base_delay=base_delay, sleep=recording_sleep
            ),
        )

    return factory


@pytest.fixture
def role_doc():
    return {
        "_id": ObjectId(),
        "name": "DEVELOPER",
        "description": "Software developer with technical access",
        "isActive": True,
    }


@pytest.fixture
def user_doc(role_doc):
    return {
        "_id": ObjectId(),
        "name": "Jane Doe",
        "email": "jane@example.com",
        "role": role_doc["_id"],
        "roleInfo": role_doc,
        "status": "ACTIVE",
        "bio": "Jane is a developer.",
    }


@pytest.fixture
def user_repository():
    repo = AsyncMock()
    repo.find_by_email.return_value = None
    repo.update.return_value = True
    return repo


@pytest.fixture
def role_repository(role_doc):
    repo = AsyncMock()
    repo.find_by_id.return_value = role_doc
    repo.find_by_name.return_value = None
    return repo


@pytest.fixture
def bio_orchestrator():
    orchestrator = MagicMock(spec=BioOrchestrator)
    orchestrator.generate_bio.return_value = "A generated professional bio."
    return orchestrator


@pytest.fixture
def app():
    from user_bio_service.middleware.rate_limit import limiter
    from user_bio_service.server.main import app

    limiter.enabled = False
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def scripted_provider():
    return ScriptedProvider


@pytest.fixture
def make_call_error():
    return call_error
