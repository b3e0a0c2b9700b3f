"""Integration tests for per-IP rate limiting."""

import pytest

from user_bio_service.api.dependencies import get_bio_orchestrator, get_user_service
from user_bio_service.config import settings
from user_bio_service.middleware.rate_limit import limiter
from user_bio_service.services import UserService


def limit_amount(limit: str) -> int:
    """Request count of a limit string such as ``10/minute``."""
    return int(limit.split("/")[0])


@pytest.fixture
def limited_client(app, client):
    """Client with the limiter switched on and its counters cleared."""
    limiter.enabled = True
    limiter.reset()
    yield client
    limiter.reset()
    limiter.enabled = False


@pytest.mark.integration
class TestRateLimiting:
    """Test rate limiting integration."""

    def test_ai_status_limit(self, app, limited_client, make_orchestrator):
        app.dependency_overrides[get_bio_orchestrator] = lambda: make_orchestrator()
        allowed = limit_amount(settings.rate_limit_ai)

        statuses = [limited_client.get("/api/users/ai/status").status_code for _ in range(allowed + 2)]

        assert statuses == [200] * allowed + [429, 429]
        response = limited_client.get("/api/users/ai/status")
        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "error": "Too many AI service requests from this IP, please try again later.",
        }

    def test_create_user_limit(
        self,
        app,
        limited_client,
        user_repository,
        role_repository,
        bio_orchestrator,
        role_doc,
        user_doc,
    ):
        user_repository.create.return_value = str(user_doc["_id"])
        user_repository.find_by_id.return_value = user_doc
        service = UserService(user_repository, role_repository, bio_orchestrator)
        app.dependency_overrides[get_user_service] = lambda: service
        payload = {"name": "Jane Doe", "email": "jane@example.com", "role": str(role_doc["_id"])}
        allowed = limit_amount(settings.rate_limit_create_user)

        statuses = [limited_client.post("/api/users", json=payload).status_code for _ in range(allowed)]
        response = limited_client.post("/api/users", json=payload)

        assert statuses == [201] * allowed
        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "error": "Too many user creation attempts from this IP, please try again later.",
        }
        assert user_repository.create.await_count == allowed

    def test_limits_apply_per_route(self, app, limited_client, make_orchestrator):
        app.dependency_overrides[get_bio_orchestrator] = lambda: make_orchestrator()
        allowed = limit_amount(settings.rate_limit_ai)

        for _ in range(allowed + 1):
            limited_client.get("/api/users/ai/status")

        assert limited_client.get("/api/users/status-options").status_code == 200

    def test_reset_clears_counters(self, app, limited_client, make_orchestrator):
        app.dependency_overrides[get_bio_orchestrator] = lambda: make_orchestrator()
        allowed = limit_amount(settings.rate_limit_ai)

        for _ in range(allowed + 1):
            limited_client.get("/api/users/ai/status")
        limiter.reset()

        assert limited_client.get("/api/users/ai/status").status_code == 200
