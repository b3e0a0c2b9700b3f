"""Test user and role workflows."""

import pytest
from bson import ObjectId

from user_bio_service.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationException,
)
from user_bio_service.providers.base import BioGenerationError, ProviderCallError
from user_bio_service.schemas import (
    CreateRoleRequest,
    CreateUserRequest,
    ListUsersRequest,
    UpdateUserRequest,
)
from user_bio_service.services import UserService
from user_bio_service.services.user_service import normalize_email, normalize_role_name


@pytest.fixture
def service(user_repository, role_repository, bio_orchestrator):
    return UserService(user_repository, role_repository, bio_orchestrator)


def create_request(role_doc, **overrides):
    data = {"name": "Jane Doe", "email": "  Jane@Example.COM ", "role": str(role_doc["_id"])}
    data.update(overrides)
    return CreateUserRequest(**data)


class TestNormalization:
    def test_normalize_email(self):
        assert normalize_email("  Jane@Example.COM ") == "jane@example.com"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_email(self, value):
        with pytest.raises(ValidationException) as exc_info:
            normalize_email(value)
        assert exc_info.value.message == "Email is required and cannot be empty"

    @pytest.mark.parametrize("value", ["plainaddress", "jane@", "@example.com", "ja ne@example.com"])
    def test_invalid_email(self, value):
        with pytest.raises(ValidationException):
            normalize_email(value)

    def test_email_too_long(self):
        with pytest.raises(ValidationException) as exc_info:
            normalize_email(("a" * 60 + ".") * 4 + "x@example.com")
        assert "too long" in exc_info.value.message

    def test_normalize_role_name(self):
        assert normalize_role_name("  team   lead ") == "TEAM_LEAD"


class TestCreateUser:
    """Test UserService.create_user"""

    @pytest.mark.asyncio
    async def test_creates_user_with_generated_bio(
        self, service, user_repository, bio_orchestrator, role_doc, user_doc
    ):
        user_repository.create.return_value = str(user_doc["_id"])
        user_repository.find_by_id.return_value = user_doc

        profile = await service.create_user(create_request(role_doc))

        bio_orchestrator.generate_bio.assert_awaited_once_with("Jane Doe", "DEVELOPER")
        user_repository.create.assert_awaited_once_with(
            "Jane Doe", "jane@example.com", role_doc["_id"], "A generated professional bio."
        )
        assert profile["id"] == str(user_doc["_id"])
        assert profile["role"]["name"] == "DEVELOPER"

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, service, user_repository, role_doc, user_doc):
        user_repository.find_by_email.return_value = user_doc

        with pytest.raises(ConflictException) as exc_info:
            await service.create_user(create_request(role_doc))

        assert exc_info.value.status_code == 409
        assert exc_info.value.details == {
            "conflictField": "email",
            "conflictValue": "jane@example.com",
        }
        user_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_role_rejected(self, service, role_repository, user_repository, role_doc):
        role_repository.find_by_id.return_value = None

        with pytest.raises(ValidationException) as exc_info:
            await service.create_user(create_request(role_doc))

        assert exc_info.value.message == "Invalid role ID provided"
        user_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bio_failure_aborts_creation(
        self, service, user_repository, bio_orchestrator, role_doc
    ):
        error = BioGenerationError(
            ProviderCallError("openai down", provider="openai"),
            ProviderCallError("gemini down", provider="gemini"),
        )
        bio_orchestrator.generate_bio.side_effect = error

        with pytest.raises(BioGenerationError):
            await service.create_user(create_request(role_doc))

        user_repository.create.assert_not_awaited()


class TestUpdateUser:
    """Test UserService.update_user"""

    @pytest.mark.asyncio
    async def test_partial_update_without_role_change(
        self, service, user_repository, bio_orchestrator, user_doc
    ):
        user_id = str(user_doc["_id"])
        user_repository.find_by_id.return_value = user_doc

        await service.update_user(user_id, UpdateUserRequest(status="INACTIVE"))

        user_repository.update.assert_awaited_once_with(user_id, {"status": "INACTIVE"})
        bio_orchestrator.generate_bio.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_role_change_regenerates_bio(
        self, service, user_repository, bio_orchestrator, role_doc, user_doc
    ):
        user_id = str(user_doc["_id"])
        user_repository.find_by_id.return_value = user_doc

        await service.update_user(user_id, UpdateUserRequest(role=str(role_doc["_id"])))

        bio_orchestrator.generate_bio.assert_awaited_once_with("Jane Doe", "DEVELOPER")
        user_repository.update.assert_any_await(user_id, {"bio": "A generated professional bio."})

    @pytest.mark.asyncio
    async def test_role_change_bio_failure_still_updates(
        self, service, user_repository, bio_orchestrator, role_doc, user_doc
    ):
        user_id = str(user_doc["_id"])
        user_repository.find_by_id.return_value = user_doc
        bio_orchestrator.generate_bio.side_effect = ProviderCallError("down", provider="openai")

        profile = await service.update_user(user_id, UpdateUserRequest(role=str(role_doc["_id"])))

        assert profile["bio"] == "Jane is a developer."
        user_repository.update.assert_awaited_once_with(user_id, {"role": str(role_doc["_id"])})

    @pytest.mark.asyncio
    async def test_email_is_normalized_and_unique(self, service, user_repository, user_doc):
        user_id = str(user_doc["_id"])
        user_repository.find_by_email.return_value = {"_id": ObjectId()}

        with pytest.raises(ConflictException):
            await service.update_user(user_id, UpdateUserRequest(email=" Other@Example.com"))

        user_repository.find_by_email.assert_awaited_once_with(
            "other@example.com", exclude_id=user_id
        )
        user_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_role_rejected(self, service, role_repository, user_doc):
        role_repository.find_by_id.return_value = None

        with pytest.raises(ValidationException):
            await service.update_user(
                str(user_doc["_id"]), UpdateUserRequest(role=str(ObjectId()))
            )

    @pytest.mark.asyncio
    async def test_missing_user(self, service, user_repository):
        user_repository.update.return_value = False

        with pytest.raises(NotFoundException):
            await service.update_user(str(ObjectId()), UpdateUserRequest(name="New Name"))

    @pytest.mark.asyncio
    async def test_invalid_id(self, service):
        with pytest.raises(ValidationException) as exc_info:
            await service.update_user("not-an-id", UpdateUserRequest(name="New Name"))
        assert exc_info.value.message == "Invalid user ID format"


class TestReadDelete:
    @pytest.mark.asyncio
    async def test_get_user(self, service, user_repository, user_doc):
        user_repository.find_by_id.return_value = user_doc

        profile = await service.get_user(str(user_doc["_id"]))

        assert profile["email"] == "jane@example.com"

    @pytest.mark.asyncio
    async def test_get_missing_user(self, service, user_repository):
        user_repository.find_by_id.return_value = None

        with pytest.raises(NotFoundException):
            await service.get_user(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_delete_returns_profile(self, service, user_repository, user_doc):
        raw = {k: v for k, v in user_doc.items() if k != "roleInfo"}
        user_repository.delete.return_value = raw

        profile = await service.delete_user(str(user_doc["_id"]))

        assert profile["role"] == str(user_doc["role"])

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, service, user_repository):
        user_repository.delete.return_value = None

        with pytest.raises(NotFoundException):
            await service.delete_user(str(ObjectId()))


class TestListUsers:
    @pytest.mark.asyncio
    async def test_pagination(self, service, user_repository, user_doc):
        user_repository.list.return_value = ([user_doc], 21)

        result = await service.list_users(ListUsersRequest(page=2, pageSize=10, search="jane"))

        assert len(result["data"]) == 1
        assert result["pagination"] == {
            "currentPage": 2,
            "totalPages": 3,
            "totalUsers": 21,
            "hasNextPage": True,
            "hasPrevPage": True,
            "pageSize": 10,
        }
        assert user_repository.list.await_args.kwargs["search"] == "jane"

    @pytest.mark.asyncio
    async def test_empty_result(self, service, user_repository):
        user_repository.list.return_value = ([], 0)

        result = await service.list_users(ListUsersRequest())

        assert result["data"] == []
        assert result["pagination"]["totalPages"] == 0
        assert result["pagination"]["hasNextPage"] is False


class TestRoles:
    @pytest.mark.asyncio
    async def test_create_role_normalizes_name(self, service, role_repository):
        role_repository.create.return_value = {"_id": ObjectId(), "name": "TEAM_LEAD"}

        role = await service.create_role(CreateRoleRequest(name="TEAM LEAD"))

        role_repository.find_by_name.assert_awaited_once_with("TEAM_LEAD")
        role_repository.create.assert_awaited_once_with("TEAM_LEAD", "")
        assert role["name"] == "TEAM_LEAD"

    @pytest.mark.asyncio
    async def test_duplicate_role(self, service, role_repository, role_doc):
        role_repository.find_by_name.return_value = role_doc

        with pytest.raises(ValidationException) as exc_info:
            await service.create_role(CreateRoleRequest(name="DEVELOPER"))

        assert exc_info.value.status_code == 400
        role_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_roles(self, service, role_repository, role_doc):
        role_repository.find_active.return_value = [role_doc]

        roles = await service.list_roles()

        assert roles[0]["id"] == str(role_doc["_id"])
        assert roles[0]["isActive"] is True

    def test_status_options(self):
        assert UserService.status_options() == ["ACTIVE", "INACTIVE"]
