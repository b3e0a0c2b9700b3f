"""User and role request schemas."""

from typing import Annotated, Literal, Optional

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NAME_PATTERN = r"^[a-zA-Z\s]+$"
ROLE_NAME_PATTERN = r"^[A-Z\s_]+$"

UserStatus = Literal["ACTIVE", "INACTIVE"]
SortField = Literal["name", "email", "role", "status", "createdAt", "updatedAt"]


def _validate_object_id(v: str) -> str:
    if not ObjectId.is_valid(v):
        raise ValueError("Role must be a valid role ID")
    return v


ObjectIdStr = Annotated[str, AfterValidator(_validate_object_id)]


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )


class CreateUserRequest(_RequestModel):
    """Create user request."""

    name: str = Field(..., min_length=2, max_length=50, pattern=NAME_PATTERN)
    email: str = Field("", description="Email address; normalised by the service")
    role: ObjectIdStr = Field(..., description="Role ID")
    bio: Optional[str] = Field(None, max_length=1500, description="Ignored; bios are generated")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "email": "jane.doe@example.com",
                "role": "665f1c2b9d3e4a0012345678",
            }
        }
    )


class UpdateUserRequest(_RequestModel):
    """Partial user update. Unknown keys such as ``_id`` are dropped."""

    name: Optional[str] = Field(None, min_length=2, max_length=50, pattern=NAME_PATTERN)
    email: Optional[str] = None
    role: Optional[ObjectIdStr] = None
    status: Optional[UserStatus] = None
    bio: Optional[str] = Field(None, max_length=1500)


class ListUsersRequest(_RequestModel):
    """Body of POST /users/list."""

    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)
    status: Optional[UserStatus] = None
    search: Optional[str] = Field(None, max_length=100)
    role: Optional[str] = None
    sort_by: SortField = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class CreateRoleRequest(_RequestModel):
    """Create role request."""

    name: str = Field(..., min_length=2, max_length=50, pattern=ROLE_NAME_PATTERN)
    description: str = Field("", max_length=200)


class TestBioRequest(_RequestModel):
    """Ad-hoc bio generation request."""

    name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
