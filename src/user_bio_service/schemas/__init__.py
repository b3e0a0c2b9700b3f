"""Request schemas."""

from .user import (
    CreateRoleRequest,
    CreateUserRequest,
    ListUsersRequest,
    TestBioRequest,
    UpdateUserRequest,
)

__all__ = [
    "CreateUserRequest",
    "UpdateUserRequest",
    "ListUsersRequest",
    "CreateRoleRequest",
    "TestBioRequest",
]
