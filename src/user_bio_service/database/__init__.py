"""Database module for persistence layer."""

from .client import close_db, ensure_indexes, get_database, init_db, is_connected
from .repositories import RoleRepository, UserRepository

__all__ = [
    "init_db",
    "close_db",
    "ensure_indexes",
    "get_database",
    "is_connected",
    "RoleRepository",
    "UserRepository",
]
