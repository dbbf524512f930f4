"""Persistence repositories for database operations."""

from mbc_cms.infrastructure.persistence.repositories.permission_store import (
    PermissionStore,
)
from mbc_cms.infrastructure.persistence.repositories.user_repository import (
    UserConflictError,
    UserRepository,
    to_user,
)

__all__ = [
    "UserConflictError",
    "PermissionStore",
    "UserRepository",
    "to_user",
]
