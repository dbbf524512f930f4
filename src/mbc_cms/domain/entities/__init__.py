"""Domain entities for the MBC CMS API.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from mbc_cms.domain.entities.permission import (
    MAX_PERMISSION_LEVEL,
    MIN_PERMISSION_LEVEL,
    PermissionGrant,
    RolePermission,
    validate_grants,
)
from mbc_cms.domain.entities.role import Role
from mbc_cms.domain.entities.user import User

__all__ = [
    "MAX_PERMISSION_LEVEL",
    "MIN_PERMISSION_LEVEL",
    "PermissionGrant",
    "Role",
    "RolePermission",
    "User",
    "validate_grants",
]
