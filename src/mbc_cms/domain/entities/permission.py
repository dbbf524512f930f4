"""Permission entity for role-based access control.

A role permission grants one named capability (e.g. ``articles.edit``) to a
role at an integer level. What each level means is up to the caller.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

PermissionGrant = tuple[str, int]

# Levels are stored in a signed 64-bit column
MIN_PERMISSION_LEVEL = -(2**63)
MAX_PERMISSION_LEVEL = 2**63 - 1


@dataclass
class RolePermission:
    """Permission row owned by a role.

    Attributes:
        id: Unique identifier (UUID string).
        role_id: Owning role.
        permission_name: Capability key.
        permission_level: Level granted for the capability.
        created_at: Timestamp when created.
        updated_at: Timestamp when last updated.
    """

    id: str
    role_id: str
    permission_name: str
    permission_level: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate permission after initialization."""
        if not self.role_id:
            raise ValueError("Role ID is required")
        if not self.permission_name:
            raise ValueError("Permission name is required")

    def as_grant(self) -> PermissionGrant:
        """Return the (name, level) pair this row grants."""
        return self.permission_name, self.permission_level


def validate_grants(permissions: Iterable[tuple[str, int]]) -> list[PermissionGrant]:
    """Normalize and validate a sequence of (name, level) pairs.

    Args:
        permissions: Pairs of permission name and level.

    Returns:
        The pairs as a list of tuples.

    Raises:
        ValueError: If a pair is malformed, a name is empty, or a level is not an
            int within the signed 64-bit range.
    """
    grants: list[PermissionGrant] = []
    for permission in permissions:
        if not isinstance(permission, (tuple, list)) or len(permission) != 2:
            raise ValueError(f"Permission must be a (name, level) pair, got {permission!r}")
        name, level = permission
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Permission name must be a non-empty string")
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValueError(f"Permission level for '{name}' must be an integer")
        if not MIN_PERMISSION_LEVEL <= level <= MAX_PERMISSION_LEVEL:
            raise ValueError(f"Permission level for '{name}' is out of range: {level}")
        grants.append((name, level))
    return grants
