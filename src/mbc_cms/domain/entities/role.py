"""Role entity for authorization.

Roles own a set of named permissions, each at an integer level.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Role:
    """Role entity.

    Attributes:
        id: Unique identifier (UUID string).
        name: Human-readable label. Not required to be unique.
        created_at: Timestamp when the role was created.
        updated_at: Timestamp when the role was last updated.
    """

    id: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate role data after initialization."""
        if not self.id:
            raise ValueError("Role ID is required")
        if not self.name:
            raise ValueError("Role name is required")
