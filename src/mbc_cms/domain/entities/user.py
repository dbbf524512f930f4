"""User entity for identity and authority checks.

A user references exactly one role. Multi-factor fields are carried but
opaque to the RBAC core.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """User entity representing an authenticated principal.

    Attributes:
        id: Unique identifier (UUID string).
        email: Unique login identifier.
        role_id: Foreign key to the user's single role.
        active: Whether the account is usable. Enforced by collaborators, not the core.
        mfa_enabled: Whether multi-factor authentication is enabled.
        mfa_verified: Whether multi-factor enrolment was verified.
        mfa_secret: Multi-factor shared secret.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
    """

    id: str
    email: str
    role_id: str
    active: bool = True
    mfa_enabled: bool = False
    mfa_verified: bool = False
    mfa_secret: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Validate user data after initialization."""
        if not self.id:
            raise ValueError("User ID is required")
        if not self.email:
            raise ValueError("Email is required")
        if not self.role_id:
            raise ValueError("Role ID is required")

    def is_system_admin(self, admin_email: str | None) -> bool:
        """Check whether this user is the configured system administrator.

        Args:
            admin_email: The configured admin email, passed in by the caller.
        """
        from mbc_cms.domain.services.authority import is_system_administrator

        return is_system_administrator(self, admin_email)
