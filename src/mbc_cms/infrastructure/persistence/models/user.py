"""SQLAlchemy model for the users table."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from mbc_cms.infrastructure.persistence.database import Base


class UserModel(Base):
    """SQLAlchemy model for the users table.

    The role reference is stored in the ``role`` column and exposed as
    ``role_id``. Deleting a role does not cascade to its users.

    Attributes:
        id: Primary key (UUID string).
        email: Unique login identifier.
        password_hash: Argon2 password hash.
        role_id: Foreign key to roles table.
        active: Whether the account is usable.
        mfa_enabled: Whether multi-factor authentication is enabled.
        mfa_verified: Whether multi-factor enrolment was verified.
        mfa_secret: Multi-factor shared secret.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="User ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password (argon2)",
    )
    role_id: Mapped[str] = mapped_column(
        "role",
        String(36),
        ForeignKey("roles.id"),
        nullable=False,
        index=True,
        comment="Foreign key to roles table",
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="1",
    )
    mfa_enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="0",
    )
    mfa_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="0",
    )
    mfa_secret: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
        server_default="",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role_id={self.role_id})>"
