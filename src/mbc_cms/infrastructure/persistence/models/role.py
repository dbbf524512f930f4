"""SQLAlchemy model for the roles table."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mbc_cms.infrastructure.persistence.database import Base, utc_now


class RoleModel(Base):
    """SQLAlchemy model for the roles table.

    Attributes:
        id: Primary key (UUID string).
        name: Role name. Not unique.
        created_at: Timestamp when the role was created.
        updated_at: Timestamp when the role was last updated.
    """

    __tablename__ = "roles"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Role ID (UUID)",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Role name (e.g., 'System Admin', 'Editor')",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    permissions: Mapped[list["RolePermissionModel"]] = relationship(  # noqa: F821
        "RolePermissionModel",
        back_populates="role",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, name={self.name})>"
