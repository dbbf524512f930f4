"""SQLAlchemy model for the roles_permissions table.

Each row grants one named permission to a role at an integer level.
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mbc_cms.infrastructure.persistence.database import Base, utc_now


class RolePermissionModel(Base):
    """SQLAlchemy model for the roles_permissions table.

    A role holds at most one row per permission name.

    Attributes:
        id: Primary key (UUID string).
        role_id: Foreign key to roles table.
        permission_name: Capability key (e.g., 'articles.edit').
        permission_level: Integer level granted for the capability.
        created_at: Timestamp when the permission was created.
        updated_at: Timestamp when the permission was last updated.
    """

    __tablename__ = "roles_permissions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Permission ID (UUID)",
    )
    role_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to roles table",
    )
    permission_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Capability key (e.g., 'articles.edit')",
    )
    permission_level: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Level granted for the capability",
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
    role: Mapped["RoleModel"] = relationship(  # noqa: F821
        "RoleModel",
        back_populates="permissions",
    )

    __table_args__ = (
        UniqueConstraint(
            "role_id", "permission_name", name="uq_roles_permissions_role_name"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<RolePermission(id={self.id}, role_id={self.role_id}, "
            f"permission_name={self.permission_name}, level={self.permission_level})>"
        )
