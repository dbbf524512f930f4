"""create_rbac_tables

Revision ID: 0001
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "roles",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Role ID (UUID)"),
        sa.Column(
            "name",
            sa.String(length=255),
            nullable=False,
            comment="Role name (e.g., 'System Admin', 'Editor')",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_roles_name", "roles", ["name"], unique=False)

    op.create_table(
        "roles_permissions",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Permission ID (UUID)"),
        sa.Column(
            "role_id",
            sa.String(length=36),
            nullable=False,
            comment="Foreign key to roles table",
        ),
        sa.Column(
            "permission_name",
            sa.String(length=255),
            nullable=False,
            comment="Capability key (e.g., 'articles.edit')",
        ),
        sa.Column(
            "permission_level",
            sa.BigInteger(),
            nullable=False,
            comment="Level granted for the capability",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "role_id", "permission_name", name="uq_roles_permissions_role_name"
        ),
    )
    op.create_index(
        "ix_roles_permissions_role_id", "roles_permissions", ["role_id"], unique=False
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False, comment="User ID (UUID)"),
        sa.Column("email", sa.String(length=255), nullable=False, comment="User email address"),
        sa.Column(
            "password_hash",
            sa.String(length=255),
            nullable=False,
            comment="Hashed password (argon2)",
        ),
        sa.Column(
            "role",
            sa.String(length=36),
            nullable=False,
            comment="Foreign key to roles table",
        ),
        sa.Column("active", sa.Boolean(), server_default="1", nullable=False),
        sa.Column("mfa_enabled", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("mfa_verified", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("mfa_secret", sa.String(length=255), server_default="", nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["role"], ["roles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_roles_permissions_role_id", table_name="roles_permissions")
    op.drop_table("roles_permissions")
    op.drop_index("ix_roles_name", table_name="roles")
    op.drop_table("roles")
