"""Permission store for role and role permission rows.

The store works inside the caller's session and never commits, so the Role
Manager decides the transaction boundary. Every SQLAlchemy failure surfaces
as a StoreError.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mbc_cms.core.exceptions import StoreError
from mbc_cms.core.logging import get_logger
from mbc_cms.domain.entities import Role, RolePermission
from mbc_cms.infrastructure.persistence.models import RoleModel, RolePermissionModel

logger = get_logger(__name__)


def to_role(model: RoleModel) -> Role:
    return Role(
        id=model.id,
        name=model.name,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def to_role_permission(model: RolePermissionModel) -> RolePermission:
    return RolePermission(
        id=model.id,
        role_id=model.role_id,
        permission_name=model.permission_name,
        permission_level=model.permission_level,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class PermissionStore:
    """Durable CRUD for roles and their permissions."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the store.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def insert_role(self, name: str) -> str:
        """Create a role.

        Args:
            name: Role name.

        Returns:
            The new role ID.

        Raises:
            StoreError: On constraint violation or connectivity loss.
        """
        role = RoleModel(name=name)
        try:
            self.session.add(role)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to insert new role", role_name=name, error=str(e))
            raise StoreError(f"Failed to insert role '{name}': {e}") from e
        return role.id

    async def insert_permission(self, role_id: str, name: str, level: int) -> None:
        """Append one permission row under an existing role.

        Args:
            role_id: Owning role ID.
            name: Permission name.
            level: Permission level.

        Raises:
            StoreError: If the role does not exist, the role already holds the
                permission name, or the store is unreachable.
        """
        permission = RolePermissionModel(
            role_id=role_id,
            permission_name=name,
            permission_level=level,
        )
        try:
            self.session.add(permission)
            await self.session.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to insert new role permission",
                role_id=role_id,
                permission_name=name,
                error=str(e),
            )
            raise StoreError(
                f"Failed to insert permission '{name}' for role {role_id}: {e}"
            ) from e

    async def delete_permission(self, role_id: str, name: str) -> int:
        """Delete every row matching (role_id, name).

        Deleting a permission the role does not hold is not an error.

        Args:
            role_id: Owning role ID.
            name: Permission name.

        Returns:
            Number of rows deleted.

        Raises:
            StoreError: On connectivity loss or query failure.
        """
        try:
            result = await self.session.execute(
                delete(RolePermissionModel).where(
                    RolePermissionModel.role_id == role_id,
                    RolePermissionModel.permission_name == name,
                )
            )
        except SQLAlchemyError as e:
            logger.error(
                "Failed to delete role permission",
                role_id=role_id,
                permission_name=name,
                error=str(e),
            )
            raise StoreError(
                f"Failed to delete permission '{name}' for role {role_id}: {e}"
            ) from e
        return result.rowcount or 0

    async def get_role(self, role_id: str) -> Role | None:
        """Get a role by ID.

        Args:
            role_id: Role ID.

        Returns:
            Role if found, None otherwise.

        Raises:
            StoreError: On connectivity loss or query failure.
        """
        try:
            result = await self.session.execute(
                select(RoleModel).where(RoleModel.id == role_id)
            )
            model = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to get role", role_id=role_id, error=str(e))
            raise StoreError(f"Failed to get role {role_id}: {e}") from e
        return to_role(model) if model is not None else None

    async def get_role_by_name(self, name: str) -> Role | None:
        """Get the earliest created role with the given name.

        Args:
            name: Role name.

        Returns:
            Role if found, None otherwise.

        Raises:
            StoreError: On connectivity loss or query failure.
        """
        try:
            result = await self.session.execute(
                select(RoleModel)
                .where(RoleModel.name == name)
                .order_by(RoleModel.created_at, RoleModel.id)
                .limit(1)
            )
            model = result.scalars().first()
        except SQLAlchemyError as e:
            logger.error("Failed to get role by name", role_name=name, error=str(e))
            raise StoreError(f"Failed to get role '{name}': {e}") from e
        return to_role(model) if model is not None else None

    async def list_permissions(self, role_id: str) -> list[RolePermission]:
        """List all permissions of a role.

        Args:
            role_id: Role ID.

        Returns:
            Permissions of the role, empty if the role has none or does not exist.

        Raises:
            StoreError: On connectivity loss or query failure.
        """
        try:
            result = await self.session.execute(
                select(RolePermissionModel)
                .where(RolePermissionModel.role_id == role_id)
                .order_by(RolePermissionModel.created_at, RolePermissionModel.permission_name)
            )
            models = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to get role permissions", role_id=role_id, error=str(e))
            raise StoreError(f"Failed to list permissions for role {role_id}: {e}") from e
        return [to_role_permission(model) for model in models]
