"""Role manager: the authorization decision engine.

The role manager creates roles, attaches and detaches permissions, and
answers whether a role holds a permission at a given level. It keeps no
state of its own; every call checks a session out of the shared pool, so
concurrent checks need no locking.

Multi-row writes run in a single transaction: either every row is committed
or none is.
"""

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from typing import Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mbc_cms.core.exceptions import AuthorizationError, StoreError
from mbc_cms.core.logging import get_logger
from mbc_cms.domain.entities import Role, RolePermission, validate_grants
from mbc_cms.infrastructure.persistence.repositories import PermissionStore

logger = get_logger(__name__)

LevelComparison = Literal["exact", "at_least"]


class RoleManager:
    """Creates roles, manages their permissions and answers authorization queries.

    Args:
        session_factory: Factory producing sessions on the shared connection pool.
        level_comparison: ``"exact"`` grants only when the stored level equals the
            required level. ``"at_least"`` grants when it is greater or equal.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        level_comparison: LevelComparison = "exact",
    ) -> None:
        if level_comparison not in ("exact", "at_least"):
            raise ValueError(f"Unknown level comparison: {level_comparison!r}")
        self.session_factory = session_factory
        self.level_comparison = level_comparison

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[PermissionStore]:
        """Yield a store whose writes commit together or roll back together."""
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    yield PermissionStore(session)
        except SQLAlchemyError as e:
            logger.error("Transaction failed", error=str(e))
            raise StoreError(f"Transaction failed: {e}") from e

    @asynccontextmanager
    async def _read(self) -> AsyncIterator[PermissionStore]:
        async with self.session_factory() as session:
            yield PermissionStore(session)

    async def create_role_with_permissions(
        self,
        name: str,
        permissions: Iterable[tuple[str, int]],
    ) -> str:
        """Create a role and attach its permissions atomically.

        Args:
            name: Role name.
            permissions: (permission name, level) pairs.

        Returns:
            The new role ID.

        Raises:
            ValueError: If the name is empty or a permission pair is malformed.
            StoreError: If any insert fails. Nothing is committed in that case.
        """
        if not name or not name.strip():
            raise ValueError("Role name is required")
        grants = validate_grants(permissions)

        async with self._transaction() as store:
            role_id = await store.insert_role(name)
            for permission_name, permission_level in grants:
                await store.insert_permission(role_id, permission_name, permission_level)

        logger.info(
            "Role created",
            role_id=role_id,
            role_name=name,
            permissions=[permission_name for permission_name, _ in grants],
        )
        return role_id

    async def add_permissions(
        self,
        role_id: str,
        permissions: Iterable[tuple[str, int]],
    ) -> None:
        """Attach permissions to an existing role atomically.

        Args:
            role_id: Role ID.
            permissions: (permission name, level) pairs.

        Raises:
            ValueError: If a permission pair is malformed.
            StoreError: If the role does not exist, already holds one of the
                names, or the store fails. Nothing is committed in that case.
        """
        grants = validate_grants(permissions)
        if not grants:
            return

        async with self._transaction() as store:
            for permission_name, permission_level in grants:
                await store.insert_permission(role_id, permission_name, permission_level)

        logger.info(
            "Role permissions added",
            role_id=role_id,
            permissions=[permission_name for permission_name, _ in grants],
        )

    async def remove_permissions(
        self,
        role_id: str,
        permission_names: Iterable[str],
    ) -> None:
        """Detach permissions from a role.

        Names the role does not hold are ignored, so repeating a removal is
        harmless.

        Args:
            role_id: Role ID.
            permission_names: Names of the permissions to remove.

        Raises:
            StoreError: If the store fails. Nothing is committed in that case.
        """
        names = list(permission_names)
        if not names:
            return

        removed = 0
        async with self._transaction() as store:
            for permission_name in names:
                removed += await store.delete_permission(role_id, permission_name)

        logger.info(
            "Role permissions removed",
            role_id=role_id,
            permissions=names,
            rows_deleted=removed,
        )

    async def get_role(self, role_id: str) -> Role | None:
        """Get a role by ID, or None if it does not exist."""
        async with self._read() as store:
            return await store.get_role(role_id)

    async def get_role_by_name(self, name: str) -> Role | None:
        """Get the earliest created role with the given name, or None."""
        async with self._read() as store:
            return await store.get_role_by_name(name)

    async def list_permissions(self, role_id: str) -> list[RolePermission]:
        """List the permissions of a role. Unknown roles have none."""
        async with self._read() as store:
            return await store.list_permissions(role_id)

    def _level_grants(self, stored_level: int, required_level: int) -> bool:
        if self.level_comparison == "at_least":
            return stored_level >= required_level
        return stored_level == required_level

    async def has_permission(
        self,
        role_id: str,
        permission_name: str,
        required_level: int,
    ) -> bool:
        """Check whether a role holds a permission at the required level.

        The first permission row with a matching name decides. With the default
        exact comparison, holding level 2 does not satisfy a request for level 1.

        Args:
            role_id: Role ID.
            permission_name: Permission the caller requires.
            required_level: Level the caller requires.

        Returns:
            True if granted. False if the role lacks the name, holds it at
            another level, or does not exist.

        Raises:
            AuthorizationError: If the store fails. A store failure is never a deny.
        """
        try:
            permissions = await self.list_permissions(role_id)
        except StoreError as e:
            logger.error(
                "Authorization check failed",
                role_id=role_id,
                permission_name=permission_name,
                error=e.message,
            )
            raise AuthorizationError(
                f"Could not check permission '{permission_name}' for role {role_id}",
                store_error=e,
            ) from e

        permission = next(
            (p for p in permissions if p.permission_name == permission_name),
            None,
        )
        granted = permission is not None and self._level_grants(
            permission.permission_level, required_level
        )

        logger.debug(
            "Authorization decision",
            role_id=role_id,
            permission_name=permission_name,
            required_level=required_level,
            granted=granted,
        )
        return granted

    async def authorize(
        self,
        role_id: str,
        permission_name: str,
        required_level: int,
    ) -> bool:
        """Inbound authorization query for request handlers.

        Same contract as :meth:`has_permission`.
        """
        return await self.has_permission(role_id, permission_name, required_level)
