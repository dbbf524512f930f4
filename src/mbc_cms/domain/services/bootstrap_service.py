"""First-run bootstrap of the system administrator and default role.

On startup the default role is created with its initial permission set if
no role carries its name, then the admin user is created if no user holds
the configured admin email. Concurrent startups race on the unique email
constraint; the loser treats the admin as already present.

Role names are not unique, so the role lookup has no such guard: two first
starts racing past the lookup each create a default role. The admin stays
attached to whichever role won the email race, the other role is left
without users, and later starts always pick the earliest-created one.
"""

from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mbc_cms.core.config import Settings
from mbc_cms.core.exceptions import BootstrapError, StoreError
from mbc_cms.core.logging import get_logger
from mbc_cms.domain.services.role_manager import RoleManager
from mbc_cms.infrastructure.auth import hash_password
from mbc_cms.infrastructure.persistence.models import UserModel
from mbc_cms.infrastructure.persistence.repositories import (
    UserConflictError,
    UserRepository,
)

logger = get_logger(__name__)


@dataclass
class BootstrapResult:
    """Outcome of a bootstrap run.

    Attributes:
        role_id: ID of the default role.
        role_created: Whether this run created the default role.
        admin_created: Whether this run created the admin user.
    """

    role_id: str
    role_created: bool
    admin_created: bool


class BootstrapService:
    """Ensures the admin identity and default role exist."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        role_manager: RoleManager | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings
        self.role_manager = role_manager or RoleManager(
            session_factory, settings.permission_level_comparison
        )

    async def ensure_default_role(self) -> tuple[str, bool]:
        """Find or create the default role.

        Returns:
            Tuple of (role_id, created).
        """
        name = self.settings.default_role_name
        role = await self.role_manager.get_role_by_name(name)
        if role is not None:
            logger.debug("Default role already exists", role_id=role.id, role_name=name)
            return role.id, False

        role_id = await self.role_manager.create_role_with_permissions(
            name, list(self.settings.default_role_permissions.items())
        )
        logger.info("Created default role", role_id=role_id, role_name=name)
        return role_id, True

    async def ensure_admin_user(self, role_id: str) -> bool:
        """Create the admin user unless one with the admin email exists.

        Args:
            role_id: Role assigned to a newly created admin.

        Returns:
            True if this call created the admin user.
        """
        email = self.settings.admin_email

        async with self.session_factory() as session:
            user_repo = UserRepository(session)
            if await user_repo.get_by_email(email) is not None:
                logger.info("Admin user already exists", email=email)
                return False

            user = UserModel(
                email=email,
                password_hash=hash_password(self.settings.admin_password),
                role_id=role_id,
                active=True,
            )
            try:
                await user_repo.create(user)
                await session.commit()
            except UserConflictError:
                await session.rollback()
                if await user_repo.get_by_email(email) is not None:
                    logger.info("Admin user was created concurrently", email=email)
                    return False
                raise
            except SQLAlchemyError as e:
                await session.rollback()
                raise StoreError(f"Failed to commit admin user: {e}") from e

        logger.info("Created admin user", email=email, user_id=user.id)
        return True

    async def run(self) -> BootstrapResult:
        """Ensure the default role and the admin user exist.

        Raises:
            BootstrapError: If the store fails during either step.
        """
        try:
            role_id, role_created = await self.ensure_default_role()
            admin_created = await self.ensure_admin_user(role_id)
        except StoreError as e:
            logger.error("Bootstrap failed", error=e.message)
            raise BootstrapError(f"Bootstrap failed: {e.message}") from e
        return BootstrapResult(
            role_id=role_id,
            role_created=role_created,
            admin_created=admin_created,
        )
