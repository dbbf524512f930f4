"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from mbc_cms.core.exceptions import StoreError
from mbc_cms.core.logging import get_logger
from mbc_cms.domain.entities import User
from mbc_cms.infrastructure.persistence.models import UserModel

logger = get_logger(__name__)


class UserConflictError(StoreError):
    """Raised when a user insert violates an integrity constraint.

    Usually the email is already taken; an unknown role also lands here.
    """


def to_user(model: UserModel) -> User:
    return User(
        id=model.id,
        email=model.email,
        role_id=model.role_id,
        active=model.active,
        mfa_enabled=model.mfa_enabled,
        mfa_verified=model.mfa_verified,
        mfa_secret=model.mfa_secret,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user.

        Args:
            user: User model to create.

        Returns:
            Created user model.

        Raises:
            UserConflictError: If the email is taken or the role does not exist.
            StoreError: On any other store failure.
        """
        try:
            self.session.add(user)
            await self.session.flush()
        except IntegrityError as e:
            logger.warning("User insert violated a constraint", email=user.email, error=str(e))
            raise UserConflictError(f"User '{user.email}' conflicts with existing data: {e}") from e
        except SQLAlchemyError as e:
            logger.error("Failed to insert user", email=user.email, error=str(e))
            raise StoreError(f"Failed to insert user '{user.email}': {e}") from e
        return user

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by email.

        Args:
            email: User email address.

        Returns:
            User model if found, None otherwise.
        """
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.email == email)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to query user", email=email, error=str(e))
            raise StoreError(f"Failed to query user '{email}': {e}") from e

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID (UUID string).

        Returns:
            User model if found, None otherwise.
        """
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.id == user_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to query user", user_id=user_id, error=str(e))
            raise StoreError(f"Failed to query user {user_id}: {e}") from e
