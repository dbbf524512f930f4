"""FastAPI dependencies for authentication and authorization.

Request handlers resolve the caller with HTTP Basic credentials, then ask the
access policy whether the caller's role holds the permission the handler
requires. A deny becomes 403; a store failure propagates to the exception
handlers and becomes 503.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from mbc_cms.core.config import get_settings
from mbc_cms.core.logging import get_logger
from mbc_cms.domain.entities import User
from mbc_cms.domain.services import AccessPolicy, RoleManager
from mbc_cms.infrastructure.auth import verify_password
from mbc_cms.infrastructure.persistence.database import get_db_manager, get_db_session
from mbc_cms.infrastructure.persistence.repositories import UserRepository, to_user

logger = get_logger(__name__)

basic_security = HTTPBasic(auto_error=False)


def get_role_manager() -> RoleManager:
    """Build a role manager on the shared session factory."""
    settings = get_settings()
    return RoleManager(
        get_db_manager().session_factory,
        level_comparison=settings.permission_level_comparison,
    )


def get_access_policy(
    role_manager: Annotated[RoleManager, Depends(get_role_manager)],
) -> AccessPolicy:
    """Build the access policy with the configured admin email."""
    return AccessPolicy(role_manager, get_settings().admin_email)


async def get_current_user(
    credentials: Annotated[HTTPBasicCredentials | None, Depends(basic_security)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Resolve the caller from HTTP Basic credentials.

    Raises:
        HTTPException: 401 if credentials are missing or wrong, or the user is inactive.
    """
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Basic"},
    )

    if credentials is None:
        logger.info("Authentication failed: missing credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    user = await UserRepository(session).get_by_email(credentials.username)
    if user is None or not verify_password(credentials.password, user.password_hash):
        logger.info("Authentication failed: invalid credentials", email=credentials.username)
        raise unauthorized

    if not user.active:
        logger.info("Authentication failed: inactive user", user_id=user.id)
        raise unauthorized

    return to_user(user)


AuthenticatedUser = Annotated[User, Depends(get_current_user)]


def require_permission(
    permission_name: str, required_level: int
) -> Callable[..., Awaitable[User]]:
    """Create a dependency that only admits callers holding a permission.

    Args:
        permission_name: Permission the route requires.
        required_level: Level the route requires.

    Returns:
        A FastAPI dependency returning the authorized user.
    """

    async def dependency(
        current_user: AuthenticatedUser,
        policy: Annotated[AccessPolicy, Depends(get_access_policy)],
    ) -> User:
        if not await policy.authorize(current_user, permission_name, required_level):
            logger.info(
                "Authorization denied",
                user_id=current_user.id,
                role_id=current_user.role_id,
                permission_name=permission_name,
                required_level=required_level,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission '{permission_name}' at level {required_level} required",
            )
        return current_user

    return dependency
