"""Break-glass authority check and the access policy built on it.

The system administrator is identified by a single configured email and is
granted every permission without consulting the role graph, so an operator
can always recover from an empty or broken permission set.
"""

from typing import TYPE_CHECKING

from mbc_cms.core.logging import get_logger

if TYPE_CHECKING:
    from mbc_cms.domain.entities import User
    from mbc_cms.domain.services.role_manager import RoleManager

logger = get_logger(__name__)


def is_system_administrator(user: "User", admin_email: str | None) -> bool:
    """Check whether a user is the configured system administrator.

    The user's role and permissions play no part in the decision. An empty
    admin email never matches.

    Args:
        user: The principal to check.
        admin_email: The configured admin email.

    Returns:
        True iff the user's email equals the admin email.
    """
    if not admin_email:
        return False
    return user.email == admin_email


class AccessPolicy:
    """Answers whether a resolved user may perform an action.

    Args:
        role_manager: Role manager consulted for regular users.
        admin_email: The configured admin email.
    """

    def __init__(self, role_manager: "RoleManager", admin_email: str | None) -> None:
        self.role_manager = role_manager
        self.admin_email = admin_email

    def is_system_administrator(self, user: "User") -> bool:
        """Check whether the user is the configured system administrator."""
        return is_system_administrator(user, self.admin_email)

    async def authorize(self, user: "User", permission_name: str, required_level: int) -> bool:
        """Check whether the user may use a permission at the required level.

        Raises:
            AuthorizationError: If the role manager cannot answer.
        """
        if self.is_system_administrator(user):
            logger.info(
                "System administrator bypass",
                user_id=user.id,
                permission_name=permission_name,
                required_level=required_level,
            )
            return True
        return await self.role_manager.authorize(user.role_id, permission_name, required_level)
