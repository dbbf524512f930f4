"""Domain services for the MBC CMS API.

Services hold the RBAC logic: the role manager, the break-glass authority
check and first-run bootstrap.
"""

from mbc_cms.domain.services.authority import AccessPolicy, is_system_administrator
from mbc_cms.domain.services.bootstrap_service import BootstrapResult, BootstrapService
from mbc_cms.domain.services.role_manager import LevelComparison, RoleManager

__all__ = [
    "AccessPolicy",
    "BootstrapResult",
    "BootstrapService",
    "LevelComparison",
    "RoleManager",
    "is_system_administrator",
]
