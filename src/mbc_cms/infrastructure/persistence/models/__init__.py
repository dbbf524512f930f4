"""SQLAlchemy models for the MBC CMS system tables.

All models inherit from the Base class defined in database.py.
"""

from mbc_cms.infrastructure.persistence.models.role import RoleModel
from mbc_cms.infrastructure.persistence.models.role_permission import RolePermissionModel
from mbc_cms.infrastructure.persistence.models.user import UserModel

__all__ = [
    "RoleModel",
    "RolePermissionModel",
    "UserModel",
]
