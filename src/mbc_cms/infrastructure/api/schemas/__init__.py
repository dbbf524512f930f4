"""API request and response schemas."""

from mbc_cms.infrastructure.api.schemas.role_schemas import (
    AddPermissionsRequest,
    CreateRoleRequest,
    PermissionCheckResponse,
    PermissionGrantSchema,
    PermissionResponse,
    RolePermissionsResponse,
    RoleResponse,
)

__all__ = [
    "AddPermissionsRequest",
    "CreateRoleRequest",
    "PermissionCheckResponse",
    "PermissionGrantSchema",
    "PermissionResponse",
    "RolePermissionsResponse",
    "RoleResponse",
]
