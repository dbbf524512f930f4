"""Roles API routes.

Thin role administration on top of the role manager. Every route requires
the ``roles.manage`` permission at level 2.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from mbc_cms.core.logging import get_logger
from mbc_cms.domain.entities import Role, RolePermission
from mbc_cms.domain.services import RoleManager
from mbc_cms.infrastructure.api.dependencies import get_role_manager, require_permission
from mbc_cms.infrastructure.api.schemas import (
    AddPermissionsRequest,
    CreateRoleRequest,
    PermissionCheckResponse,
    PermissionResponse,
    RolePermissionsResponse,
    RoleResponse,
)

logger = get_logger(__name__)

ROLES_MANAGE_PERMISSION = "roles.manage"
ROLES_MANAGE_LEVEL = 2

router = APIRouter(
    dependencies=[Depends(require_permission(ROLES_MANAGE_PERMISSION, ROLES_MANAGE_LEVEL))],
    responses={
        401: {"description": "Missing or invalid credentials"},
        403: {"description": "roles.manage permission required"},
        503: {"description": "Permission store unavailable"},
    },
)

RoleManagerDep = Annotated[RoleManager, Depends(get_role_manager)]


def _role_response(role: Role) -> RoleResponse:
    return RoleResponse(
        id=role.id,
        name=role.name,
        created_at=role.created_at,
        updated_at=role.updated_at,
    )


def _permission_response(permission: RolePermission) -> PermissionResponse:
    return PermissionResponse(
        id=permission.id,
        role_id=permission.role_id,
        permission_name=permission.permission_name,
        permission_level=permission.permission_level,
        created_at=permission.created_at,
        updated_at=permission.updated_at,
    )


async def _get_role_or_404(role_manager: RoleManager, role_id: str) -> Role:
    role = await role_manager.get_role(role_id)
    if role is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Role {role_id} not found",
        )
    return role


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=RolePermissionsResponse,
)
async def create_role(
    request: CreateRoleRequest,
    role_manager: RoleManagerDep,
) -> RolePermissionsResponse:
    """Create a role together with its permissions.

    Either the role and all its permissions are stored, or nothing is.
    """
    role_id = await role_manager.create_role_with_permissions(
        request.name,
        [(grant.name, grant.level) for grant in request.permissions],
    )
    role = await _get_role_or_404(role_manager, role_id)
    permissions = await role_manager.list_permissions(role_id)
    return RolePermissionsResponse(
        role=_role_response(role),
        permissions=[_permission_response(p) for p in permissions],
    )


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(role_id: str, role_manager: RoleManagerDep) -> RoleResponse:
    """Get a role by ID."""
    return _role_response(await _get_role_or_404(role_manager, role_id))


@router.get("/{role_id}/permissions", response_model=list[PermissionResponse])
async def list_role_permissions(
    role_id: str, role_manager: RoleManagerDep
) -> list[PermissionResponse]:
    """List the permissions of a role."""
    await _get_role_or_404(role_manager, role_id)
    permissions = await role_manager.list_permissions(role_id)
    return [_permission_response(p) for p in permissions]


@router.post("/{role_id}/permissions", status_code=status.HTTP_204_NO_CONTENT)
async def add_role_permissions(
    role_id: str,
    request: AddPermissionsRequest,
    role_manager: RoleManagerDep,
) -> Response:
    """Attach permissions to a role."""
    await _get_role_or_404(role_manager, role_id)
    await role_manager.add_permissions(
        role_id, [(grant.name, grant.level) for grant in request.permissions]
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{role_id}/permissions", status_code=status.HTTP_204_NO_CONTENT)
async def remove_role_permissions(
    role_id: str,
    role_manager: RoleManagerDep,
    name: Annotated[list[str], Query()],
) -> Response:
    """Detach permissions from a role. Names the role does not hold are ignored."""
    await _get_role_or_404(role_manager, role_id)
    await role_manager.remove_permissions(role_id, name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{role_id}/permissions/check", response_model=PermissionCheckResponse)
async def check_role_permission(
    role_id: str,
    role_manager: RoleManagerDep,
    name: Annotated[str, Query(min_length=1)],
    level: Annotated[int, Query()],
) -> PermissionCheckResponse:
    """Ask whether a role holds a permission at a level."""
    granted = await role_manager.authorize(role_id, name, level)
    return PermissionCheckResponse(
        role_id=role_id,
        permission_name=name,
        required_level=level,
        granted=granted,
    )
