"""Role API schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from mbc_cms.domain.entities import MAX_PERMISSION_LEVEL, MIN_PERMISSION_LEVEL


class PermissionGrantSchema(BaseModel):
    """A permission name and the level granted for it.

    Attributes:
        name: Permission name (e.g., 'articles.edit').
        level: Level granted for the permission.
    """

    name: str = Field(..., min_length=1, max_length=255)
    level: int = Field(..., ge=MIN_PERMISSION_LEVEL, le=MAX_PERMISSION_LEVEL)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        """Validate that name is not blank."""
        if not v.strip():
            raise ValueError("Permission name cannot be empty")
        return v.strip()


class CreateRoleRequest(BaseModel):
    """Request schema for creating a role with its permissions.

    Attributes:
        name: Role name (e.g., 'Editor').
        permissions: Permissions attached to the role on creation.
    """

    name: str = Field(..., max_length=255)
    permissions: list[PermissionGrantSchema] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        """Validate that name is not empty."""
        if not v or not v.strip():
            raise ValueError("Role name cannot be empty")
        return v.strip()


class AddPermissionsRequest(BaseModel):
    """Request schema for attaching permissions to an existing role."""

    permissions: list[PermissionGrantSchema] = Field(..., min_length=1)


class PermissionResponse(BaseModel):
    """Response schema for a role permission."""

    id: str
    role_id: str
    permission_name: str
    permission_level: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoleResponse(BaseModel):
    """Response schema for a role."""

    id: str
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RolePermissionsResponse(BaseModel):
    """Response schema for a role together with its permissions."""

    role: RoleResponse
    permissions: list[PermissionResponse]


class PermissionCheckResponse(BaseModel):
    """Response schema for an authorization query."""

    role_id: str
    permission_name: str
    required_level: int
    granted: bool
