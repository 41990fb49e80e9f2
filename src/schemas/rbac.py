# src/schemas/rbac.py
import datetime
import uuid

from pydantic import BaseModel, ConfigDict


class PermissionSchema(BaseModel):
    """Schema representing a permission and its UI metadata."""

    name: str
    label: str
    category: str
    description: str


class PermissionCatalogSchema(BaseModel):
    """Schema listing all permissions, flat and grouped by category."""

    permissions: list[PermissionSchema]
    by_category: dict[str, list[str]]


class RoleSummarySchema(BaseModel):
    """Schema representing a role without its permissions."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    display_name: str


class RoleSchema(RoleSummarySchema):
    """Schema representing a role."""

    description: str | None
    permissions: list[str]
    is_default: bool
    is_system_role: bool
    company_id: uuid.UUID | None


class RoleWithUserCountSchema(RoleSchema):
    """Schema representing a role with the number of users holding it."""

    user_count: int


class UserRolesSchema(BaseModel):
    """Schema representing a user's roles and effective permissions."""

    roles: list[RoleSchema]
    permissions: list[str]


class RoleHolderSchema(BaseModel):
    """Schema representing a user holding a role."""

    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    email: str
    full_name: str | None
    assigned_at: datetime.datetime
    assigned_by_id: uuid.UUID | None


class RoleAssignmentRequest(BaseModel):
    """Schema for assigning or revoking a role."""

    user_id: uuid.UUID
    role_id: uuid.UUID


class UserRoleSchema(BaseModel):
    """Schema representing a user's role assignment."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    role_id: uuid.UUID
    company_id: uuid.UUID
    assigned_by_id: uuid.UUID | None
    assigned_at: datetime.datetime
    role: RoleSummarySchema
