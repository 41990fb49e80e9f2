"""Pydantic schemas package."""
from src.schemas.common import HealthResponse, MessageResponse
from src.schemas.rbac import (
    PermissionCatalogSchema,
    PermissionSchema,
    RoleAssignmentRequest,
    RoleHolderSchema,
    RoleSchema,
    RoleSummarySchema,
    RoleWithUserCountSchema,
    UserRoleSchema,
    UserRolesSchema,
)

__all__ = [
    "HealthResponse",
    "MessageResponse",
    "PermissionCatalogSchema",
    "PermissionSchema",
    "RoleAssignmentRequest",
    "RoleHolderSchema",
    "RoleSchema",
    "RoleSummarySchema",
    "RoleWithUserCountSchema",
    "UserRoleSchema",
    "UserRolesSchema",
]
