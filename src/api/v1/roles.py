# src/api/v1/roles.py
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from src.api.deps import (
    CallerContext,
    get_caller,
    get_permission_service,
    require_all_permissions,
    require_any_permission,
    require_permission,
)
from src.database import get_db
from src.models import Role, User, UserRole
from src.rbac.permissions import (
    PERMISSION_META,
    Permission,
    get_permissions_by_category,
)
from src.schemas.common import MessageResponse
from src.schemas.rbac import (
    PermissionCatalogSchema,
    PermissionSchema,
    RoleAssignmentRequest,
    RoleHolderSchema,
    RoleSchema,
    RoleWithUserCountSchema,
    UserRoleSchema,
    UserRolesSchema,
)
from src.services.permission_service import PermissionService, visible_to_company

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_roles_response(
    service: PermissionService, user_id: uuid.UUID, company_id: uuid.UUID
) -> UserRolesSchema:
    roles = service.get_user_roles(user_id, company_id)
    permissions = service.get_user_permissions(user_id, company_id)
    return UserRolesSchema(
        roles=[RoleSchema.model_validate(r) for r in roles],
        permissions=permissions,
    )


@router.get("/permissions", response_model=PermissionCatalogSchema, summary="List all available permissions")
def list_permissions(caller: CallerContext = Depends(get_caller)):
    """Retrieve every permission with its label, category and description."""
    return PermissionCatalogSchema(
        permissions=[
            PermissionSchema(name=p.value, **meta._asdict())
            for p, meta in PERMISSION_META.items()
        ],
        by_category={
            category: [p.value for p in perms]
            for category, perms in get_permissions_by_category().items()
        },
    )


@router.get("", response_model=list[RoleWithUserCountSchema], summary="List roles available to the company")
def list_roles(
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(require_permission(Permission.ROLE_READ.value)),
    service: PermissionService = Depends(get_permission_service),
):
    """Retrieve global roles and the company's own roles with user counts.
    Requires role:read permission.
    """
    roles = service.get_available_roles(caller.company_id)
    counts = dict(
        db.query(UserRole.role_id, func.count(UserRole.id))
        .filter(UserRole.company_id == caller.company_id)
        .group_by(UserRole.role_id)
        .all()
    )
    return [
        RoleWithUserCountSchema(
            **RoleSchema.model_validate(r).model_dump(), user_count=counts.get(r.id, 0)
        )
        for r in roles
    ]


@router.get("/me", response_model=UserRolesSchema, summary="Get the caller's roles and permissions")
def get_my_roles(
    caller: CallerContext = Depends(get_caller),
    service: PermissionService = Depends(get_permission_service),
):
    """Retrieve the caller's roles and effective permissions in their company."""
    return _user_roles_response(service, caller.user.id, caller.company_id)


@router.get("/users/{user_id}", response_model=UserRolesSchema, summary="Get a user's roles and permissions")
def get_user_roles(
    user_id: uuid.UUID,
    caller: CallerContext = Depends(require_permission(Permission.ROLE_READ.value)),
    service: PermissionService = Depends(get_permission_service),
):
    """Retrieve a user's roles and effective permissions in the caller's company.
    Requires role:read permission.
    """
    return _user_roles_response(service, user_id, caller.company_id)


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Revoke all roles from a user")
def revoke_all_user_roles(
    user_id: uuid.UUID,
    caller: CallerContext = Depends(
        require_all_permissions(
            [Permission.ROLE_ASSIGN.value, Permission.USER_UPDATE.value]
        )
    ),
    service: PermissionService = Depends(get_permission_service),
):
    """Remove every role assignment a user has in the caller's company.
    Requires role:assign and user:update permissions.
    """
    count = service.revoke_all_roles(user_id, caller.company_id)
    logger.info(f"Revoked {count} roles from user {user_id} by {caller.user.id}")
    return MessageResponse(message=f"Revoked {count} roles")


@router.post("/users/{user_id}/defaults", response_model=list[UserRoleSchema], status_code=status.HTTP_201_CREATED, summary="Assign default roles to a new user")
def assign_default_roles(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(require_permission(Permission.ROLE_ASSIGN.value)),
    service: PermissionService = Depends(get_permission_service),
):
    """Provision a newly created user with every default role.
    Requires role:assign permission.
    """
    if not db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return service.assign_default_roles(user_id, caller.company_id)


@router.get("/{role_id}/users", response_model=list[RoleHolderSchema], summary="List users holding a role")
def list_role_users(
    role_id: uuid.UUID,
    caller: CallerContext = Depends(
        require_any_permission([Permission.ROLE_READ.value, Permission.USER_READ.value])
    ),
    service: PermissionService = Depends(get_permission_service),
):
    """Retrieve the users holding a role in the caller's company.
    Requires role:read or user:read permission.
    """
    return [
        RoleHolderSchema(
            user_id=ur.user_id,
            email=ur.user.email,
            full_name=ur.user.full_name,
            assigned_at=ur.assigned_at,
            assigned_by_id=ur.assigned_by_id,
        )
        for ur in service.get_users_with_role(role_id, caller.company_id)
    ]


@router.post("/assign", response_model=UserRoleSchema, status_code=status.HTTP_201_CREATED, summary="Assign a role to a user")
def assign_role(
    assignment: RoleAssignmentRequest,
    db: Session = Depends(get_db),
    caller: CallerContext = Depends(require_permission(Permission.ROLE_ASSIGN.value)),
    service: PermissionService = Depends(get_permission_service),
):
    """Assign a global or company role to a user in the caller's company.
    Requires role:assign permission.
    """
    role = (
        db.query(Role)
        .filter(Role.id == assignment.role_id, visible_to_company(caller.company_id))
        .first()
    )
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    if not db.get(User, assignment.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    result = service.assign_role(
        assignment.user_id, role.id, caller.company_id, caller.user.id
    )
    if not result.success:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.error)

    logger.info(
        f"Role {role.name} assigned to user {assignment.user_id} by {caller.user.id}"
    )
    return result.user_role


@router.post("/revoke", response_model=MessageResponse, summary="Revoke a role from a user")
def revoke_role(
    assignment: RoleAssignmentRequest,
    caller: CallerContext = Depends(require_permission(Permission.ROLE_ASSIGN.value)),
    service: PermissionService = Depends(get_permission_service),
):
    """Remove a role assignment from a user in the caller's company.
    Requires role:assign permission.
    """
    if not service.revoke_role(
        assignment.user_id, assignment.role_id, caller.company_id
    ):
        raise HTTPException(status_code=404, detail="Role assignment not found")

    logger.info(
        f"Role {assignment.role_id} revoked from user {assignment.user_id} "
        f"by {caller.user.id}"
    )
    return MessageResponse(message="Role revoked successfully")
