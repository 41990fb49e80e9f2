# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import uuid
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from src.database import get_db
from src.models import Company, User
from src.services.permission_service import PermissionService


@dataclass
class CallerContext:
    """The authenticated user and the company they are acting in."""

    user: User
    company_id: uuid.UUID


def _parse_uuid(value: str | None) -> uuid.UUID | None:
    if not value:
        return None
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def get_caller(
    db: Session = Depends(get_db),
    x_user_id: str | None = Header(default=None),
    x_company_id: str | None = Header(default=None),
) -> CallerContext:
    """Resolve the caller from the identity headers set by the auth gateway."""
    user_id = _parse_uuid(x_user_id)
    company_id = _parse_uuid(x_company_id)
    if not user_id or not company_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    if not db.get(Company, company_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Company not found",
        )

    return CallerContext(user=user, company_id=company_id)


def get_permission_service(db: Session = Depends(get_db)) -> PermissionService:
    """Request-scoped permission service sharing the process-wide cache."""
    return PermissionService(db)


def require_permission(permission: str) -> Callable[..., CallerContext]:
    """Dependency requiring a single permission."""

    def dependency(
        caller: CallerContext = Depends(get_caller),
        service: PermissionService = Depends(get_permission_service),
    ) -> CallerContext:
        if not service.has_permission(caller.user.id, permission, caller.company_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required permission: {permission}",
            )
        return caller

    return dependency


def require_all_permissions(permissions: list[str]) -> Callable[..., CallerContext]:
    """Dependency requiring every one of the given permissions."""

    def dependency(
        caller: CallerContext = Depends(get_caller),
        service: PermissionService = Depends(get_permission_service),
    ) -> CallerContext:
        if not service.has_all_permissions(
            caller.user.id, permissions, caller.company_id
        ):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required permissions: {', '.join(permissions)}",
            )
        return caller

    return dependency


def require_any_permission(permissions: list[str]) -> Callable[..., CallerContext]:
    """Dependency requiring at least one of the given permissions."""

    def dependency(
        caller: CallerContext = Depends(get_caller),
        service: PermissionService = Depends(get_permission_service),
    ) -> CallerContext:
        if not service.has_any_permission(
            caller.user.id, permissions, caller.company_id
        ):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    "Missing required permissions (need at least one): "
                    f"{', '.join(permissions)}"
                ),
            )
        return caller

    return dependency
