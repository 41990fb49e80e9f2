# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission service for the RBAC system."""

import logging
import uuid
from dataclasses import dataclass

import sqlalchemy as sa
from sqlalchemy.orm import Session, joinedload

from src.models import Role, UserRole
from src.models.base import utcnow
from src.rbac.cache import PermissionCache, permission_cache
from src.rbac.permissions import has_permission as check_permission

logger = logging.getLogger(__name__)

ROLE_ALREADY_ASSIGNED = "Role is already assigned to this user"


def visible_to_company(company_id: uuid.UUID) -> sa.ColumnElement[bool]:
    """Filter for roles a company can see: global roles plus its own."""
    return sa.or_(Role.company_id.is_(None), Role.company_id == company_id)


@dataclass
class RoleAssignmentResult:
    """Outcome of a role assignment."""

    success: bool
    user_role: UserRole | None = None
    error: str | None = None


class PermissionService:
    """Resolves, checks and mutates a user's roles within a company.

    Resolved permission sets are cached per (user, company). Every mutation
    invalidates the affected entry before returning, so a subsequent read
    never sees permissions from before the change.
    """

    def __init__(self, db: Session, cache: PermissionCache | None = None):
        self.db = db
        self.cache = cache if cache is not None else permission_cache

    def get_user_permissions(
        self, user_id: uuid.UUID, company_id: uuid.UUID
    ) -> list[str]:
        """Get all permissions for a user in a company.

        The result is the union of the permissions of every role assigned to
        the user in that company, in order of first occurrence. It may contain
        wildcard patterns. Results, including empty ones, are cached.
        """
        cached = self.cache.get(user_id, company_id)
        if cached is not None:
            return cached

        logger.debug(f"Permission cache miss for user {user_id} in {company_id}")
        user_roles = (
            self.db.query(UserRole)
            .options(joinedload(UserRole.role))
            .filter(UserRole.user_id == user_id, UserRole.company_id == company_id)
            .order_by(UserRole.seq)
            .all()
        )

        merged: dict[str, None] = {}
        for user_role in user_roles:
            for permission in user_role.role.permissions:
                merged.setdefault(permission, None)
        permissions = list(merged)

        self.cache.set(user_id, company_id, permissions)
        return permissions

    def has_permission(
        self, user_id: uuid.UUID, permission: str, company_id: uuid.UUID
    ) -> bool:
        """Check a single permission, honouring ``*`` and ``resource:*``."""
        granted = self.get_user_permissions(user_id, company_id)
        return check_permission(permission, granted)

    def has_all_permissions(
        self, user_id: uuid.UUID, permissions: list[str], company_id: uuid.UUID
    ) -> bool:
        """True if every permission is granted. True for an empty list."""
        granted = self.get_user_permissions(user_id, company_id)
        return all(check_permission(p, granted) for p in permissions)

    def has_any_permission(
        self, user_id: uuid.UUID, permissions: list[str], company_id: uuid.UUID
    ) -> bool:
        """True if at least one permission is granted. False for an empty list."""
        granted = self.get_user_permissions(user_id, company_id)
        return any(check_permission(p, granted) for p in permissions)

    def invalidate_cache(self, user_id: uuid.UUID, company_id: uuid.UUID) -> None:
        """Invalidate cached permissions for one user in one company."""
        self.cache.invalidate(user_id, company_id)

    def invalidate_all_cache(self) -> None:
        """Invalidate all cached permissions."""
        self.cache.clear()

    def _find_assignment(
        self, user_id: uuid.UUID, role_id: uuid.UUID, company_id: uuid.UUID
    ) -> UserRole | None:
        return (
            self.db.query(UserRole)
            .filter(
                UserRole.user_id == user_id,
                UserRole.role_id == role_id,
                UserRole.company_id == company_id,
            )
            .first()
        )

    def assign_role(
        self,
        user_id: uuid.UUID,
        role_id: uuid.UUID,
        company_id: uuid.UUID,
        assigned_by_id: uuid.UUID | None = None,
    ) -> RoleAssignmentResult:
        """Assign a role to a user within a company.

        Returns an unsuccessful result without writing anything if the user
        already holds the role in that company. Role visibility is not checked
        here; callers must make sure the role belongs to the company or is
        global.
        """
        if self._find_assignment(user_id, role_id, company_id):
            return RoleAssignmentResult(success=False, error=ROLE_ALREADY_ASSIGNED)

        user_role = UserRole(
            user_id=user_id,
            role_id=role_id,
            company_id=company_id,
            assigned_at=utcnow(),
            assigned_by_id=assigned_by_id,
        )
        self.db.add(user_role)
        self.db.commit()

        self.invalidate_cache(user_id, company_id)
        logger.info(f"Assigned role {role_id} to user {user_id} in {company_id}")
        return RoleAssignmentResult(success=True, user_role=user_role)

    def revoke_role(
        self, user_id: uuid.UUID, role_id: uuid.UUID, company_id: uuid.UUID
    ) -> bool:
        """Revoke a role from a user. Returns False if it was not assigned."""
        user_role = self._find_assignment(user_id, role_id, company_id)
        if not user_role:
            return False

        self.db.delete(user_role)
        self.db.commit()

        self.invalidate_cache(user_id, company_id)
        logger.info(f"Revoked role {role_id} from user {user_id} in {company_id}")
        return True

    def revoke_all_roles(self, user_id: uuid.UUID, company_id: uuid.UUID) -> int:
        """Revoke every role of a user in a company, returning how many."""
        user_roles = (
            self.db.query(UserRole)
            .filter(UserRole.user_id == user_id, UserRole.company_id == company_id)
            .all()
        )
        if not user_roles:
            return 0

        for user_role in user_roles:
            self.db.delete(user_role)
        self.db.commit()

        self.invalidate_cache(user_id, company_id)
        logger.info(
            f"Revoked {len(user_roles)} roles from user {user_id} in {company_id}"
        )
        return len(user_roles)

    def get_user_roles(self, user_id: uuid.UUID, company_id: uuid.UUID) -> list[Role]:
        """Get the roles assigned to a user in a company, in assignment order."""
        user_roles = (
            self.db.query(UserRole)
            .options(joinedload(UserRole.role))
            .filter(UserRole.user_id == user_id, UserRole.company_id == company_id)
            .order_by(UserRole.seq)
            .all()
        )
        return [user_role.role for user_role in user_roles]

    def get_users_with_role(
        self, role_id: uuid.UUID, company_id: uuid.UUID
    ) -> list[UserRole]:
        """Get the assignments of a role in a company, with users loaded."""
        return (
            self.db.query(UserRole)
            .options(joinedload(UserRole.user))
            .filter(UserRole.role_id == role_id, UserRole.company_id == company_id)
            .order_by(UserRole.seq)
            .all()
        )

    def get_available_roles(self, company_id: uuid.UUID) -> list[Role]:
        """Get global roles plus the roles owned by the company."""
        return (
            self.db.query(Role)
            .filter(visible_to_company(company_id))
            .order_by(Role.name)
            .all()
        )

    def get_role_by_name(
        self, name: str, company_id: uuid.UUID | None = None
    ) -> Role | None:
        """Get a role by name.

        With a company, a role owned by that company wins over a global role
        of the same name. Without a company only global roles are considered.
        """
        if company_id is not None:
            company_role = (
                self.db.query(Role)
                .filter(Role.name == name, Role.company_id == company_id)
                .first()
            )
            if company_role:
                return company_role

        return (
            self.db.query(Role)
            .filter(Role.name == name, Role.company_id.is_(None))
            .first()
        )

    def assign_default_roles(
        self, user_id: uuid.UUID, company_id: uuid.UUID
    ) -> list[UserRole]:
        """Assign every default role visible to the company to a new user.

        Meant for first-time provisioning: there is no duplicate check, so
        calling it twice for the same user assigns the roles twice.
        """
        default_roles = (
            self.db.query(Role)
            .filter(Role.is_default.is_(True), visible_to_company(company_id))
            .all()
        )

        assignments = []
        now = utcnow()
        for role in default_roles:
            user_role = UserRole(
                user_id=user_id,
                role_id=role.id,
                company_id=company_id,
                assigned_at=now,
            )
            self.db.add(user_role)
            assignments.append(user_role)

        if assignments:
            self.db.commit()
            self.invalidate_cache(user_id, company_id)
            logger.info(
                f"Assigned {len(assignments)} default roles to user {user_id} "
                f"in {company_id}"
            )

        return assignments
