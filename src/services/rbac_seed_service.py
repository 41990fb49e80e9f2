# src/services/rbac_seed_service.py
import logging

from sqlalchemy.orm import Session

from src.models import Role
from src.rbac.roles import DEFAULT_ROLES

from .permission_service import PermissionService

logger = logging.getLogger(__name__)


def seed_default_roles(db: Session, force: bool = False) -> list[Role]:
    """Seeds the database with the default global roles.

    This function is idempotent: roles that already exist are left untouched.
    With force=True, existing global roles (and their assignments) are removed
    first and the permission cache is cleared.
    @param db: SQLAlchemy Session object
    @return: the roles created by this call
    """
    service = PermissionService(db)

    if force:
        existing = db.query(Role).filter(Role.company_id.is_(None)).all()
        for role in existing:
            db.delete(role)
        db.commit()
        service.invalidate_all_cache()
        logger.info(f"Removed {len(existing)} global roles before seeding")

    created = []
    for role_data in DEFAULT_ROLES:
        if service.get_role_by_name(role_data["name"]):
            continue
        role = Role(
            name=role_data["name"],
            display_name=role_data["display_name"],
            description=role_data["description"],
            permissions=list(role_data["permissions"]),
            is_default=role_data["is_default"],
            is_system_role=True,
            company_id=None,
        )
        db.add(role)
        created.append(role)
    db.commit()

    if created:
        logger.info(f"Seeded roles: {', '.join(r.name for r in created)}")
    return created
