# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Uuid
from sqlalchemy.orm import relationship

from src.models.base import Base, utcnow


class UserRole(Base):
    """Grant of one role to one user within one company."""

    __tablename__ = "user_roles"

    # Insertion order; assigned_at ties for rows written in one batch
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid(as_uuid=True), unique=True, nullable=False, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role_id = Column(
        Uuid(as_uuid=True), ForeignKey("roles.id", ondelete="CASCADE"), nullable=False
    )
    company_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=False,
    )
    assigned_by_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True)
    assigned_at = Column(DateTime, default=utcnow, nullable=False)

    # One row per (user, role, company) is enforced by PermissionService.assign_role
    __table_args__ = (Index("ix_user_roles_user_company", "user_id", "company_id"),)

    user = relationship("User", back_populates="user_roles", foreign_keys=[user_id])
    role = relationship("Role", back_populates="user_roles")
    company = relationship("Company", back_populates="user_roles")
    assigned_by = relationship("User", foreign_keys=[assigned_by_id])
