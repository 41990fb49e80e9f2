# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from src.models.base import Base, TimestampMixin
from src.models.company import Company
from src.models.role import Role
from src.models.user import User
from src.models.user_role import UserRole

__all__ = [
    "Base",
    "Company",
    "Role",
    "TimestampMixin",
    "User",
    "UserRole",
]
