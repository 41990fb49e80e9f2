# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission catalog and wildcard matching.

Permissions follow the format ``resource:action``, for example
``customer:read`` or ``office:delete``. Granted patterns may use ``*`` as the
whole string (every permission) or as the action (``customer:*``, every action
on one resource).
"""

from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple

WILDCARD = "*"
SEPARATOR = ":"


class Permission(str, Enum):
    """All concrete permissions known to the application."""

    # Customers
    CUSTOMER_READ = "customer:read"
    CUSTOMER_CREATE = "customer:create"
    CUSTOMER_UPDATE = "customer:update"
    CUSTOMER_DELETE = "customer:delete"

    # Users
    USER_READ = "user:read"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_ACTIVATE = "user:activate"

    # Offices
    OFFICE_READ = "office:read"
    OFFICE_CREATE = "office:create"
    OFFICE_UPDATE = "office:update"
    OFFICE_DELETE = "office:delete"

    # Roles
    ROLE_READ = "role:read"
    ROLE_CREATE = "role:create"
    ROLE_UPDATE = "role:update"
    ROLE_DELETE = "role:delete"
    ROLE_ASSIGN = "role:assign"

    # Reports
    REPORT_READ = "report:read"
    REPORT_EXPORT = "report:export"

    # Settings
    SETTINGS_READ = "settings:read"
    SETTINGS_UPDATE = "settings:update"

    # Company
    COMPANY_READ = "company:read"
    COMPANY_UPDATE = "company:update"

    # Files
    FILE_READ = "file:read"
    FILE_CREATE = "file:create"
    FILE_UPDATE = "file:update"
    FILE_DELETE = "file:delete"

    # Data migration
    DATA_MIGRATION = "data:migration"

    # Price guide
    PRICE_GUIDE_IMPORT_EXPORT = "price_guide:import_export"


class PermissionMeta(NamedTuple):
    label: str
    category: str
    description: str


PERMISSION_META: dict[Permission, PermissionMeta] = {
    Permission.CUSTOMER_READ: PermissionMeta(
        "View Customers", "Customers", "View customer list and details"
    ),
    Permission.CUSTOMER_CREATE: PermissionMeta(
        "Create Customers", "Customers", "Add new customers to the system"
    ),
    Permission.CUSTOMER_UPDATE: PermissionMeta(
        "Edit Customers", "Customers", "Modify existing customer information"
    ),
    Permission.CUSTOMER_DELETE: PermissionMeta(
        "Delete Customers", "Customers", "Remove customers from the system"
    ),
    Permission.USER_READ: PermissionMeta(
        "View Users", "Users", "View user list and profiles"
    ),
    Permission.USER_CREATE: PermissionMeta(
        "Create Users", "Users", "Add new users to the company"
    ),
    Permission.USER_UPDATE: PermissionMeta(
        "Edit Users", "Users", "Modify user profiles and settings"
    ),
    Permission.USER_DELETE: PermissionMeta(
        "Delete Users",
        "Users",
        "Soft delete users from the company (preserves data for audit)",
    ),
    Permission.USER_ACTIVATE: PermissionMeta(
        "Activate/Deactivate Users", "Users", "Enable or disable user accounts"
    ),
    Permission.OFFICE_READ: PermissionMeta(
        "View Offices", "Offices", "View office list and details"
    ),
    Permission.OFFICE_CREATE: PermissionMeta(
        "Create Offices", "Offices", "Add new offices to the company"
    ),
    Permission.OFFICE_UPDATE: PermissionMeta(
        "Edit Offices", "Offices", "Modify office settings and information"
    ),
    Permission.OFFICE_DELETE: PermissionMeta(
        "Delete Offices", "Offices", "Remove offices from the company"
    ),
    Permission.ROLE_READ: PermissionMeta(
        "View Roles",
        "Roles & Permissions",
        "View available roles and their permissions",
    ),
    Permission.ROLE_CREATE: PermissionMeta(
        "Create Roles", "Roles & Permissions", "Create custom roles for the company"
    ),
    Permission.ROLE_UPDATE: PermissionMeta(
        "Edit Roles", "Roles & Permissions", "Modify role permissions and settings"
    ),
    Permission.ROLE_DELETE: PermissionMeta(
        "Delete Roles", "Roles & Permissions", "Remove custom roles from the company"
    ),
    Permission.ROLE_ASSIGN: PermissionMeta(
        "Assign Roles", "Roles & Permissions", "Assign or revoke user roles"
    ),
    Permission.REPORT_READ: PermissionMeta(
        "View Reports", "Reports", "Access reports and analytics dashboards"
    ),
    Permission.REPORT_EXPORT: PermissionMeta(
        "Export Reports", "Reports", "Export reports to CSV, PDF, or other formats"
    ),
    Permission.SETTINGS_READ: PermissionMeta(
        "View Settings", "Settings", "View company and application settings"
    ),
    Permission.SETTINGS_UPDATE: PermissionMeta(
        "Manage Settings", "Settings", "Modify company and application settings"
    ),
    Permission.COMPANY_READ: PermissionMeta(
        "View Company Info",
        "Company",
        "View company profile and subscription details",
    ),
    Permission.COMPANY_UPDATE: PermissionMeta(
        "Manage Company",
        "Company",
        "Update company profile and subscription settings",
    ),
    Permission.FILE_READ: PermissionMeta(
        "View Files", "Files", "View and download files"
    ),
    Permission.FILE_CREATE: PermissionMeta(
        "Upload Files", "Files", "Upload new files to the system"
    ),
    Permission.FILE_UPDATE: PermissionMeta(
        "Edit Files", "Files", "Update file metadata and visibility"
    ),
    Permission.FILE_DELETE: PermissionMeta(
        "Delete Files", "Files", "Delete files from the system"
    ),
    Permission.DATA_MIGRATION: PermissionMeta(
        "Data Migration", "Data Migration", "Import data from legacy systems"
    ),
    Permission.PRICE_GUIDE_IMPORT_EXPORT: PermissionMeta(
        "Price Guide Import/Export",
        "Price Guide",
        "Export and import price guide pricing data via spreadsheet",
    ),
}


def get_all_permissions() -> list[Permission]:
    """Return every concrete permission in declaration order."""
    return list(Permission)


def get_permissions_by_category() -> dict[str, list[Permission]]:
    """Group permissions by their UI category."""
    grouped: dict[str, list[Permission]] = {}
    for permission, meta in PERMISSION_META.items():
        grouped.setdefault(meta.category, []).append(permission)
    return grouped


def is_valid_permission(value: str) -> bool:
    """Check whether a string names a concrete permission."""
    try:
        Permission(value)
    except ValueError:
        return False
    return True


def get_read_only_permissions() -> list[Permission]:
    """Return all ``:read`` permissions."""
    return [p for p in Permission if parse_permission(p.value)[1] == "read"]


def parse_permission(value: str) -> tuple[str, str | None]:
    """Split a permission on its first colon into (resource, action).

    The action is None when the value has no separator.
    """
    resource, sep, action = value.partition(SEPARATOR)
    return resource, (action if sep else None)


def match_permission(permission: str, pattern: str) -> bool:
    """Check if a required permission is granted by one pattern.

    >>> match_permission("customer:read", "customer:read")
    True
    >>> match_permission("customer:read", "customer:*")
    True
    >>> match_permission("customer:read", "*")
    True
    >>> match_permission("customer:read", "user:*")
    False
    """
    if pattern == WILDCARD or pattern == permission:
        return True

    pattern_resource, pattern_action = parse_permission(pattern)
    if pattern_action != WILDCARD:
        return False

    resource, action = parse_permission(permission)
    return action is not None and resource == pattern_resource


def has_permission(permission: str, granted: Iterable[str]) -> bool:
    """Check if any granted pattern matches the required permission."""
    return any(match_permission(permission, pattern) for pattern in granted)


def expand_wildcard(pattern: str) -> list[Permission]:
    """Expand a pattern into the concrete permissions it grants.

    Unknown concrete permissions expand to an empty list.
    """
    return [p for p in Permission if match_permission(p.value, pattern)]
