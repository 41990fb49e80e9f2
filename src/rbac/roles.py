# src/rbac/roles.py
from .permissions import WILDCARD, Permission

# Default global roles to seed on first run.
# They have no owning company, so every company can see and assign them.
# salesRep is the only default role: it is auto-assigned to new users.
DEFAULT_ROLES = [
    {
        "name": "superUser",
        "display_name": "Super User",
        "description": "Full system access. Can do everything.",
        "is_default": False,
        "permissions": [WILDCARD],
    },
    {
        "name": "admin",
        "display_name": "Administrator",
        "description": (
            "Company administrator with full access to manage users, roles, "
            "and settings."
        ),
        "is_default": False,
        "permissions": [
            "customer:*",
            "user:*",
            "office:*",
            "role:*",
            "settings:*",
            "company:*",
            Permission.REPORT_READ.value,
            Permission.REPORT_EXPORT.value,
        ],
    },
    {
        "name": "salesRep",
        "display_name": "Sales Representative",
        "description": "Standard sales user with access to customers and reports.",
        "is_default": True,
        "permissions": [
            Permission.CUSTOMER_READ.value,
            Permission.CUSTOMER_CREATE.value,
            Permission.CUSTOMER_UPDATE.value,
            Permission.OFFICE_READ.value,
            Permission.REPORT_READ.value,
            Permission.SETTINGS_READ.value,
        ],
    },
    {
        "name": "viewer",
        "display_name": "Viewer",
        "description": "Read-only access to customers and reports.",
        "is_default": False,
        "permissions": [
            Permission.CUSTOMER_READ.value,
            Permission.OFFICE_READ.value,
            Permission.REPORT_READ.value,
        ],
    },
]
