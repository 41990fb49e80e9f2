"""Services package."""
from src.services import permission_service, rbac_seed_service

__all__ = [
    "permission_service",
    "rbac_seed_service",
]
