# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""In-process cache of effective permissions per (user, company)."""

import time
import uuid
from dataclasses import dataclass

from src.config import settings


@dataclass(frozen=True)
class CacheEntry:
    """Merged permissions from all roles and their expiry (monotonic seconds)."""

    permissions: tuple[str, ...]
    expires_at: float | None


class PermissionCache:
    """Maps (user_id, company_id) to the user's effective permissions.

    Entries expire after ``ttl_seconds``; a TTL of zero or less disables
    expiry. Concurrent misses on the same key may both populate the entry,
    the last write wins.
    """

    def __init__(self, ttl_seconds: int = 300) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: dict[str, CacheEntry] = {}

    @staticmethod
    def make_key(user_id: uuid.UUID | str, company_id: uuid.UUID | str) -> str:
        return f"{user_id}:{company_id}"

    def get(
        self, user_id: uuid.UUID | str, company_id: uuid.UUID | str
    ) -> list[str] | None:
        """Return the cached permissions, or None on a miss or expired entry."""
        key = self.make_key(user_id, company_id)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and entry.expires_at <= time.monotonic():
            self._entries.pop(key, None)
            return None
        return list(entry.permissions)

    def set(
        self,
        user_id: uuid.UUID | str,
        company_id: uuid.UUID | str,
        permissions: list[str],
    ) -> None:
        expires_at = (
            time.monotonic() + self.ttl_seconds if self.ttl_seconds > 0 else None
        )
        self._entries[self.make_key(user_id, company_id)] = CacheEntry(
            permissions=tuple(permissions), expires_at=expires_at
        )

    def invalidate(self, user_id: uuid.UUID | str, company_id: uuid.UUID | str) -> None:
        """Drop the entry for one user in one company."""
        self._entries.pop(self.make_key(user_id, company_id), None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# Shared by every request-scoped PermissionService
permission_cache = PermissionCache(ttl_seconds=settings.permission_cache_ttl_seconds)
