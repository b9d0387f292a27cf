"""In-process document cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from apisource.domain.ports.caching import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from apisource.domain._types import JsonValue


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class MemoryCacheStore:
    clock: Callable[[], datetime] = _utcnow
    _entries: dict[str, CacheEntry] = field(default_factory=dict, init=False, repr=False)

    def get(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            del self._entries[key]
            return None
        return entry

    def set(self, key: str, value: JsonValue, *, ttl_seconds: float) -> CacheEntry:
        entry = CacheEntry(
            key=key,
            value=value,
            expires_at=self.clock() + timedelta(seconds=ttl_seconds),
        )
        self._entries[key] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)
