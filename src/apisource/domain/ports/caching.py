"""Port for the time-boxed document cache."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from apisource.domain._types import JsonValue

DEFAULT_CACHE_TTL_SECONDS = 60 * 60 * 24


@dataclass(slots=True, frozen=True)
class CacheEntry:
    key: str
    value: JsonValue
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(slots=True, frozen=True)
class CachePolicy:
    enabled: bool = False
    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS


@runtime_checkable
class CacheStore(Protocol):
    """Key/value store whose entries stop being returned once they expire."""

    def get(self, key: str) -> CacheEntry | None: ...

    def set(self, key: str, value: JsonValue, *, ttl_seconds: float) -> CacheEntry: ...
