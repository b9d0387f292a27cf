"""SQLite-backed document cache that survives between runs."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import Column, Float, MetaData, String, Table, Text, create_engine, delete, select

from apisource.config.storage import get_storage_config
from apisource.domain.ports.caching import CacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from apisource.domain._types import JsonValue

log = getLogger(__name__)

metadata = MetaData()

document_cache_table = Table(
    "document_cache",
    metadata,
    Column("key", String(64), primary_key=True),
    Column("value", Text, nullable=False),
    Column("expires_at", Float, nullable=False),
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SqlAlchemyCacheStore:
    """Cache entries keyed by request signature, expiry stored as a UTC epoch."""

    def __init__(
        self,
        *,
        engine: Engine | None = None,
        database_uri: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if engine is None:
            uri = database_uri or get_storage_config().document_cache_uri()
            engine = create_engine(uri, future=True)
        self._engine = engine
        self._clock = clock
        metadata.create_all(self._engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def get(self, key: str) -> CacheEntry | None:
        with self._engine.begin() as connection:
            row = connection.execute(
                select(document_cache_table.c.value, document_cache_table.c.expires_at).where(
                    document_cache_table.c.key == key
                )
            ).first()
            if row is None:
                return None
            expires_at = datetime.fromtimestamp(row.expires_at, tz=UTC)
            if self._clock() >= expires_at:
                connection.execute(
                    delete(document_cache_table).where(document_cache_table.c.key == key)
                )
                log.debug("Dropped expired cache entry %s", key)
                return None
        return CacheEntry(key=key, value=json.loads(row.value), expires_at=expires_at)

    def set(self, key: str, value: JsonValue, *, ttl_seconds: float) -> CacheEntry:
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        with self._engine.begin() as connection:
            connection.execute(
                delete(document_cache_table).where(document_cache_table.c.key == key)
            )
            connection.execute(
                document_cache_table.insert().values(
                    key=key,
                    value=json.dumps(value),
                    expires_at=expires_at.timestamp(),
                )
            )
        return CacheEntry(key=key, value=value, expires_at=expires_at)

    def dispose(self) -> None:
        self._engine.dispose()
