"""SQLAlchemy adapter package."""

from __future__ import annotations

from .cache import SqlAlchemyCacheStore, document_cache_table, metadata

__all__ = ["SqlAlchemyCacheStore", "document_cache_table", "metadata"]
