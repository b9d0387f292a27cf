"""Domain port definitions for adapters and the embedding host."""

from __future__ import annotations

from .caching import DEFAULT_CACHE_TTL_SECONDS, CacheEntry, CachePolicy, CacheStore
from .fetching import (
    BasicAuth,
    ComputeNextRequest,
    MergeRule,
    NextPage,
    PaginationStrategy,
    PayloadKey,
    RequestSpec,
    TokenRequest,
)
from .host import FieldSink, HostEnvironment, HostServices, IdGenerator, NodeSink

__all__ = [
    "DEFAULT_CACHE_TTL_SECONDS",
    "BasicAuth",
    "CacheEntry",
    "CachePolicy",
    "CacheStore",
    "ComputeNextRequest",
    "FieldSink",
    "HostEnvironment",
    "HostServices",
    "IdGenerator",
    "MergeRule",
    "NextPage",
    "NodeSink",
    "PaginationStrategy",
    "PayloadKey",
    "RequestSpec",
    "TokenRequest",
]
