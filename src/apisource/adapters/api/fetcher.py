"""Cache-aware retrieval of a source's full (paginated) document."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from apisource.adapters.http_resilience import default_client_factory
from apisource.config.http_resilience import ResilienceConfig
from apisource.domain.ports.caching import CachePolicy

from .local_save import save_document
from .paginator import Paginator

if TYPE_CHECKING:
    from collections.abc import Callable

    from apisource.adapters.http_resilience import ResilientClient
    from apisource.domain._types import JsonValue
    from apisource.domain.ports.caching import CacheStore
    from apisource.domain.ports.fetching import PaginationStrategy, RequestSpec

    from .local_save import LocalSaveTarget

log = getLogger(__name__)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(name="apisource")


@dataclass(slots=True)
class DocumentFetcher:
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    cache: CacheStore | None = None
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    async def fetch(
        self,
        request: RequestSpec,
        *,
        cache_policy: CachePolicy | None = None,
        pagination: PaginationStrategy | None = None,
        local_save: LocalSaveTarget | None = None,
    ) -> JsonValue:
        policy = cache_policy or CachePolicy()
        cache = self.cache if policy.enabled else None
        key = request.signature()

        if cache is not None:
            entry = cache.get(key)
            if entry is not None:
                log.info("Using cached document for %s (expires %s)", request.url, entry.expires_at)
                return entry.value

        async with self.client_factory(self.resilience) as client:
            document = await Paginator(client).paginate(request, pagination)

        if local_save is not None:
            save_document(document, local_save)

        if cache is not None:
            cache.set(key, document, ttl_seconds=policy.ttl_seconds)
        return document
