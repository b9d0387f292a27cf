"""Pipeline driver: fetch every configured source, then normalize it into nodes."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from apisource.adapters.api import DocumentFetcher, LocalSaveTarget, authenticate
from apisource.config.storage import get_storage_config
from apisource.domain.errors import ApiSourceError
from apisource.domain.normalize import normalize_entities
from apisource.domain.ports.caching import CachePolicy
from apisource.domain.ports.host import HostEnvironment
from apisource.domain.sources import resolve_source

if TYPE_CHECKING:
    from apisource.domain._types import JsonValue
    from apisource.domain.nodes import Node
    from apisource.domain.ports.host import HostServices
    from apisource.domain.sources import PluginOptions, SourceConfig


log = getLogger(__name__)


@dataclass(slots=True)
class PipelineResult:
    nodes: list[Node] = field(default_factory=list)
    documents: dict[str, JsonValue] = field(default_factory=dict)
    failed: dict[str, ApiSourceError] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failed


def _local_save_target(config: SourceConfig) -> LocalSaveTarget | None:
    if not config.local_save:
        return None
    directory = config.storage_path or get_storage_config().raw_documents_dir()
    return LocalSaveTarget(directory=directory, name=config.entity_type_name)


async def _run_source(
    config: SourceConfig,
    *,
    fetcher: DocumentFetcher,
    host: HostServices,
    environment: HostEnvironment,
    authorization: str | None,
    verbose: bool,
    result: PipelineResult,
) -> None:
    document = await fetcher.fetch(
        config.request(authorization=authorization),
        cache_policy=CachePolicy(
            enabled=config.cache_enabled, ttl_seconds=config.cache_ttl_seconds
        ),
        pagination=config.pagination,
        local_save=_local_save_target(config),
    )
    result.documents[config.entity_type] = document

    if config.skip_node_creation:
        log.info("Fetched %s without creating nodes", config.entity_type)
        return

    nodes = normalize_entities(
        document, config, host=host, environment=environment, verbose=verbose
    )
    result.nodes.extend(nodes)
    log.info("Created %d %s nodes", len(nodes) - 1, config.entity_type)


async def source_nodes(
    options: PluginOptions,
    *,
    host: HostServices,
    fetcher: DocumentFetcher | None = None,
    environment: HostEnvironment | None = None,
) -> PipelineResult:
    """Process every configured source in order, one at a time.

    Configuration problems surface before any request is made. A failing source
    either aborts the run or, with ``on_error="skip"``, is recorded in
    :attr:`PipelineResult.failed` while the remaining sources still run.
    """

    configs = [resolve_source(options.defaults, settings) for settings in options.sources]
    active_fetcher = fetcher or DocumentFetcher()
    active_environment = environment or HostEnvironment.from_environment()

    authorization: str | None = None
    if options.token_request is not None:
        async with active_fetcher.client_factory(active_fetcher.resilience) as client:
            authorization = await authenticate(client, options.token_request)

    result = PipelineResult()
    for config in configs:
        try:
            await _run_source(
                config,
                fetcher=active_fetcher,
                host=host,
                environment=active_environment,
                authorization=authorization,
                verbose=options.verbose,
                result=result,
            )
        except ApiSourceError as exc:
            if options.on_error == "abort":
                raise
            log.exception("Skipping source %s", config.entity_type)
            result.failed[config.entity_type] = exc

    return result


def run_pipeline(
    options: PluginOptions,
    *,
    host: HostServices,
    fetcher: DocumentFetcher | None = None,
    environment: HostEnvironment | None = None,
) -> PipelineResult:
    """Synchronous entry point around :func:`source_nodes`."""

    return asyncio.run(
        source_nodes(options, host=host, fetcher=fetcher, environment=environment)
    )
