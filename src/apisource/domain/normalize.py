"""Turn a fetched document into node records."""

from __future__ import annotations

from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, cast

from .errors import RefreshConfigWarning
from .extract import extract_entities
from .nodes import DUMMY_NODE_ID, Node, NodeInternal, content_digest
from .sanitize import sanitize_key, sanitize_keys

if TYPE_CHECKING:
    from ._types import JsonObject, JsonValue
    from .ports.host import HostEnvironment, HostServices
    from .sources import SourceConfig

log = getLogger(__name__)


def normalize_entities(
    document: JsonValue,
    config: SourceConfig,
    *,
    host: HostServices,
    environment: HostEnvironment,
    verbose: bool = False,
) -> list[Node]:
    """Create one node per extracted entity plus the trailing dummy node.

    Every node is passed to ``host.register_node`` as soon as it is built, then each
    derived field of the source is computed and passed to ``host.register_field``.
    """

    entities = [
        cast("JsonObject", sanitize_keys(entity, verbose=verbose))
        for entity in extract_entities(document, config.selector_path)
    ]
    dummy = cast("JsonObject", sanitize_keys(dict(config.schema_hint), verbose=verbose))
    entity_type = config.entity_type

    refresh_requested = environment.development and config.dev_refresh_enabled
    refresh_active = refresh_requested and environment.refresh_endpoint_enabled
    if refresh_requested and not environment.refresh_endpoint_enabled:
        log.warning(
            "%s: dev_refresh_enabled only works with ENABLE_REFRESH_ENDPOINT enabled; "
            "node ids stay generated",
            entity_type,
            extra={"category": RefreshConfigWarning},
        )
    refresh_key = sanitize_key(config.refresh_key_field)

    nodes: list[Node] = []
    seen_ids: set[str] = set()
    batch = [(entity, False) for entity in entities]
    batch.append((dummy, True))
    for fields, is_dummy in batch:
        if is_dummy:
            node_id = DUMMY_NODE_ID
        elif refresh_active and fields.get(refresh_key):
            node_id = str(fields[refresh_key])
        else:
            node_id = host.generate_id()
        if refresh_active and node_id in seen_ids:
            log.warning(
                "%s: node id %r is used by more than one node; refresh keys must be unique",
                entity_type,
                node_id,
                extra={"category": RefreshConfigWarning},
            )
        seen_ids.add(node_id)

        node = Node(
            id=node_id,
            internal=NodeInternal(type=entity_type, content_digest=content_digest(fields)),
            fields=MappingProxyType(fields),
        )
        host.register_node(node)
        for derived in config.derived_fields:
            host.register_field(
                node=node, name=derived.name, value=derived.value_fn(node, document)
            )
        nodes.append(node)

    log.debug("Created %d %s nodes (including the dummy node)", len(nodes), entity_type)
    return nodes
