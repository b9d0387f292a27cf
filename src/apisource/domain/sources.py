"""Per-source settings and their resolution against shared defaults."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Literal

from apisource.config.errors import ConfigurationError
from apisource.domain.ports.caching import DEFAULT_CACHE_TTL_SECONDS
from apisource.domain.ports.fetching import RequestSpec

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from apisource.domain._types import JsonObject, JsonValue
    from apisource.domain.nodes import DerivedField
    from apisource.domain.ports.fetching import (
        BasicAuth,
        PaginationStrategy,
        PayloadKey,
        TokenRequest,
    )

type ErrorPolicy = Literal["abort", "skip"]


@dataclass(slots=True, frozen=True)
class SourceSettings:
    """Options for one source; unset values fall back to the shared defaults."""

    type_prefix: str | None = None
    url: str | None = None
    method: str | None = None
    headers: Mapping[str, str] | None = None
    body: JsonValue = None
    payload_key: PayloadKey | None = None
    params: Mapping[str, object] | None = None
    auth: BasicAuth | None = None
    local_save: bool = False
    storage_path: Path | None = None
    skip_node_creation: bool = False
    selector_path: str | None = None
    pagination: PaginationStrategy | None = None
    entity_type_name: str | None = None
    schema_hint: JsonObject | None = None
    derived_fields: tuple[DerivedField, ...] = ()
    dev_refresh_enabled: bool = False
    refresh_key_field: str | None = None
    cache_enabled: bool = False
    cache_ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class SourceConfig:
    """Effective, immutable configuration of one source for one run."""

    entity_type_name: str
    url: str
    type_prefix: str = ""
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: JsonValue = None
    payload_key: PayloadKey = "json"
    params: Mapping[str, object] = field(default_factory=dict)
    auth: BasicAuth | None = None
    local_save: bool = False
    storage_path: Path | None = None
    skip_node_creation: bool = False
    selector_path: str | None = None
    pagination: PaginationStrategy | None = None
    schema_hint: JsonObject = field(default_factory=dict)
    derived_fields: tuple[DerivedField, ...] = ()
    dev_refresh_enabled: bool = False
    refresh_key_field: str = "id"
    cache_enabled: bool = False
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS

    @property
    def entity_type(self) -> str:
        return f"{self.type_prefix}{self.entity_type_name}"

    def request(self, *, authorization: str | None = None) -> RequestSpec:
        headers = dict(self.headers)
        if authorization:
            headers["Authorization"] = authorization
        return RequestSpec(
            url=self.url,
            method=self.method,
            headers=headers,
            params=dict(self.params),
            body=self.body,
            payload_key=self.payload_key,
            auth=self.auth,
        )


@dataclass(slots=True, frozen=True)
class PluginOptions:
    defaults: SourceSettings = field(default_factory=SourceSettings)
    sources: tuple[SourceSettings, ...] = (SourceSettings(),)
    token_request: TokenRequest | None = None
    verbose: bool = False
    on_error: ErrorPolicy = "abort"


def _pick(default: object, override: object) -> object:
    return override if override else default


def resolve_source(defaults: SourceSettings, override: SourceSettings) -> SourceConfig:
    """Overlay ``override`` on ``defaults``; an override value wins only when truthy."""

    merged = {
        item.name: _pick(getattr(defaults, item.name), getattr(override, item.name))
        for item in fields(SourceSettings)
    }

    entity_type_name = merged.pop("entity_type_name")
    if not entity_type_name:
        raise ConfigurationError("Every source needs an entity_type_name")
    url = merged.pop("url")
    if not url:
        raise ConfigurationError(f"Source {entity_type_name!r} has no url")

    resolved = {key: value for key, value in merged.items() if value is not None}
    return SourceConfig(
        entity_type_name=str(entity_type_name),
        url=str(url),
        **resolved,  # pyright: ignore[reportArgumentType]
    )
