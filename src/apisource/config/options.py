"""Load plugin options from a TOML file.

The file mirrors :class:`~apisource.domain.sources.PluginOptions`: top-level flags,
a ``[defaults]`` table shared by every source, an optional ``[token_request]``
table and one ``[[sources]]`` table per entity type. Any string that is exactly
``${NAME}`` is replaced by the environment variable ``NAME``.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    PositiveInt,
    ValidationError,
    field_validator,
)

from apisource.domain.merge import MERGE_RULES
from apisource.domain.pagination import follow_next_link, page_number
from apisource.domain.ports.fetching import BasicAuth, TokenRequest
from apisource.domain.sources import PluginOptions, SourceSettings

from .env import expand_placeholder
from .errors import ConfigurationError

if TYPE_CHECKING:
    from apisource.domain.ports.fetching import PaginationStrategy

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


def _upper(value: object) -> object:
    return value.upper() if isinstance(value, str) else value


class OptionsBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class BasicAuthModel(OptionsBaseModel):
    username: str
    password: str


class PaginationModel(OptionsBaseModel):
    kind: Literal["next_link", "page_number"]
    next_path: str = "next"
    param: str = "page"
    page_path: str = "page"
    total_pages_path: str = "total_pages"
    merge: Literal["append", "deep", "replace"] = "deep"
    max_pages: PositiveInt | None = None

    def to_strategy(self) -> PaginationStrategy:
        merge = MERGE_RULES[self.merge]
        if self.kind == "next_link":
            return follow_next_link(self.next_path, merge=merge, max_pages=self.max_pages)
        return page_number(
            param=self.param,
            page_path=self.page_path,
            total_pages_path=self.total_pages_path,
            merge=merge,
            max_pages=self.max_pages,
        )


class SourceModel(OptionsBaseModel):
    type_prefix: str | None = None
    url: str | None = None
    method: HttpMethod | None = None
    headers: dict[str, str] | None = None
    body: JsonValue = None
    payload_key: Literal["json", "data", "content"] | None = None
    params: dict[str, str | int | float | bool] | None = None
    auth: BasicAuthModel | None = None
    local_save: bool = False
    storage_path: Path | None = None
    skip_node_creation: bool = False
    selector_path: str | None = None
    pagination: PaginationModel | None = None
    entity_type_name: str | None = None
    schema_hint: dict[str, JsonValue] | None = None
    dev_refresh_enabled: bool = False
    refresh_key_field: str | None = None
    cache_enabled: bool = False
    cache_ttl_seconds: PositiveInt | None = None

    _normalize_method = field_validator("method", mode="before")(_upper)

    def to_settings(self, *, base_dir: Path) -> SourceSettings:
        storage_path = self.storage_path
        if storage_path is not None and not storage_path.is_absolute():
            storage_path = base_dir / storage_path
        return SourceSettings(
            type_prefix=self.type_prefix,
            url=self.url,
            method=self.method,
            headers=self.headers,
            body=self.body,
            payload_key=self.payload_key,
            params=self.params,
            auth=BasicAuth(self.auth.username, self.auth.password) if self.auth else None,
            local_save=self.local_save,
            storage_path=storage_path,
            skip_node_creation=self.skip_node_creation,
            selector_path=self.selector_path,
            pagination=self.pagination.to_strategy() if self.pagination else None,
            entity_type_name=self.entity_type_name,
            schema_hint=self.schema_hint,
            dev_refresh_enabled=self.dev_refresh_enabled,
            refresh_key_field=self.refresh_key_field,
            cache_enabled=self.cache_enabled,
            cache_ttl_seconds=self.cache_ttl_seconds,
        )


class TokenRequestModel(OptionsBaseModel):
    url: str
    method: HttpMethod = "POST"
    headers: dict[str, str] = Field(default_factory=dict)
    body: JsonValue = None
    payload_key: Literal["json", "data", "content"] = "json"
    token_field: str = "id_token"

    _normalize_method = field_validator("method", mode="before")(_upper)

    def to_token_request(self) -> TokenRequest:
        return TokenRequest(
            url=self.url,
            method=self.method,
            headers=self.headers,
            body=self.body,
            payload_key=self.payload_key,
            token_field=self.token_field,
        )


class OptionsFileModel(OptionsBaseModel):
    verbose: bool = False
    on_error: Literal["abort", "skip"] = "abort"
    token_request: TokenRequestModel | None = None
    defaults: SourceModel = Field(default_factory=SourceModel)
    sources: list[SourceModel] = Field(min_length=1)

    def to_options(self, *, base_dir: Path) -> PluginOptions:
        return PluginOptions(
            defaults=self.defaults.to_settings(base_dir=base_dir),
            sources=tuple(source.to_settings(base_dir=base_dir) for source in self.sources),
            token_request=self.token_request.to_token_request() if self.token_request else None,
            verbose=self.verbose,
            on_error=self.on_error,
        )


def _expand_env(value: object) -> object:
    if isinstance(value, str):
        return expand_placeholder(value)
    if isinstance(value, dict):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value


def parse_options(document: dict[str, object], *, base_dir: Path | None = None) -> PluginOptions:
    """Validate an already-decoded options mapping."""

    try:
        model = OptionsFileModel.model_validate(_expand_env(document))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid options: {exc}") from exc
    return model.to_options(base_dir=base_dir or Path.cwd())


def load_options(path: Path) -> PluginOptions:
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read options file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Options file {path} is not valid TOML: {exc}") from exc
    return parse_options(document, base_dir=path.resolve().parent)
