"""Request descriptions and pagination contracts for fetching raw documents."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Literal

import httpx

from apisource.domain.merge import deep_merge

if TYPE_CHECKING:
    from apisource.domain._types import JsonValue

type PayloadKey = Literal["json", "data", "content"]
type MergeRule = Callable[[JsonValue, JsonValue], JsonValue]

_UNSIGNED_HEADERS = frozenset({"authorization"})


@dataclass(slots=True, frozen=True)
class BasicAuth:
    username: str
    password: str


@dataclass(slots=True, frozen=True)
class RequestSpec:
    """One HTTP call. ``payload_key`` selects how ``body`` is sent (JSON, form or raw)."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, object] = field(default_factory=dict)
    body: JsonValue = None
    payload_key: PayloadKey = "json"
    auth: BasicAuth | None = None

    def signature(self) -> str:
        """Stable cache key for the request; credentials do not take part."""

        identity = {
            "method": self.method.upper(),
            "url": self.url,
            "params": dict(self.params),
            "body": self.body,
            "payload_key": self.payload_key,
            "headers": {
                name.lower(): value
                for name, value in self.headers.items()
                if name.lower() not in _UNSIGNED_HEADERS
            },
        }
        canonical = json.dumps(identity, sort_keys=True, separators=(",", ":"), default=str)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def follow(self, next_page: NextPage) -> RequestSpec:
        """Return this request pointed at the next page; relative urls resolve against ours."""

        url = str(httpx.URL(self.url).join(next_page.url)) if next_page.url else self.url
        params = {**self.params, **next_page.params}
        if next_page.url and httpx.URL(url).query:
            params = dict(next_page.params)
        return replace(self, url=url, params=params)


@dataclass(slots=True, frozen=True)
class NextPage:
    """Partial request: a new url and/or extra query params applied to the previous request."""

    url: str | None = None
    params: Mapping[str, object] = field(default_factory=dict)


type ComputeNextRequest = Callable[[JsonValue, JsonValue], RequestSpec | NextPage | None]


@dataclass(slots=True, frozen=True)
class PaginationStrategy:
    """How to walk a paginated API.

    ``compute_next_request(page, accumulated)`` receives the page just fetched and
    the document accumulated so far (already including that page) and returns the
    next request, a :class:`NextPage` applied to the previous request, or ``None``
    once there is nothing left to fetch.
    """

    compute_next_request: ComputeNextRequest
    merge: MergeRule = deep_merge
    max_pages: int | None = None


@dataclass(slots=True, frozen=True)
class TokenRequest:
    """Login call issued once per run; ``token_field`` names the token in its JSON body."""

    url: str
    method: str = "POST"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: JsonValue = None
    payload_key: PayloadKey = "json"
    token_field: str = "id_token"

    def to_request(self) -> RequestSpec:
        return RequestSpec(
            url=self.url,
            method=self.method,
            headers=self.headers,
            body=self.body,
            payload_key=self.payload_key,
        )
