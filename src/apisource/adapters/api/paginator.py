"""Issue HTTP requests for a source and walk its pages."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from apisource.domain.errors import FetchError
from apisource.domain.ports.fetching import NextPage

if TYPE_CHECKING:
    from apisource.adapters.http_resilience import RequestOptions, ResilientClient
    from apisource.domain._types import JsonValue
    from apisource.domain.ports.fetching import PaginationStrategy, RequestSpec

log = getLogger(__name__)


def _request_options(request: RequestSpec) -> RequestOptions:
    options: RequestOptions = {}
    if request.headers:
        options["headers"] = dict(request.headers)
    if request.params:
        options["params"] = {key: str(value) for key, value in request.params.items()}
    if request.auth is not None:
        options["auth"] = httpx.BasicAuth(request.auth.username, request.auth.password)
    if request.body is not None:
        if request.payload_key == "json":
            options["json"] = request.body
        elif request.payload_key == "data":
            options["data"] = request.body  # pyright: ignore[reportGeneralTypeIssues]
        elif isinstance(request.body, str):
            options["content"] = request.body
        else:
            options["content"] = json.dumps(request.body)
    return options


class Paginator:
    def __init__(self, client: ResilientClient) -> None:
        self._client = client

    async def send(self, request: RequestSpec) -> JsonValue:
        """Perform one request and return its decoded JSON body."""

        log.debug("%s %s", request.method.upper(), request.url)
        try:
            response = await self._client.request(
                request.method.upper(), request.url, **_request_options(request)
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"{request.method.upper()} {request.url} returned {exc.response.status_code}",
                url=request.url,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(
                f"{request.method.upper()} {request.url} failed: {exc}", url=request.url
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(
                f"{request.method.upper()} {request.url} did not return JSON",
                url=request.url,
                status_code=response.status_code,
            ) from exc

    async def paginate(
        self,
        request: RequestSpec,
        pagination: PaginationStrategy | None = None,
    ) -> JsonValue:
        page = await self.send(request)
        if pagination is None:
            return page

        accumulated = page
        pages = 1
        current = request
        while True:
            next_request = pagination.compute_next_request(page, accumulated)
            if next_request is None:
                break
            if pagination.max_pages is not None and pages >= pagination.max_pages:
                log.warning(
                    "Stopping pagination of %s after %d pages (max_pages reached)",
                    request.url,
                    pages,
                )
                break
            current = (
                current.follow(next_request) if isinstance(next_request, NextPage) else next_request
            )
            page = await self.send(current)
            accumulated = pagination.merge(accumulated, page)
            pages += 1

        log.debug("Fetched %d pages from %s", pages, request.url)
        return accumulated
