from __future__ import annotations

import asyncio

import httpx
import pytest

from apisource.adapters.http_resilience import ResilientClient
from apisource.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy

FAST_RETRY = RetryPolicy(total=2, backoff_factor=0, backoff_jitter=0)


def _client(transport: httpx.MockTransport, retry: RetryPolicy = FAST_RETRY) -> ResilientClient:
    config = ResilienceConfig(name="test", base_url="https://api.test", retry=retry)
    return ResilientClient(config, transport=transport)


def test_retries_forcelisted_status_then_succeeds() -> None:
    statuses = iter([503, 502, 200])

    def handler(_request: httpx.Request) -> httpx.Response:
        status = next(statuses)
        return httpx.Response(status, json={"status": status})

    async def run() -> httpx.Response:
        async with _client(httpx.MockTransport(handler)) as client:
            return await client.request("GET", "/items")

    response = asyncio.run(run())

    assert response.status_code == 200


def test_returns_last_response_when_retries_exhausted() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    async def run() -> httpx.Response:
        async with _client(httpx.MockTransport(handler)) as client:
            return await client.request("GET", "/items")

    response = asyncio.run(run())

    assert response.status_code == 500
    assert len(calls) == FAST_RETRY.total + 1


def test_does_not_retry_post() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    async def run() -> httpx.Response:
        async with _client(httpx.MockTransport(handler)) as client:
            return await client.request("POST", "/login", json={"user": "u"})

    response = asyncio.run(run())

    assert response.status_code == 503
    assert len(calls) == 1


def test_retries_transport_errors_and_reraises() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("boom", request=request)

    async def run() -> httpx.Response:
        async with _client(httpx.MockTransport(handler)) as client:
            return await client.request("GET", "/items")

    with pytest.raises(httpx.ConnectError):
        asyncio.run(run())
    assert len(calls) == FAST_RETRY.total + 1


def test_applies_default_headers_and_rate_limit() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    config = ResilienceConfig(
        name="test",
        base_url="https://api.test",
        retry=RetryPolicy(total=0),
        ratelimit=RateLimit(max_calls=10, per_seconds=1),
        default_headers={"User-Agent": "apisource-tests"},
    )

    async def run() -> None:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            await client.request("GET", "/a")
            await client.request("GET", "/b")

    asyncio.run(run())

    assert [request.url.path for request in seen] == ["/a", "/b"]
    assert all(request.headers["User-Agent"] == "apisource-tests" for request in seen)
