"""httpx client with retries and optional rate limiting."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from apisource.config.http_resilience import ResilienceConfig, ResponseHook, RetryPolicy

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import (
        AuthTypes,
        HeaderTypes,
        QueryParamTypes,
        RequestContent,
        RequestData,
        TimeoutTypes,
        URLTypes,
    )


class RetryableStatusError(httpx.HTTPStatusError):
    """Raised internally for responses whose status is in the retry forcelist."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(
            f"Retryable status {response.status_code}",
            request=response.request,
            response=response,
        )


class RequestOptions(TypedDict, total=False):
    content: RequestContent | None
    data: RequestData | None
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    auth: AuthTypes | UseClientDefault | None
    timeout: TimeoutTypes | UseClientDefault


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    event_hooks: dict[str, list[ResponseHook]]
    transport: httpx.AsyncBaseTransport


def build_retrying(policy: RetryPolicy) -> AsyncRetrying:
    return AsyncRetrying(
        retry=retry_if_exception_type((*policy.retry_on_exceptions, RetryableStatusError)),
        stop=stop_after_attempt(policy.total + 1),
        wait=wait_exponential(multiplier=policy.backoff_factor, max=policy.max_backoff_wait)
        + wait_random(0, policy.backoff_jitter),
        reraise=True,
    )


class ResilientClient:
    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        headers = dict(config.default_headers) if config.default_headers else None
        event_hooks = {"response": list(config.response_hooks)} if config.response_hooks else None

        client_kwargs: AsyncClientOptions = {"timeout": config.timeout_seconds}
        if transport is not None:
            client_kwargs["transport"] = transport
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if headers is not None:
            client_kwargs["headers"] = headers
        if event_hooks is not None:
            client_kwargs["event_hooks"] = event_hooks

        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        """Send a request, retrying idempotent methods on transient failures.

        Once retries are exhausted for a forcelisted status, the last response is
        returned so the caller sees the real status code.
        """

        async def do_request() -> httpx.Response:
            return await self._client.request(method, url, **kwargs)

        policy = self.config.retry
        if method.upper() not in policy.allowed_methods or policy.total <= 0:
            return await self._send(do_request)

        try:
            async for attempt in build_retrying(policy):
                with attempt:
                    response = await self._send(do_request)
                    if response.status_code in policy.status_forcelist:
                        raise RetryableStatusError(response)
        except RetryableStatusError as exc:
            return exc.response
        return response  # pyright: ignore[reportPossiblyUnboundVariable]

    async def _send(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        if self._limiter is None:
            return await func()
        async with self._limiter:
            return await func()


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)
