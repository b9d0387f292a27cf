"""Bearer token acquisition run once before any source is fetched."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from apisource.domain.errors import AuthError, FetchError

from .paginator import Paginator

if TYPE_CHECKING:
    from apisource.adapters.http_resilience import ResilientClient
    from apisource.domain.ports.fetching import TokenRequest

log = getLogger(__name__)


async def request_token(client: ResilientClient, token_request: TokenRequest) -> str:
    """Return the raw token from the login response or raise :class:`AuthError`."""

    try:
        payload = await Paginator(client).send(token_request.to_request())
    except FetchError as exc:
        raise AuthError(f"Token request to {token_request.url} failed: {exc}") from exc

    token = payload.get(token_request.token_field) if isinstance(payload, dict) else None
    if not token or not isinstance(token, str):
        raise AuthError(
            f"Token response from {token_request.url} has no {token_request.token_field!r} field"
        )
    return token


async def authenticate(client: ResilientClient, token_request: TokenRequest) -> str | None:
    """Return an ``Authorization`` header value, or ``None`` when authentication fails.

    A failed login is not fatal: the run continues with unauthenticated requests.
    """

    try:
        token = await request_token(client, token_request)
    except AuthError as exc:
        log.error("Encountered authentication error, continuing without a token: %s", exc)  # noqa: TRY400
        return None
    log.info("Authenticated against %s", token_request.url)
    return f"Bearer {token}"
