"""Ready-made pagination strategies for common API styles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import PathResolutionError
from .extract import resolve_selector
from .merge import deep_merge
from .ports.fetching import NextPage, PaginationStrategy

if TYPE_CHECKING:
    from ._types import JsonValue
    from .ports.fetching import MergeRule


def _lookup(page: JsonValue, path: str) -> JsonValue:
    try:
        return resolve_selector(page, path)
    except PathResolutionError:
        return None


def _as_int(value: JsonValue) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)  # pyright: ignore[reportArgumentType]
    except (TypeError, ValueError):
        return None


def follow_next_link(
    next_path: str = "next",
    *,
    merge: MergeRule = deep_merge,
    max_pages: int | None = None,
) -> PaginationStrategy:
    """Follow the url found at ``next_path`` in each page until it is empty or missing."""

    def compute_next_request(page: JsonValue, _accumulated: JsonValue) -> NextPage | None:
        next_url = _lookup(page, next_path)
        if not next_url or not isinstance(next_url, str):
            return None
        return NextPage(url=next_url)

    return PaginationStrategy(
        compute_next_request=compute_next_request, merge=merge, max_pages=max_pages
    )


def page_number(
    *,
    param: str = "page",
    page_path: str = "page",
    total_pages_path: str = "total_pages",
    merge: MergeRule = deep_merge,
    max_pages: int | None = None,
) -> PaginationStrategy:
    """Request ``param=current+1`` while the page reports fewer pages than the total."""

    def compute_next_request(page: JsonValue, _accumulated: JsonValue) -> NextPage | None:
        current = _as_int(_lookup(page, page_path))
        total = _as_int(_lookup(page, total_pages_path))
        if current is None or total is None or current >= total:
            return None
        return NextPage(params={param: current + 1})

    return PaginationStrategy(
        compute_next_request=compute_next_request, merge=merge, max_pages=max_pages
    )
