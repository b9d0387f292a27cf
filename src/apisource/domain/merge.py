"""Rules for folding a new page into the accumulated paginated document."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._types import JsonValue


def append(accumulated: JsonValue, page: JsonValue) -> JsonValue:
    """Concatenate pages into one list, wrapping non-list values."""

    head = accumulated if isinstance(accumulated, list) else [accumulated]
    tail = page if isinstance(page, list) else [page]
    return [*head, *tail]


def deep_merge(accumulated: JsonValue, page: JsonValue) -> JsonValue:
    """Merge objects key by key, concatenating lists found at the same path.

    Scalars and mismatched types are taken from the newer page.
    """

    if isinstance(accumulated, dict) and isinstance(page, dict):
        merged = dict(accumulated)
        for key, value in page.items():
            merged[key] = deep_merge(merged[key], value) if key in merged else value
        return merged
    if isinstance(accumulated, list) and isinstance(page, list):
        return [*accumulated, *page]
    return page


def replace(accumulated: JsonValue, page: JsonValue) -> JsonValue:  # noqa: ARG001
    return page


MERGE_RULES = {
    "append": append,
    "deep": deep_merge,
    "replace": replace,
}
