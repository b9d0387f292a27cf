"""Locate the entity collection inside an arbitrarily nested response document."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .errors import InvalidShapeError, PathResolutionError

if TYPE_CHECKING:
    from ._types import JsonObject, JsonValue

type Segment = str | int

_TOKEN_RX = re.compile(r"([^.\[\]]+)|\[(\d+)\]")


def parse_selector(selector: str) -> tuple[Segment, ...]:
    """Split ``data.items[0].rows`` into ``("data", "items", 0, "rows")``.

    Bare numeric dotted segments (``pages.0.items``) are kept as strings and only
    treated as list indexes when they meet a list during resolution.
    """

    segments: list[Segment] = []
    position = 0
    for part in selector.split("."):
        if not part:
            raise PathResolutionError(
                f"Empty segment in selector {selector!r}", selector=selector, segment=None
            )
        cursor = 0
        for match in _TOKEN_RX.finditer(part):
            if match.start() != cursor:
                break
            name, index = match.groups()
            segments.append(int(index) if index is not None else name)
            cursor = match.end()
        if cursor != len(part):
            raise PathResolutionError(
                f"Malformed selector {selector!r} near position {position + cursor}",
                selector=selector,
                segment=part,
            )
        position += len(part) + 1
    return tuple(segments)


def resolve_selector(document: JsonValue, selector: str) -> JsonValue:
    current = document
    for segment in parse_selector(selector):
        if isinstance(current, dict):
            key = str(segment)
            if key not in current:
                raise PathResolutionError(
                    f"Key {key!r} not found while resolving {selector!r}",
                    selector=selector,
                    segment=segment,
                )
            current = current[key]
        elif isinstance(current, list):
            index = _as_index(segment)
            if index is None or not -len(current) <= index < len(current):
                raise PathResolutionError(
                    f"Index {segment!r} out of range while resolving {selector!r}",
                    selector=selector,
                    segment=segment,
                )
            current = current[index]
        else:
            raise PathResolutionError(
                f"Cannot step into {type(current).__name__} at {segment!r} "
                f"while resolving {selector!r}",
                selector=selector,
                segment=segment,
            )
    return current


def _as_index(segment: Segment) -> int | None:
    if isinstance(segment, int):
        return segment
    try:
        return int(segment)
    except ValueError:
        return None


def extract_entities(document: JsonValue, selector_path: str | None = None) -> list[JsonObject]:
    """Return the entity records found at ``selector_path`` (or the whole document)."""

    candidate = resolve_selector(document, selector_path) if selector_path else document

    if isinstance(candidate, dict):
        return [candidate]
    if not isinstance(candidate, list):
        raise InvalidShapeError(
            f"Expected an object or a list of objects, got {type(candidate).__name__}"
        )

    entities: list[JsonObject] = []
    for position, item in enumerate(candidate):
        if not isinstance(item, dict):
            raise InvalidShapeError(
                f"Entity at position {position} is a {type(item).__name__}, expected an object"
            )
        entities.append(item)
    return entities
