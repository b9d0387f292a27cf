"""JSON value aliases shared by the fetch and normalization code."""

from __future__ import annotations

type JsonScalar = str | int | float | bool | None
type JsonValue = dict[str, JsonValue] | list[JsonValue] | JsonScalar
type JsonObject = dict[str, JsonValue]
