"""Canonical node records handed to the host."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from ._types import JsonObject, JsonValue

JSON_MEDIA_TYPE: Final[str] = "application/json"
DUMMY_NODE_ID: Final[str] = "dummy"

_DIGEST_EXCLUDED = frozenset({"id", "internal"})


def content_digest(fields: Mapping[str, JsonValue]) -> str:
    """MD5 of the canonical JSON form of ``fields``; key order does not matter."""

    payload = {key: value for key, value in fields.items() if key not in _DIGEST_EXCLUDED}
    canonical = json.dumps(
        payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str
    )
    return hashlib.md5(canonical.encode("utf-8"), usedforsecurity=False).hexdigest()


@dataclass(slots=True, frozen=True)
class NodeInternal:
    type: str
    content_digest: str
    media_type: str = JSON_MEDIA_TYPE

    def to_record(self) -> JsonObject:
        return {
            "type": self.type,
            "mediaType": self.media_type,
            "contentDigest": self.content_digest,
        }


@dataclass(slots=True, frozen=True)
class Node:
    id: str
    internal: NodeInternal
    fields: Mapping[str, JsonValue] = field(default_factory=dict)
    parent: str | None = None
    children: tuple[str, ...] = ()

    @property
    def type(self) -> str:
        return self.internal.type

    @property
    def is_dummy(self) -> bool:
        return self.id == DUMMY_NODE_ID

    def to_record(self) -> JsonObject:
        """Flat record in the shape graph stores expect (entity fields at the top level)."""

        return {
            **self.fields,
            "id": self.id,
            "parent": self.parent,
            "children": list(self.children),
            "internal": self.internal.to_record(),
        }


type DerivedValueFn = Callable[[Node, JsonValue], object]


@dataclass(slots=True, frozen=True)
class DerivedField:
    """Extra field computed from the created node and the raw document."""

    name: str
    value_fn: DerivedValueFn
