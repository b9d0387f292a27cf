"""Field-name sanitization for entity records.

Node fields end up as identifiers in downstream query schemas, so every key has
to match ``^[_a-zA-Z][_a-zA-Z0-9]*$`` and must not shadow one of the fields the
node record itself owns.
"""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .errors import NamingConflictWarning

if TYPE_CHECKING:
    from ._types import JsonValue

log = getLogger(__name__)

CONFLICT_PREFIX: Final[str] = "alternative_"
RESERVED_FIELDS: Final[frozenset[str]] = frozenset(
    {"id", "children", "parent", "fields", "internal"}
)

_NAME_RX = re.compile(r"^[_a-zA-Z][_a-zA-Z0-9]*$")
_FIRST_CHAR_RX = re.compile(r"^[_a-zA-Z]")
_SEPARATOR_RUNS = re.compile(r"(?:-|__|:|\$|\.|\s)+")
_LEFTOVER_CHARS = re.compile(r"[^_a-zA-Z0-9]")
_LEGACY_ID_KEY: Final[str] = "ID"


def _replace_invalid(key: str) -> str:
    return _LEFTOVER_CHARS.sub("_", _SEPARATOR_RUNS.sub("_", key))


def sanitize_key(key: str, *, verbose: bool = False) -> str:
    """Return ``key`` rewritten into a valid, non-reserved field name."""

    original = str(key)
    new_key = "id" if original == _LEGACY_ID_KEY else original

    if not _NAME_RX.match(new_key):
        new_key = _replace_invalid(new_key)
    if not _FIRST_CHAR_RX.match(new_key):
        new_key = f"{CONFLICT_PREFIX}{new_key}"
    if new_key in RESERVED_FIELDS:
        new_key = _replace_invalid(f"{CONFLICT_PREFIX}{new_key}")

    if verbose and new_key != original:
        log.warning(
            'Key "%s" breaks the field naming convention. Renamed to "%s"',
            original,
            new_key,
            extra={"category": NamingConflictWarning},
        )
    return new_key


def sanitize_keys(value: JsonValue, *, verbose: bool = False) -> JsonValue:
    """Rename every object key inside ``value``, leaving array order and scalars intact."""

    if isinstance(value, dict):
        renamed: dict[str, JsonValue] = {}
        for key, item in value.items():
            new_key = sanitize_key(key, verbose=verbose)
            if verbose and new_key in renamed:
                log.warning(
                    'Key "%s" collides with an earlier key renamed to "%s"; '
                    "keeping the later value",
                    key,
                    new_key,
                    extra={"category": NamingConflictWarning},
                )
            renamed[new_key] = sanitize_keys(item, verbose=verbose)
        return renamed
    if isinstance(value, list):
        return [sanitize_keys(item, verbose=verbose) for item in value]
    return value
