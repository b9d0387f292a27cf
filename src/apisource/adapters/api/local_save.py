"""Write fetched documents to disk for inspection."""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from apisource.domain._types import JsonValue

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LocalSaveTarget:
    directory: Path
    name: str

    @property
    def path(self) -> Path:
        return self.directory / f"{self.name}.json"


def save_document(document: JsonValue, target: LocalSaveTarget) -> Path | None:
    """Persist ``document`` as JSON; failures are logged and reported as ``None``."""

    try:
        target.directory.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(document, indent=2, ensure_ascii=False)
        target.path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        log.warning("Could not save %s locally: %s", target.path, exc)
        return None
    log.info("Saved %s", target.path)
    return target.path
