"""Shared logging helpers."""

from __future__ import annotations

import logging

# Per-request INFO lines from the HTTP stack; only shown in verbose runs.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Initialise the root logger once for CLI output.

    INFO by default, DEBUG with ``verbose``. Renamed keys and refresh
    misconfiguration are reported as WARNING records, so they show up either way.
    Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)
