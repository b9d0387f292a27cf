from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from apisource.adapters.api import DocumentFetcher
from apisource.adapters.collector import NodeCollector
from apisource.adapters.memory_cache import MemoryCacheStore
from apisource.adapters.sqlalchemy import SqlAlchemyCacheStore
from apisource.app import run_pipeline
from apisource.config import ConfigurationError, configure_logging
from apisource.config.options import load_options

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from apisource.domain.ports.caching import CacheStore

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch API sources and emit normalized nodes")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Fetch every configured source and write its nodes")
    run.add_argument("config", type=Path, help="Path to the TOML options file")
    run.add_argument(
        "--output",
        type=str,
        default="-",
        help="JSON lines file to write nodes to, '-' for stdout (default: %(default)s)",
    )
    run.add_argument(
        "--include-dummy",
        action="store_true",
        help="Also write the per-type dummy nodes",
    )
    run.add_argument(
        "--cache-store",
        choices=("sqlite", "memory", "none"),
        default="sqlite",
        help="Where sources with cache_enabled keep fetched documents (default: %(default)s)",
    )
    run.add_argument(
        "--skip-failed",
        action="store_true",
        help="Continue with the next source when one fails",
    )
    run.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging and key rename diagnostics",
    )

    return parser.parse_args(list(argv))


def _build_cache_store(kind: str) -> CacheStore | None:
    if kind == "sqlite":
        return SqlAlchemyCacheStore()
    if kind == "memory":
        return MemoryCacheStore()
    return None


def _write_nodes(collector: NodeCollector, output: str, *, include_dummy: bool) -> int:
    if output == "-":
        return collector.write_jsonl(sys.stdout, include_dummy=include_dummy)
    with Path(output).open("w", encoding="utf-8") as handle:
        return collector.write_jsonl(handle, include_dummy=include_dummy)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        options = load_options(parsed_args.config)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    if parsed_args.verbose:
        options = replace(options, verbose=True)
    if parsed_args.skip_failed:
        options = replace(options, on_error="skip")

    collector = NodeCollector()
    try:
        fetcher = DocumentFetcher(cache=_build_cache_store(parsed_args.cache_store))
        result = run_pipeline(options, host=collector.services(), fetcher=fetcher)
        written = _write_nodes(
            collector, parsed_args.output, include_dummy=parsed_args.include_dummy
        )
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during run")
        sys.exit(1)

    log.info("Wrote %d nodes", written)
    if result.failed:
        log.error("Failed sources: %s", ", ".join(sorted(result.failed)))
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
