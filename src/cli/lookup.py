"""Resolve IFSC codes from the command line.

Usage::

    python -m src.cli.lookup HDFC0CAGSBK
    python -m src.cli.lookup hdfc0cagsbk --json
    python -m src.cli.lookup --stats

Runs the same cache -> store -> provider resolution as the HTTP API,
against the store and cache configured in ``.env``.  Log lines go to
stderr so stdout carries only the result.

Exit codes: 0 on success, 1 when the code is unknown or the registry is
unreachable, 2 for a malformed code or bad arguments.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from src.models.ifsc import IFSCResponse, StoreStats
from src.utils.errors import IFSCServiceError, InvalidIFSCFormatError
from src.utils.validation import normalize_ifsc

_EXIT_OK = 0
_EXIT_FAILED = 1
_EXIT_USAGE = 2


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text(result: IFSCResponse) -> str:
    lines = [f"Source:       {result.source.value} (updated {result.last_updated.isoformat()})"]
    for key, value in result.details.to_payload().items():
        if isinstance(value, bool):
            value = "yes" if value else "no"
        lines.append(f"{key + ':':<13} {value or '-'}")
    return "\n".join(lines)


def _format_stats_text(stats: StoreStats) -> str:
    return (
        f"Total records:  {stats.total_records}\n"
        f"Fresh records:  {stats.fresh_records}\n"
        f"Stale records:  {stats.stale_records}\n"
        f"Fresh window:   {stats.freshness_window_days} days"
    )


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _lookup(service: Any, ifsc_code: str, json_output: bool) -> int:
    """Resolve one code and print it.  Returns the process exit code."""
    try:
        result = await service.resolve(ifsc_code)
    except IFSCServiceError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return _EXIT_FAILED

    if json_output:
        print(_dump(result.model_dump(mode="json", by_alias=True)))
    else:
        print(_format_text(result))
    return _EXIT_OK


async def _stats(service: Any, json_output: bool) -> int:
    try:
        stats = await service.get_stats()
    except IFSCServiceError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return _EXIT_FAILED

    print(_dump(stats.model_dump()) if json_output else _format_stats_text(stats))
    return _EXIT_OK


async def _run(ifsc_code: str | None, show_stats: bool, json_output: bool) -> int:
    """Build the components, run one command, and release everything."""
    # Deferred: src.main loads settings and configures logging on import.
    from src.main import build_components, settings
    from src.utils.logging import configure_logging

    configure_logging(log_level=settings.log_level, stream=sys.stderr)

    components = build_components(settings)
    store = components["store"]
    cache = components["cache"]
    try:
        try:
            await store.initialize()
            await cache.initialize()
        except IFSCServiceError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return _EXIT_FAILED

        service = components["ifsc_service"]
        if show_stats:
            return await _stats(service, json_output)
        return await _lookup(service, ifsc_code or "", json_output)
    finally:
        await components["provider_registry"].aclose()
        await components["http_client"].aclose()
        await cache.close()
        await store.close()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.lookup",
        description="Look up Indian bank branch details by IFSC code.",
    )
    parser.add_argument(
        "ifsc",
        nargs="?",
        help="IFSC code to resolve, e.g. HDFC0CAGSBK (case-insensitive).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the result as JSON.",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print store freshness statistics instead of resolving a code.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Exits with the command's status code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.stats == bool(args.ifsc):
        parser.error("give exactly one of an IFSC code or --stats")

    ifsc_code: str | None = None
    if args.ifsc:
        try:
            ifsc_code = normalize_ifsc(args.ifsc)
        except InvalidIFSCFormatError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            sys.exit(_EXIT_USAGE)

    sys.exit(asyncio.run(_run(ifsc_code, args.stats, args.json_output)))


if __name__ == "__main__":
    main()
