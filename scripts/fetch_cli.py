#!/usr/bin/env python3
"""Source fetch command-line interface.

Manages sources and runs fetches against the configured state backend
(STATE_BACKEND=redis is required: each run is a new process, and Redis
also shares state with the API process).

Usage::

    python scripts/fetch_cli.py save weather --url https://api.example.com/wx --ttl 600
    python scripts/fetch_cli.py list
    python scripts/fetch_cli.py fetch weather            # cached fetch
    python scripts/fetch_cli.py fetch weather --force    # live fetch
    python scripts/fetch_cli.py status
    python scripts/fetch_cli.py errors weather
    python scripts/fetch_cli.py set-limit 60
    python scripts/fetch_cli.py purge --yes              # remove ALL state
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

# Ensure project root is on sys.path so ``src.*`` imports work when this
# script is invoked directly (e.g. ``python scripts/fetch_cli.py``).
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.core.config import settings
from src.core.enums import StateBackendKind
from src.core.utils.logging_config import configure_logging
from src.fetch.services import FetchServices, build_services
from src.sources.models import Source, slugify_name


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).
    """
    parser = argparse.ArgumentParser(
        description="Manage and fetch configured API sources.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List configured sources")

    save = sub.add_parser("save", help="Create or replace a source")
    save.add_argument("name")
    save.add_argument("--url", required=True)
    save.add_argument("--method", default="GET")
    save.add_argument("--header", action="append", default=[], metavar="K=V")
    save.add_argument("--auth-type", default="none")
    save.add_argument("--auth-value", default="")
    save.add_argument("--ttl", type=int, default=300)
    save.add_argument("--transform", default="")
    save.add_argument("--fallback", default="")

    delete = sub.add_parser("delete", help="Delete a source and its cache/errors")
    delete.add_argument("name")

    fetch = sub.add_parser("fetch", help="Fetch a source")
    fetch.add_argument("name")
    fetch.add_argument("--force", action="store_true", help="Bypass the primary cache")

    sub.add_parser("status", help="Health of every source")

    errors = sub.add_parser("errors", help="Show a source's error log")
    errors.add_argument("name")
    errors.add_argument("--clear", action="store_true")

    limit = sub.add_parser("set-limit", help="Set the global requests-per-window limit")
    limit.add_argument("limit", type=int)

    purge = sub.add_parser("purge", help="Delete all sources, settings, errors and cache")
    purge.add_argument("--yes", action="store_true", help="Confirm the purge")

    return parser.parse_args(argv)


def _parse_headers(pairs: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"Header must look like KEY=VALUE, got {pair!r}")
        headers[key.strip()] = value.strip()
    return headers


async def run(args: argparse.Namespace, services: FetchServices) -> tuple[int, Any]:
    """Execute one command. Returns ``(exit_code, json_payload)``."""
    name = slugify_name(getattr(args, "name", ""))

    if args.command == "list":
        return 0, [s.public_dict() for s in await services.registry.list()]

    if args.command == "save":
        source = Source(
            name=args.name,
            url=args.url,
            method=args.method,
            headers=_parse_headers(args.header),
            auth_type=args.auth_type,
            auth_value=args.auth_value,
            cache_ttl=args.ttl,
            transform=args.transform,
            fallback=args.fallback,
        )
        if not await services.registry.upsert(source):
            return 1, {"error": "Failed to save source. Name and URL are required."}
        return 0, source.public_dict()

    if args.command == "delete":
        deleted = await services.forget_source(name)
        return (0 if deleted else 1), {"deleted": deleted, "name": name}

    if args.command == "fetch":
        result = await services.fetcher.fetch(name, force_refresh=args.force)
        return (0 if result.success else 1), result.to_dict()

    if args.command == "status":
        return 0, [h.to_dict() for h in await services.health()]

    if args.command == "errors":
        if args.clear:
            await services.error_log.clear(name)
        return 0, {
            "source": name,
            "recent_count": await services.error_log.count_recent(name),
            "errors": await services.error_log.get_errors(name),
        }

    if args.command == "set-limit":
        await services.limiter.set_limit(args.limit)
        return 0, {"limit": args.limit}

    if args.command == "purge":
        if not args.yes:
            return 1, {"error": "Refusing to purge without --yes"}
        return 0, {"removed_keys": await services.purge()}

    return 2, {"error": f"Unknown command {args.command!r}"}


async def _amain(args: argparse.Namespace) -> int:
    services = build_services(settings)
    try:
        code, payload = await run(args, services)
    finally:
        await services.aclose()
    print(json.dumps(payload, indent=2, default=str))
    return code


def main(argv: list[str] | None = None) -> int:
    """Entry point for the fetch CLI.

    Returns:
        0 on success, 1 when the command failed (e.g. a fetch with
        ``success=False``), 2 on invalid input or an in-process state backend.
    """
    args = parse_args(argv)
    if settings.state_backend.lower() != StateBackendKind.REDIS.value:
        # Each invocation is a new process; in-memory state would vanish on exit
        error = (
            f"State backend {settings.state_backend!r} does not persist "
            "between CLI runs. Set STATE_BACKEND=redis."
        )
        print(json.dumps({"error": error}), file=sys.stderr)
        return 2
    configure_logging(settings.debug)
    try:
        return asyncio.run(_amain(args))
    except ValueError as exc:
        print(json.dumps({"error": str(exc)}), file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
