"""Run statements against a configured profile: ``python -m shelldb``."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import math
import sys
from typing import Any

from shelldb.client import ShellClient
from shelldb.constants import LOG_LEVEL_ENV_VAR
from shelldb.errors import ProfileLoadError, ShellDBError
from shelldb.registry import ProfileRegistry, get_registry
from utils.env import get_env

logger = logging.getLogger("shelldb")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="shelldb", description="Query a database through its own shell client.")
    parser.add_argument("--profile", help="Connection profile name")
    parser.add_argument("--timeout", type=float, default=None, help="Per-statement timeout in seconds")
    parser.add_argument("--list", action="store_true", help="List configured profiles and exit")
    parser.add_argument("queries", nargs="*", help="Statements to run, in order")
    return parser.parse_args(argv)


def _json_value(value: Any) -> Any:
    """Spell non-finite floats as strings so every output line is strict JSON."""

    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    return value


async def _run(registry: ProfileRegistry, profile_name: str, queries: list[str], timeout: float | None) -> int:
    profile = registry.get_profile(profile_name)
    status = 0
    async with ShellClient(profile) as client:
        for query in queries:
            output = await client.execute(query, timeout=timeout)
            payload = output.outcome.to_dict()
            if "rows" in payload:
                payload["rows"] = [[_json_value(value) for value in row] for row in payload["rows"]]
            payload["query"] = query
            payload["duration_seconds"] = round(output.duration_seconds, 6)
            print(json.dumps(payload, allow_nan=False))
            if not output.outcome.ok:
                status = 1
    return status


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    level = (get_env(LOG_LEVEL_ENV_VAR, "WARNING") or "WARNING").upper()
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        registry = get_registry()
    except ProfileLoadError as exc:
        print(f"Could not load connection profiles: {exc}", file=sys.stderr)
        return 2

    if args.list:
        for name in registry.list_profiles():
            print(name)
        return 0

    if not args.profile:
        print("--profile is required", file=sys.stderr)
        return 2

    try:
        return asyncio.run(_run(registry, args.profile, args.queries, args.timeout))
    except KeyError as exc:
        print(exc.args[0], file=sys.stderr)
        return 2
    except ShellDBError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
