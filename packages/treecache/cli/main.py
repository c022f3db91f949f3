"""Command-line interface for treecache.

Operates on a cache directory: read, write and delete entries, list the
whole tree, and sweep out expired or corrupt files.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from treecache.core.caching import CacheError, FSCache
from treecache.core.config import CacheConfig, load_cache_config
from treecache.core.utils.logging import configure_logging

console = Console()
logger = logging.getLogger(__name__)


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True)


async def _cmd_get(cache: FSCache, args: argparse.Namespace) -> int:
    entry = await cache.lookup(args.key)
    if entry is None:
        console.print(f"[yellow]MISS[/yellow] {escape(args.key)}")
        return 1
    console.print_json(data=entry.value)
    return 0


async def _cmd_set(cache: FSCache, args: argparse.Namespace) -> int:
    if args.string:
        value: Any = args.value
    else:
        try:
            value = json.loads(args.value)
        except json.JSONDecodeError as e:
            console.print(f"[red]ERROR: value is not valid JSON ({e}); use --string[/red]")
            return 2
    entry = await cache.set(args.key, value, ttl_seconds=args.ttl)
    expiry = "never" if entry.expires_at == 0 else f"at {entry.expires_at} ms"
    console.print(f"[green]STORED[/green] {escape(args.key)} (expires {expiry})")
    return 0


async def _cmd_del(cache: FSCache, args: argparse.Namespace) -> int:
    result = await cache.delete(args.keys)
    console.print(f"Deleted {result.count} of {len(args.keys)} key(s)")
    for key in result.absent:
        console.print(f"  [dim]absent[/dim] {escape(key)}")
    for key, error in result.errors.items():
        console.print(f"  [red]failed[/red] {escape(key)}: {escape(str(error))}")
    return 0 if result.ok else 1


async def _cmd_ls(cache: FSCache, args: argparse.Namespace) -> int:
    entries = await cache.get_all()
    if args.json:
        console.print_json(data=entries)
        return 0

    table = Table(title=f"{cache.root} ({len(entries)} entries)")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key in sorted(entries):
        table.add_row(key, _dump(entries[key]))
    console.print(table)
    return 0


async def _cmd_sweep(cache: FSCache, args: argparse.Namespace) -> int:
    report = await cache.sweep()
    console.print(
        f"Removed {len(report.removed_expired)} expired and "
        f"{len(report.removed_corrupt)} corrupt entries"
    )
    for path, error in report.errors.items():
        console.print(f"  [red]failed[/red] {escape(path)}: {escape(str(error))}")
    return 0 if report.ok else 1


async def _cmd_flush(cache: FSCache, args: argparse.Namespace) -> int:
    await cache.flush()
    return 0


_COMMANDS = {
    "get": _cmd_get,
    "set": _cmd_set,
    "del": _cmd_del,
    "ls": _cmd_ls,
    "sweep": _cmd_sweep,
    "flush": _cmd_flush,
}


async def run_command_async(cache: FSCache, args: argparse.Namespace) -> int:
    """Run one sub-command against the cache.

    Returns:
        Exit code (0 for success, 1 for miss/failure, 2 for bad input)
    """
    try:
        return await _COMMANDS[args.cmd](cache, args)
    except NotImplementedError as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1
    except (CacheError, OSError, ValueError) as e:
        logger.debug("Command %s failed", args.cmd, exc_info=True)
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        return 1


def resolve_config(args: argparse.Namespace) -> CacheConfig:
    """Merge config file (if any) with command-line overrides."""
    config = load_cache_config(args.config)
    overrides: dict[str, Any] = {}
    if args.root is not None:
        overrides["root"] = args.root
    if args.read_only:
        overrides["read_only"] = True
    if args.verbose:
        overrides["verbose"] = True
    if overrides:
        config = CacheConfig.model_validate({**config.model_dump(), **overrides})
    return config


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="treecache",
        description="treecache - filesystem key-value cache",
    )
    p.add_argument("--root", default=None, help="Cache root directory (default: ./cache)")
    p.add_argument("--config", default=None, help="Path to cache config (.json/.yaml)")
    p.add_argument("--read-only", action="store_true", help="Reject mutating commands")
    p.add_argument("--verbose", "-v", action="store_true", help="Trace cache operations")
    p.add_argument(
        "--structured-logs", action="store_true", help="Emit JSON log records on stderr"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    get = sub.add_parser("get", help="Print the value stored under KEY")
    get.add_argument("key")

    set_ = sub.add_parser("set", help="Store VALUE (JSON) under KEY")
    set_.add_argument("key")
    set_.add_argument("value")
    set_.add_argument(
        "--ttl", type=float, default=None, help="Seconds until expiry (0 = never)"
    )
    set_.add_argument("--string", action="store_true", help="Store VALUE as a plain string")

    delete = sub.add_parser("del", help="Delete one or more keys")
    delete.add_argument("keys", nargs="+")

    ls = sub.add_parser("ls", help="List every live entry")
    ls.add_argument("--json", action="store_true", help="Print a JSON object")

    sub.add_parser("sweep", help="Remove expired and corrupt entry files")
    sub.add_parser("flush", help="Remove every entry (not implemented)")

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    args = build_arg_parser().parse_args(argv)
    config = resolve_config(args)

    level = "INFO" if config.verbose else config.logging.level
    configure_logging(
        level=level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=args.structured_logs or config.logging.structured,
    )

    cache = FSCache.from_config(config)
    sys.exit(asyncio.run(run_command_async(cache, args)))


if __name__ == "__main__":
    main()
