#!/usr/bin/env python
"""Command-line entry point: search channel archives from the terminal."""
from __future__ import annotations

import argparse
import asyncio
import json
import sqlite3
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from relaylogs.config import Config
from relaylogs.core.errors import PartitionDiscoveryError, QueryBuildError
from relaylogs.core.logging_config import setup_logging
from relaylogs.core.networks import Ambiguous, NotMatched, match_network
from relaylogs.models import FilterSpec

_TEXT_OPTIONS = ("message", "nick", "channel", "target", "host", "hostname", "ident", "type")


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("network", help="Network name (registered names may be abbreviated)")
    for name in _TEXT_OPTIONS:
        parser.add_argument(f"--{name}", default=None, help=f"Filter on {name} (LIKE unless --strict)")
    parser.add_argument("--from", dest="from_time", default=None, help="Lower time bound: timestamp, date phrase or duration")
    parser.add_argument("--to", dest="to_time", default=None, help="Upper time bound: timestamp, date phrase or duration")
    parser.add_argument("--or", dest="or_", action="store_true", help="Combine filters with OR instead of AND")
    parser.add_argument("--strict", dest="strict_strings", action="store_true", help="Exact string equality")
    parser.add_argument("--everything", action="store_true", help="Include non-public channels")
    parser.add_argument("--from-server", action="store_true", help="Only messages originating from the server")
    parser.add_argument("--filetype", default=None, help="Partition format (default: sqlite)")
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print JSON instead of tables")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relaylogs",
        description="Search per-channel chat archives.",
    )
    parser.add_argument("--config", default=None, help="Path to settings.toml")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Search all channels of a network")
    _add_filter_arguments(search)
    search.add_argument("--columns", default=None, help="Comma-separated columns to return")
    search.add_argument("--distinct", action="store_true", help="Return distinct rows only")
    search.add_argument("--max", default=None, help="Return MAX(column) per channel")
    search.add_argument("--min", default=None, help="Return MIN(column) per channel")

    for name, help_text in (("first-seen", "Earliest match per channel"), ("last-seen", "Latest match per channel")):
        seen = sub.add_parser(name, help=help_text)
        _add_filter_arguments(seen)

    logs = sub.add_parser("logs", help="Read one channel's logs")
    _add_filter_arguments(logs)
    logs.add_argument("channel_name", metavar="CHANNEL", help="Channel to read, e.g. '#python'")
    logs.add_argument("--format", dest="fmt", default="json", help="Output format: json or txt")
    logs.add_argument("--filter-by-nick", default=None, help="Comma-separated nick substrings or /regex/flags")

    networks = sub.add_parser("networks", help="List registered networks or resolve a name")
    networks.add_argument("name", nargs="?", default=None)

    parser.add_argument("--version", action="version", version=_version())
    return parser


def _version() -> str:
    from relaylogs import __version__

    return f"relaylogs {__version__}"


def _spec_from_args(args: argparse.Namespace) -> FilterSpec:
    values = {
        name: getattr(args, name)
        for name in (*_TEXT_OPTIONS, "from_time", "to_time", "or_", "strict_strings", "everything", "from_server", "filetype")
    }
    for name in ("columns", "distinct", "max", "min"):
        if hasattr(args, name):
            values[name] = getattr(args, name)
    return FilterSpec(**values)


def _resolve_network(console: Console, config: Config, name: str) -> str | None:
    registered = config.networks.registered
    if not registered:
        return name

    match = match_network(name, registered)
    if isinstance(match, Ambiguous):
        options = ", ".join(candidate for _, candidate in match.candidates)
        console.print(f"[red]Network '{name}' is ambiguous:[/red] {options}")
        return None
    if isinstance(match, NotMatched):
        console.print(f"[red]Unknown network '{name}'[/red]")
        return None
    return match.network


def _run_search(console: Console, engine, network: str, spec: FilterSpec, as_json: bool) -> int:
    outcome = asyncio.run(engine.search(network, spec))
    if outcome is None:
        console.print("[yellow]Channel archiving is disabled.[/yellow]")
        return 1

    if as_json:
        print(json.dumps(outcome.to_dict(), default=str, indent=2))
        return 1 if outcome.error else 0

    if outcome.error:
        console.print(f"[red]{outcome.error.message}[/red]")
        return 1

    for channel, rows in sorted(outcome.search_results.items()):
        table = Table(title=f"{channel} ({len(rows)})", show_lines=False)
        columns = list(rows[0].keys())
        for column in columns:
            table.add_column(column, overflow="fold")
        for row in rows:
            table.add_row(*(str(row.get(column, "")) for column in columns))
        console.print(table)

    console.print(
        f"[green]{outcome.total_lines} lines[/green] in {len(outcome.search_results)} channels "
        f"({outcome.query_time_human})"
    )
    return 0


def _run_seen(console: Console, engine, network: str, spec: FilterSpec, last: bool, as_json: bool) -> int:
    seen = engine.last_seen if last else engine.first_seen
    entries = asyncio.run(seen(network, spec))
    if entries is None:
        console.print("[yellow]Channel archiving is disabled.[/yellow]")
        return 1

    if as_json:
        print(json.dumps([[e.channel, e.timestamp_human] for e in entries], indent=2))
        return 0

    if not entries:
        console.print("[yellow]No matches.[/yellow]")
        return 0

    table = Table(title="Last seen" if last else "First seen")
    table.add_column("Channel", style="cyan")
    table.add_column("When", style="magenta")
    for entry in entries:
        table.add_row(entry.channel, entry.timestamp_human)
    console.print(table)
    return 0


def _run_logs(console: Console, config: Config, network: str, args: argparse.Namespace) -> int:
    from relaylogs.core.channel_logs import ChannelLogReader

    reader = ChannelLogReader(config)
    try:
        lines = reader.read(
            network,
            args.channel_name,
            _spec_from_args(args),
            fmt=args.fmt,
            filter_by_nick=args.filter_by_nick,
        )
    except (sqlite3.Error, PartitionDiscoveryError) as exc:
        console.print(f"[red]Cannot read {args.channel_name} on {network}: {exc}[/red]")
        return 1
    except ValueError as exc:
        # Unknown --format or malformed --filter-by-nick pattern
        console.print(f"[red]{exc}[/red]")
        return 2
    if lines is None:
        console.print("[yellow]Channel archiving is disabled.[/yellow]")
        return 1

    for line in lines:
        print(json.dumps(line, default=str) if isinstance(line, dict) else line)
    return 0


def _run_networks(console: Console, config: Config, name: str | None) -> int:
    if name is None:
        for network in config.networks.registered:
            console.print(network)
        return 0

    resolved = _resolve_network(console, config, name)
    if resolved is None:
        return 2
    console.print(resolved)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for `relaylogs`."""
    args = build_parser().parse_args(argv)
    console = Console()

    config = Config.load(Path(args.config) if args.config else None)
    setup_logging(config.logging)

    if args.command == "networks":
        return _run_networks(console, config, args.name)

    network = _resolve_network(console, config, args.network)
    if network is None:
        return 2

    try:
        if args.command == "logs":
            return _run_logs(console, config, network, args)

        from relaylogs.core.search_engine import LogSearchEngine

        engine = LogSearchEngine(config)
        spec = _spec_from_args(args)
        if args.command == "search":
            return _run_search(console, engine, network, spec, args.as_json)
        return _run_seen(console, engine, network, spec, args.command == "last-seen", args.as_json)
    except QueryBuildError as exc:
        console.print(f"[red]{exc}[/red]")
        return 2


if __name__ == "__main__":
    sys.exit(main())
