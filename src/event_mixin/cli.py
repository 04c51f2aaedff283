"""Command line interface for replaying emitter scenarios."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .exceptions import EmitterError
from .scenario import ReplayResult, load_scenario, replay


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Explore event-mixin subscription behaviour")
    subparsers = parser.add_subparsers(dest="command")

    replay_parser = subparsers.add_parser(
        "replay", help="Replay a JSON scenario and show the listener invocations"
    )
    replay_parser.add_argument("path", type=Path, help="Path to a scenario JSON file")
    replay_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the replay result as JSON instead of a table",
    )
    replay_parser.set_defaults(handler=_replay_command)

    check_parser = subparsers.add_parser("check", help="Validate a scenario without running it")
    check_parser.add_argument("path", type=Path, help="Path to a scenario JSON file")
    check_parser.set_defaults(handler=_check_command)

    return parser


def _render(result: ReplayResult, console: Console) -> None:
    table = Table(title=f"Replay: {result.name}")
    table.add_column("#", justify="right")
    table.add_column("listener", style="cyan")
    table.add_column("context", style="magenta")
    table.add_column("args")
    for index, item in enumerate(result.invocations, start=1):
        table.add_row(str(index), item.listener, item.context or "-", json.dumps(item.args))
    console.print(table)
    remaining = ", ".join(
        f"{name}={len(result.emitter.listeners(name))}" for name in result.emitter.event_names()
    )
    console.print(f"[green]Registered after replay:[/] {remaining or 'none'}")


def _replay_command(arguments: argparse.Namespace, console: Console) -> int:
    document = load_scenario(arguments.path)
    result = replay(document)
    if arguments.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _render(result, console)
    return 0


def _check_command(arguments: argparse.Namespace, console: Console) -> int:
    load_scenario(arguments.path)
    console.print(f"[green]{arguments.path} is a valid scenario")
    return 0


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """CLI entry point used by ``event-mixin`` and ``python -m event_mixin.cli``."""

    parser = _build_parser()
    arguments = parser.parse_args(argv)
    handler = getattr(arguments, "handler", None)
    if handler is None:
        parser.error("No command given")
    if console is None:
        console = Console()

    if not arguments.path.exists():
        print(f"Scenario file not found: {arguments.path}", file=sys.stderr)
        return 2
    try:
        return handler(arguments, console)
    except EmitterError as exc:
        print(f"Invalid scenario: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    raise SystemExit(main())
