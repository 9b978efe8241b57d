"""Command line interface for the fantasy cricket assistant."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from .analytics import suggested_questions
from .assistant import CricketAssistant
from .configuration import CricketConfig, load_cricket_config, validate_cricket_config
from .errors import ConfigurationError, UnknownEventError
from .logging import configure_logging
from .models import Snapshot

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True)
class CommandContext:
    """Runtime objects shared across command handlers."""

    config: CricketConfig
    assistant: CricketAssistant | None = None


CommandHandler = Callable[[CommandContext, argparse.Namespace], Awaitable[int]]

HandlerT = TypeVar("HandlerT", bound=CommandHandler)


@dataclasses.dataclass(slots=True)
class Subcommand:
    """Container describing a CLI sub-command."""

    name: str
    help: str
    configure: Callable[[argparse.ArgumentParser], None]
    handler: CommandHandler
    requires_assistant: bool

    def add_to_parser(self, subparsers, parent: argparse.ArgumentParser) -> argparse.ArgumentParser:
        parser = subparsers.add_parser(self.name, parents=[parent], help=self.help)
        self.configure(parser)
        parser.set_defaults(
            handler=self.handler,
            command=self.name,
            requires_assistant=self.requires_assistant,
        )
        return parser


class SubcommandApp:
    """Registry that wires handlers into an :class:`argparse` parser."""

    def __init__(self, description: str | None = None) -> None:
        self._commands: list[Subcommand] = []
        self._description = description

    def command(
        self,
        name: str,
        *,
        help: str,
        configure: Callable[[argparse.ArgumentParser], None] = lambda parser: None,
        requires_assistant: bool = True,
    ) -> Callable[[HandlerT], HandlerT]:
        def _decorator(handler: HandlerT) -> HandlerT:
            self._commands.append(
                Subcommand(
                    name=name,
                    help=help,
                    configure=configure,
                    handler=handler,
                    requires_assistant=requires_assistant,
                )
            )
            return handler

        return _decorator

    @property
    def commands(self) -> Sequence[Subcommand]:
        return tuple(self._commands)

    def build_parser(self) -> argparse.ArgumentParser:
        parent = argparse.ArgumentParser(add_help=False)
        parent.add_argument("--config", dest="config_file")
        parent.add_argument("--environment", dest="config_environment")
        parent.add_argument("--seed", type=int)
        parent.add_argument("--log-level", default="WARNING")
        parent.add_argument(
            "--offline",
            action="store_true",
            default=False,
            help="Skip name and weather lookups",
        )

        parser = argparse.ArgumentParser(description=self._description)
        subparsers = parser.add_subparsers(dest="command", required=True)
        for command in self._commands:
            command.add_to_parser(subparsers, parent)
        return parser


APP = SubcommandApp(description=__doc__)


def _event_rows(snapshot: Snapshot) -> list[dict[str, object]]:
    return [
        {
            "id": event.id,
            "name": event.name,
            "format": event.match_format.value,
            "league": event.league.label,
            "venue": event.venue,
            "series": event.series,
            "status": event.status,
            "timestamp": event.timestamp,
            "source": event.source_name,
        }
        for event in snapshot.events
    ]


def _configure_matches_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", default=False)


def _configure_ask_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("text")
    parser.add_argument("--event", dest="event_id")


@APP.command(
    "matches",
    help="Acquire fixtures and list them",
    configure=_configure_matches_parser,
)
async def _cmd_matches(context: CommandContext, args: argparse.Namespace) -> int:
    assert context.assistant is not None
    snapshot = await context.assistant.request_acquisition()
    rows = _event_rows(snapshot)
    if args.json:
        print(
            json.dumps(
                {
                    "status": snapshot.acquisition_status.value,
                    "source": snapshot.data_source,
                    "synthetic": snapshot.synthetic,
                    "events": rows,
                },
                indent=2,
            )
        )
        return 0
    print(context.assistant.ready_report())
    for row in rows:
        print(f"{row['id']:<40} {row['format']:<6} {row['league']:<20} {row['name']} [{row['status']}]")
    return 0 if rows else 1


@APP.command(
    "ask",
    help="Acquire fixtures and answer one question",
    configure=_configure_ask_parser,
)
async def _cmd_ask(context: CommandContext, args: argparse.Namespace) -> int:
    assistant = context.assistant
    assert assistant is not None
    await assistant.request_acquisition()
    if args.event_id:
        try:
            await assistant.select_event(args.event_id)
        except UnknownEventError as exc:
            print(str(exc))
            return 2
    print(await assistant.submit_query(args.text))
    return 0


@APP.command(
    "sources",
    help="Show the configured source registry",
    requires_assistant=False,
)
async def _cmd_sources(context: CommandContext, args: argparse.Namespace) -> int:
    config = context.config
    print(f"environment: {config.environment}")
    for index, definition in enumerate(config.definitions(), start=1):
        print(f"{index}. {definition.name} [{definition.kind}] {definition.endpoint}")
        for alternative in definition.alternatives:
            print(f"     -> {alternative}")
    print("Suggested questions:")
    for question in suggested_questions(Snapshot.empty()):
        print(f"  - {question}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    return APP.build_parser()


async def _dispatch(args: argparse.Namespace) -> int:
    try:
        config = load_cricket_config(
            base_path=args.config_file,
            environment=args.config_environment,
        )
        warnings = validate_cricket_config(config)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    for message in warnings:
        print(f"[config-warning] {message}")

    context = CommandContext(config=config)
    handler: CommandHandler = args.handler
    if not getattr(args, "requires_assistant", True):
        return await handler(context, args)

    context.assistant = CricketAssistant.from_config(
        config, offline=args.offline, seed=args.seed
    )
    try:
        return await handler(context, args)
    finally:
        await context.assistant.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(logging, str(args.log_level).upper(), logging.WARNING))
    return asyncio.run(_dispatch(args))


__all__ = ["APP", "main"]


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
