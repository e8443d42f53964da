from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Any

import structlog

from vidfast.application.provider import VidFastProvider
from vidfast.domain.exceptions import ConfigError
from vidfast.infrastructure.config import load_config
from vidfast.infrastructure.logging.setup import configure_logging
from vidfast.interfaces.composition import build_provider

log = structlog.get_logger(__name__)


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="vidfast")

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )
    parser.add_argument(
        "--strategy",
        default=None,
        choices=["scrape", "extractor"],
        help="Override the link resolution strategy.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("sections", help="List main-page sections.")

    main_page = commands.add_parser("main-page", help="Fetch one main-page row.")
    main_page.add_argument("section", help="Section name, e.g. 'Popular Movies'.")
    main_page.add_argument("--page", type=int, default=1)

    search = commands.add_parser("search", help="Search movies and TV shows.")
    search.add_argument("query")

    load = commands.add_parser("load", help="Load full metadata for a title URL.")
    load.add_argument("url", help="e.g. https://vidfast.pro/movie/550")

    links = commands.add_parser("links", help="Resolve streams for link data.")
    links.add_argument("data", help='e.g. \'{"tmdbId":"550","imdbId":null}\'')

    return parser.parse_args(argv)


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.name if isinstance(value.value, int) else value.value
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    return value


async def _run(provider: VidFastProvider, args: argparse.Namespace) -> int:
    try:
        if args.command == "sections":
            result: Any = provider.main_page_sections
        elif args.command == "main-page":
            section = provider.section(args.section)
            if section is None:
                log.error("unknown_section", section=args.section)
                return 2
            result = await provider.get_main_page(section, page=args.page)
        elif args.command == "search":
            result = await provider.search(args.query)
        elif args.command == "load":
            result = await provider.load(args.url)
            if result is None:
                log.error("load_failed", url=args.url)
                return 1
        else:
            result = await provider.resolve_links(args.data)
            if result is None:
                return 2
    finally:
        await provider.cleanup()

    sys.stdout.write(json.dumps(_to_jsonable(result), indent=2, ensure_ascii=False))
    sys.stdout.write("\n")
    return 0


def start(argv: Iterable[str] | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, configures logging, then runs one command.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format
    if args.strategy:
        cli_overrides["strategy"] = args.strategy

    try:
        config = load_config(
            config_path=Path(args.config) if args.config else None,
            dotenv_path=Path(args.dotenv) if args.dotenv else None,
            cli_overrides=cli_overrides,
        )
    except (ConfigError, FileNotFoundError) as e:
        sys.stderr.write(f"vidfast: invalid configuration: {e}\n")
        return 2

    configure_logging(config)
    return asyncio.run(_run(build_provider(config), args))


if __name__ == "__main__":
    raise SystemExit(start())
