"""Command-line entrypoint.

Responsibilities (and nothing more):
- Parse arguments and fold them into Settings
- Configure structlog
- Run the requested subcommand and map NoteBlocksError to exit status 1
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import TYPE_CHECKING, Any

import structlog
import yaml
from pydantic import ValidationError

from noteblocks import __version__
from noteblocks.config import Settings
from noteblocks.errors import NoteBlocksError
from noteblocks.render import BlockHighlighter, write_blocks
from noteblocks.selector import select_blocks

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()

EXIT_OK = 0
EXIT_FAILURE = 1


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for block output
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # main() can run several times in one process; loggers must see the new stream
        cache_logger_on_first_use=False,
    )


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="noteblocks",
        description="Print the blocks of a Markdown notes file whose heading matches a pattern.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-p",
        "--path",
        help="notes document to read (default: ~/notes.md, or notes.path from config)",
    )
    parser.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="syntax-highlight blocks with ANSI colours",
    )
    parser.add_argument("--style", help="Pygments style used with --color")

    subparsers = parser.add_subparsers(dest="command", required=True)
    select = subparsers.add_parser("select", help="print blocks whose heading matches PATTERN")
    select.add_argument("pattern", help="case-insensitive regular expression searched in headings")
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    """Fold CLI flags over env/YAML/defaults. Only flags actually given are passed."""
    overrides: dict[str, dict[str, Any]] = {}
    if args.path is not None:
        overrides.setdefault("notes", {})["path"] = args.path
    if args.color is not None:
        overrides.setdefault("render", {})["highlight"] = args.color
    if args.style is not None:
        overrides.setdefault("render", {})["style"] = args.style
    return Settings(**overrides)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def run_select(pattern: str, settings: Settings) -> int:
    """Print every block whose title matches *pattern*; return the match count."""
    notes_path = settings.notes.resolved_path()
    highlighter = BlockHighlighter(settings.render.style) if settings.render.highlight else None

    log.debug("select_started", pattern=pattern, path=str(notes_path))
    with select_blocks(pattern, notes_path) as blocks:
        count = write_blocks(blocks, sys.stdout, highlighter)
    log.info("select_finished", pattern=pattern, matches=count)
    return count


def _report_error(error: NoteBlocksError, settings: Settings) -> None:
    if settings.logging.format == "json":
        print(json.dumps(error.to_dict()), file=sys.stderr)
        return
    print(f"error: {error.message}", file=sys.stderr)
    print(f"hint: {error.suggestion}", file=sys.stderr)


def _discard_stdout() -> None:
    """Point stdout at devnull so the interpreter's exit flush cannot fail again."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())
    os.close(devnull)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = _settings_from_args(args)
    except (ValidationError, yaml.YAMLError, OSError) as exc:
        print(f"error: invalid configuration\n{exc}", file=sys.stderr)
        return EXIT_FAILURE
    _setup_logging(settings)

    try:
        if args.command == "select":
            run_select(args.pattern, settings)
    except NoteBlocksError as exc:
        log.debug("command_failed", command=args.command, code=exc.code)
        _report_error(exc, settings)
        return EXIT_FAILURE
    except BrokenPipeError:
        # Reader went away (e.g. `| head`); nothing more can be written
        _discard_stdout()
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
