"""Heading filter over segmented blocks.

The pattern is compiled up front so a malformed expression fails before the
notes file is opened or any block is produced. Matching is a
case-insensitive ``search`` against the title, not a full match.
"""

from __future__ import annotations

import re
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from noteblocks.errors import ErrorCode, NoteBlocksError
from noteblocks.segmenter import BlockSegmenter

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from noteblocks.models.block import Block

log = structlog.get_logger()


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile *pattern* case-insensitively, raising INVALID_PATTERN on failure."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        position = f" at position {exc.pos}" if exc.pos is not None else ""
        raise NoteBlocksError(
            code=ErrorCode.INVALID_PATTERN,
            message=f"Invalid pattern {pattern!r}: {exc.msg}{position}",
            suggestion="Escape regex metacharacters with a backslash to match them literally.",
        ) from exc


class BlockSelector:
    """Keeps the blocks whose title contains a match for the pattern."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._regex = compile_pattern(pattern)

    def matches(self, block: Block) -> bool:
        return self._regex.search(block.title) is not None

    def select(self, blocks: Iterable[Block]) -> Iterator[Block]:
        """Yield matching blocks lazily, in the order they arrive."""
        for block in blocks:
            if self.matches(block):
                yield block


@contextmanager
def open_notes(path: Path | str) -> Iterator[BlockSegmenter]:
    """Open the notes document and yield a segmenter over its lines.

    The file handle is closed when the ``with`` block exits, whether the
    caller finished iterating, stopped early or hit an error.
    """
    notes_path = Path(path).expanduser()
    try:
        # Only "\n" ends a line; a stray "\r" stays inside its line
        handle = notes_path.open(encoding="utf-8", newline="\n")
    except FileNotFoundError as exc:
        raise NoteBlocksError(
            code=ErrorCode.NOTES_NOT_FOUND,
            message=f"Notes file not found: {notes_path}",
            suggestion="Create the file or pass --path to point at an existing notes document.",
        ) from exc
    except OSError as exc:
        raise NoteBlocksError(
            code=ErrorCode.NOTES_UNREADABLE,
            message=f"Cannot open notes file {notes_path}: {exc.strerror or exc}",
            suggestion="Check that the path is a regular file you have permission to read.",
        ) from exc

    log.debug("notes_opened", path=str(notes_path))
    with handle:
        yield BlockSegmenter(handle)


@contextmanager
def select_blocks(pattern: str, path: Path | str) -> Iterator[Iterator[Block]]:
    """Yield the blocks of *path* whose titles match *pattern*.

    Usage::

        with select_blocks("python", "~/notes.md") as blocks:
            for block in blocks:
                ...
    """
    selector = BlockSelector(pattern)
    with open_notes(path) as segmenter:
        yield selector.select(segmenter)
