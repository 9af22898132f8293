"""Block segmenter for notes documents.

Single forward pass over a line source that groups each heading line with the
body lines following it. Exactly one line of lookahead is held between calls:
the heading that closed the previous block, kept in ``_pending`` until the
next call picks it up as its title.

Any line whose first character is ``#`` is a heading, whatever its level.
There is no nesting: a ``###`` line ends a ``#`` block the same way another
``#`` line would.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from noteblocks.errors import ErrorCode, NoteBlocksError
from noteblocks.models.block import HEADING_MARKER, Block

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

log = structlog.get_logger()


def _strip_terminator(line: str) -> str:
    """Drop a trailing ``\\n`` and then a trailing ``\\r``, nothing else."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def is_heading(line: str) -> bool:
    return line.startswith(HEADING_MARKER)


class BlockSegmenter:
    """Lazy, single-consumption sequence of :class:`Block` values.

    ``next_block()`` is the cursor operation; iteration is layered on top of
    it. Consuming the segmenter consumes the underlying source, so a second
    pass needs a fresh source.
    """

    def __init__(self, source: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(source)
        self._pending: str | None = None
        self._exhausted = False

    def next_block(self) -> Block | None:
        """Return the next block, or ``None`` once the source is used up."""
        if self._exhausted:
            return None

        title: str | None = None
        content: list[str] = []

        # Rule 1: the heading that ended the previous block opens this one
        if self._pending is not None:
            title, self._pending = self._pending, None

        # Rule 2: scan until the next heading or end of source
        while (line := self._read_line()) is not None:
            if is_heading(line):
                if title is None:
                    title = line
                    continue
                self._pending = line
                break

            if title is None:
                continue  # text before the first heading is dropped

            trimmed = line.strip()
            if trimmed:
                content.append(trimmed)

        # Rule 3: nothing accumulated means the sequence is over
        if title is None:
            self._exhausted = True
            return None

        log.debug("block_segmented", title=title, content_lines=len(content))
        return Block(title=title, content=tuple(content))

    def _read_line(self) -> str | None:
        try:
            raw = next(self._lines)
        except StopIteration:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            # Stop production entirely; blocks already handed out stay valid.
            self._exhausted = True
            self._pending = None
            log.warning("document_read_failed", error=str(exc))
            raise NoteBlocksError(
                code=ErrorCode.DOCUMENT_READ_FAILED,
                message=f"Failed to read the notes document: {exc}",
                suggestion="Check that the file is readable UTF-8 text.",
            ) from exc
        return _strip_terminator(raw)

    def __iter__(self) -> BlockSegmenter:
        return self

    def __next__(self) -> Block:
        block = self.next_block()
        if block is None:
            raise StopIteration
        return block
