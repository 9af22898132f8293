"""Output rendering for selected blocks.

Plain mode writes ``Block.text()`` unchanged. Highlight mode runs each block
through the Pygments Markdown lexer and a 24-bit terminal formatter, so the
same text comes out wrapped in ANSI colour escapes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pygments import highlight
from pygments.formatters import TerminalTrueColorFormatter
from pygments.lexers import MarkdownLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from noteblocks.errors import ErrorCode, NoteBlocksError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import TextIO

    from noteblocks.models.block import Block

log = structlog.get_logger()


def render_plain(block: Block) -> str:
    return block.text()


class BlockHighlighter:
    """Markdown-aware ANSI renderer bound to one Pygments style."""

    def __init__(self, style: str) -> None:
        try:
            style_cls = get_style_by_name(style)
        except ClassNotFound as exc:
            raise NoteBlocksError(
                code=ErrorCode.STYLE_NOT_FOUND,
                message=f"Unknown highlight style {style!r}",
                suggestion="Run 'pygmentize -L styles' to list available styles, or pass --no-color.",
            ) from exc
        self.style = style
        self._lexer = MarkdownLexer()
        self._formatter = TerminalTrueColorFormatter(style=style_cls)

    def render(self, block: Block) -> str:
        return highlight(block.text(), self._lexer, self._formatter)


def write_blocks(
    blocks: Iterable[Block],
    stream: TextIO,
    highlighter: BlockHighlighter | None = None,
) -> int:
    """Write each block to *stream* as a whole and return how many were written.

    The stream is flushed after every block so output already produced
    survives a later read fault.
    """
    written = 0
    for block in blocks:
        text = highlighter.render(block) if highlighter is not None else render_plain(block)
        stream.write(text)
        stream.flush()
        written += 1
    log.debug("blocks_written", count=written, highlighted=highlighter is not None)
    return written
