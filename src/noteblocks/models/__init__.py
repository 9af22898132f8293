from __future__ import annotations

from noteblocks.models.block import HEADING_MARKER, Block

__all__ = [
    "HEADING_MARKER",
    "Block",
]
