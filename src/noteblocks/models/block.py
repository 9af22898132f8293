from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

HEADING_MARKER = "#"


class Block(BaseModel):
    """A heading line and the non-blank body lines that follow it."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)  # Heading line exactly as read, marker included
    content: tuple[str, ...] = ()  # Trimmed, never blank

    def text(self) -> str:
        """Title followed by each content line, every line newline-terminated."""
        return "".join(f"{line}\n" for line in (self.title, *self.content))
