from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NOTES_NOT_FOUND = "NOTES_NOT_FOUND"
    NOTES_UNREADABLE = "NOTES_UNREADABLE"
    DOCUMENT_READ_FAILED = "DOCUMENT_READ_FAILED"
    INVALID_PATTERN = "INVALID_PATTERN"
    STYLE_NOT_FOUND = "STYLE_NOT_FOUND"


class NoteBlocksError(Exception):
    """Raised for every expected failure while selecting blocks.

    Caught by cli.py and reported on stderr with a non-zero exit status.
    Never catch this inside business logic. Let it propagate to the
    entry point so the user sees what failed and what to try next.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
            }
        }
