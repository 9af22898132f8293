"""Shared test fixtures for the noteblocks test suite."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
import structlog

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

SCENARIO_TWO = (
    "# heading\n"
    "content\n"
    "\n"
    "## second heading\n"
    "more content\n"
    "### Something else\n"
)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog.configure() a test (or main()) performed."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's NOTEBLOCKS__* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("NOTEBLOCKS__"):
            monkeypatch.delenv(key)


@pytest.fixture()
def scenario_two() -> str:
    """Three blocks across three heading levels, one blank separator line."""
    return SCENARIO_TWO


@pytest.fixture()
def notes_file(tmp_path: Path, scenario_two: str) -> Path:
    """scenario_two written to a UTF-8 file on disk."""
    path = tmp_path / "notes.md"
    path.write_text(scenario_two, encoding="utf-8")
    return path
