"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments  (CLI flags are passed through here)
  2. Environment variables  (NOTEBLOCKS__NOTES__PATH=~/work/notes.md)
  3. noteblocks.yaml        (searched in cwd, then platform config dir)
  4. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from noteblocks.errors import ErrorCode, NoteBlocksError

_DEFAULT_NOTES_PATH = "~/notes.md"  # Expanded on use, not at import
_CONFIG_FILE_NAME = "noteblocks.yaml"


def _find_config_file() -> str | None:
    """Return the path of the first noteblocks.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILE_NAME),
        Path(platformdirs.user_config_dir("noteblocks")) / _CONFIG_FILE_NAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class NotesSettings(BaseModel):
    path: str = _DEFAULT_NOTES_PATH

    def resolved_path(self) -> Path:
        try:
            return Path(self.path).expanduser()
        except RuntimeError as exc:
            raise NoteBlocksError(
                code=ErrorCode.NOTES_NOT_FOUND,
                message=f"Cannot resolve the home directory in notes path {self.path!r}",
                suggestion="Set HOME or pass --path with an absolute path.",
            ) from exc


class RenderSettings(BaseModel):
    highlight: bool = False
    style: str = "monokai"  # Any Pygments style name


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: NOTEBLOCKS__RENDER__STYLE=nord
        env_prefix="NOTEBLOCKS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    notes: NotesSettings = NotesSettings()
    render: RenderSettings = RenderSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
