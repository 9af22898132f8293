"""Unit tests for configuration defaults and source priority."""

from __future__ import annotations

from pathlib import Path

import platformdirs
import pytest

from noteblocks import config
from noteblocks.config import NotesSettings, Settings
from noteblocks.errors import ErrorCode, NoteBlocksError


class TestDefaults:
    """Defaults apply when no env vars or flags are given."""

    def test_default_notes_path_is_home_notes_md(self) -> None:
        assert NotesSettings().path == "~/notes.md"
        assert NotesSettings().resolved_path() == Path.home() / "notes.md"

    def test_home_looked_up_when_resolved(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        settings = NotesSettings()
        monkeypatch.setenv("HOME", str(tmp_path))
        assert settings.resolved_path() == tmp_path / "notes.md"

    def test_unresolvable_home_is_notes_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _no_home(_self: Path) -> Path:
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "expanduser", _no_home)
        with pytest.raises(NoteBlocksError) as exc_info:
            NotesSettings().resolved_path()
        assert exc_info.value.code == ErrorCode.NOTES_NOT_FOUND

    def test_resolved_path_expands_user(self) -> None:
        assert NotesSettings(path="~/x.md").resolved_path() == Path.home() / "x.md"

    def test_render_and_logging_defaults(self) -> None:
        settings = Settings()
        assert settings.render.highlight is False
        assert settings.render.style == "monokai"
        assert settings.logging.level == "WARNING"
        assert settings.logging.format == "text"


class TestSourcePriority:
    """Constructor args beat env vars, which beat defaults."""

    def test_env_var_overrides_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTEBLOCKS__NOTES__PATH", "/srv/notes.md")
        assert Settings().notes.path == "/srv/notes.md"

    def test_env_var_bool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTEBLOCKS__RENDER__HIGHLIGHT", "true")
        assert Settings().render.highlight is True

    def test_init_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NOTEBLOCKS__NOTES__PATH", "/from/env.md")
        assert Settings(notes={"path": "/from/flag.md"}).notes.path == "/from/flag.md"

    def test_partial_override_keeps_sibling_env_value(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NOTEBLOCKS__RENDER__STYLE", "nord")
        settings = Settings(render={"highlight": True})
        assert settings.render.highlight is True
        assert settings.render.style == "nord"


class TestConfigFileDiscovery:
    """noteblocks.yaml lookup order."""

    def test_cwd_file_found_first(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "noteblocks.yaml").write_text("render:\n  style: nord\n", encoding="utf-8")
        assert config._find_config_file() == "noteblocks.yaml"

    def test_falls_back_to_platform_config_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "noteblocks.yaml").write_text("", encoding="utf-8")
        monkeypatch.setattr(platformdirs, "user_config_dir", lambda _name: str(config_dir))
        assert config._find_config_file() == str(config_dir / "noteblocks.yaml")

    def test_none_when_absent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(platformdirs, "user_config_dir", lambda _name: str(tmp_path / "nope"))
        assert config._find_config_file() is None
