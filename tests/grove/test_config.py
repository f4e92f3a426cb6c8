from __future__ import annotations

import json
from pathlib import Path

import pytest

import grove.config as config
from grove.errors import ConfigError
from grove.models import GroveConfig, TmuxSection


def _write_json(path: Path, payload: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadConfig:
    def test_defaults_without_files(self, tmp_path: Path) -> None:
        loaded = config.load_config(tmp_path, user_path=tmp_path / "none.json")

        assert loaded == GroveConfig()
        assert loaded.workspace.root == "../{repo}-worktrees"
        assert [window.name for window in loaded.tmux.windows] == ["shell"]
        assert loaded.editor.preference == ["cursor", "code", "zed"]

    def test_repo_layer_overrides_user_layer(self, tmp_path: Path) -> None:
        user = _write_json(
            tmp_path / "user" / "config.json",
            {"git": {"remote": "upstream"}, "tmux": {"session_prefix": "u"}},
        )
        _write_json(tmp_path / "repo" / ".grove.json", {"tmux": {"session_prefix": "r"}})

        loaded = config.load_config(tmp_path / "repo", user_path=user)

        assert loaded.git.remote == "upstream"
        assert loaded.tmux.session_prefix == "r"

    def test_unknown_key_is_config_error(self, tmp_path: Path) -> None:
        user = _write_json(tmp_path / "config.json", {"gti": {}})
        with pytest.raises(ConfigError) as excinfo:
            config.load_config(None, user_path=user)
        assert excinfo.value.code == "config_invalid"
        assert excinfo.value.recovery_hint

    def test_invalid_json_is_config_error(self, tmp_path: Path) -> None:
        user = tmp_path / "config.json"
        user.write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="failed to read"):
            config.load_config(None, user_path=user)

    def test_non_object_is_config_error(self, tmp_path: Path) -> None:
        user = _write_json(tmp_path / "config.json", ["a"])
        with pytest.raises(ConfigError, match="JSON object"):
            config.load_config(None, user_path=user)


class TestModels:
    def test_blank_paths_use_defaults(self) -> None:
        parsed = config.parse_config({"git": {"path": "  "}, "tmux": {"path": None}})
        assert parsed.git.path == "git"
        assert parsed.tmux.path == "tmux"

    def test_windows_must_not_be_empty(self) -> None:
        with pytest.raises(ConfigError):
            config.parse_config({"tmux": {"windows": []}})

    def test_window_commands_are_normalized(self) -> None:
        section = TmuxSection(windows=[{"name": "srv", "command": "  "}])
        assert section.windows[0].command is None

    def test_merge_is_recursive_and_non_destructive(self) -> None:
        base = {"workspace": {"install": True, "root": "a"}}
        merged = config.merge_payloads(base, {"workspace": {"install": False}})
        assert merged == {"workspace": {"install": False, "root": "a"}}
        assert base == {"workspace": {"install": True, "root": "a"}}
