"""Tests for config discovery and path anchoring."""

from __future__ import annotations

from pathlib import Path

import pytest

from shiftdeploy.config.discovery import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    find_config,
    resolve_path,
)


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[deploy]\ndomain = "myteam"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var_pins_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        pinned = tmp_path / "ci.toml"
        pinned.write_text("")
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(pinned))
        assert find_config(tmp_path) == pinned

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "gone.toml"))
        assert find_config(tmp_path) is None


class TestResolvePath:
    def test_relative_anchored_at_root(self, tmp_path: Path) -> None:
        assert resolve_path("keys/ci.pub", tmp_path) == tmp_path / "keys" / "ci.pub"

    def test_absolute_unchanged(self, tmp_path: Path) -> None:
        target = tmp_path / "abs.pub"
        assert resolve_path(str(target), Path("/elsewhere")) == target

    def test_home_expanded(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_path("~/.ssh/id_rsa.pub", Path("/x")) == tmp_path / ".ssh" / "id_rsa.pub"
