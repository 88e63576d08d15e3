"""Tests for ShiftSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from shiftdeploy.config.settings import ShiftSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("SHIFTDEPLOY_CONFIG", "SHIFTDEPLOY_BROKER__PASSWORD", "SHIFTDEPLOY_DEPLOY__DOMAIN"):
        monkeypatch.delenv(var, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = ShiftSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.broker.url == "https://openshift.redhat.com"
        assert settings.broker.verify_ssl is True
        assert settings.deploy.wait_timeout_seconds == 300.0
        assert settings.deploy.auto_scale is False
        assert settings.plugins.enabled is True

    def test_frozen(self, tmp_path: Path) -> None:
        settings = ShiftSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_public_key_path_anchored(self, tmp_path: Path) -> None:
        (tmp_path / "shiftdeploy.toml").write_text('[ssh]\npublic_key_path = "keys/ci.pub"\n')
        settings = ShiftSettings.from_cli(project_root=tmp_path)
        assert settings.public_key_path == tmp_path / "keys" / "ci.pub"
        assert settings.plugin_dir == tmp_path / ".shiftdeploy" / "plugins"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "shiftdeploy.toml").write_text(
            '[broker]\nusername = "ci-bot"\n[deploy]\ndomain = "myteam"\n'
        )
        settings = ShiftSettings.from_cli(project_root=tmp_path)
        assert settings.broker.username == "ci-bot"
        assert settings.deploy.domain == "myteam"
        assert settings.config_path == tmp_path / "shiftdeploy.toml"

    def test_root_from_discovered_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "shiftdeploy.toml").write_text("")
        child = tmp_path / "sub"
        child.mkdir()
        monkeypatch.chdir(child)
        settings = ShiftSettings.from_cli()
        assert settings.project_root == tmp_path

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "ci" / "deploy.toml"
        custom.parent.mkdir()
        custom.write_text('[deploy]\ndomain = "custom"\n')
        settings = ShiftSettings.from_cli(config_path=str(custom), project_root=tmp_path)
        assert settings.deploy.domain == "custom"
        assert settings.config_path == custom

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            ShiftSettings.from_cli(config_path=str(tmp_path / "absent.toml"), project_root=tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "shiftdeploy.toml").write_text("[broker\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            ShiftSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "shiftdeploy.toml").write_text('[deploy]\ndomain = "from-toml"\n')
        monkeypatch.setenv("SHIFTDEPLOY_DEPLOY__DOMAIN", "from-env")
        settings = ShiftSettings.from_cli(project_root=tmp_path)
        assert settings.deploy.domain == "from-env"

    def test_password_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SHIFTDEPLOY_BROKER__PASSWORD", "s3cret")
        settings = ShiftSettings.from_cli(project_root=tmp_path)
        assert settings.broker.password == "s3cret"

    def test_partial_cli_section_keeps_toml_values(self, tmp_path: Path) -> None:
        (tmp_path / "shiftdeploy.toml").write_text(
            '[broker]\nurl = "https://toml.example.com"\nusername = "ci-bot"\n'
        )
        settings = ShiftSettings.from_cli(
            project_root=tmp_path, broker={"url": "https://cli.example.com"}
        )
        assert settings.broker.url == "https://cli.example.com"
        assert settings.broker.username == "ci-bot"

    def test_none_flags_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "shiftdeploy.toml").write_text('[broker]\nusername = "ci-bot"\n')
        settings = ShiftSettings.from_cli(project_root=tmp_path, broker=None, quiet=True)
        assert settings.broker.username == "ci-bot"
        assert settings.quiet is True
