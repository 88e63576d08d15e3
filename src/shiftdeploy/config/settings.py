"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SHIFTDEPLOY_*`` prefix, ``__`` for nested sections
                    (e.g. ``SHIFTDEPLOY_BROKER__PASSWORD``)
  3. TOML file    — ``shiftdeploy.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Partial section overrides (``broker={"url": ...}``) are deep-merged with
the lower-priority sources, so a CLI ``--broker`` keeps the TOML username.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from shiftdeploy.config.discovery import find_config, resolve_path
from shiftdeploy.config.models import BrokerConfig, DeployConfig, PluginsConfig, SshConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered ``shiftdeploy.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path handed from from_cli() to settings_customise_sources().
_tls = threading.local()


class ShiftSettings(BaseSettings):
    """Unified, frozen settings for one shiftdeploy invocation.

    Attributes:
        project_root: Directory holding ``shiftdeploy.toml`` (or CWD when
            none was found). Relative paths in the config resolve here.
        config_path: The TOML file actually used, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SHIFTDEPLOY_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    broker: BrokerConfig = Field(default_factory=BrokerConfig)
    deploy: DeployConfig = Field(default_factory=DeployConfig)
    ssh: SshConfig = Field(default_factory=SshConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> ShiftSettings:
        """Construct settings from a CLI invocation.

        Discovers ``shiftdeploy.toml`` via walk-up (or explicit
        *config_path*) and merges *cli_flags* as highest-priority values.
        ``None`` flags are dropped so they never mask config values.
        """
        toml_path = _locate_toml(config_path, project_root)
        if project_root is None:
            project_root = toml_path.parent if toml_path is not None else Path.cwd()
        overrides = {key: value for key, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(project_root=project_root, config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

    @property
    def public_key_path(self) -> Path:
        """The configured public key file, anchored at the project root."""
        return resolve_path(self.ssh.public_key_path, self.project_root)

    @property
    def plugin_dir(self) -> Path:
        return resolve_path(self.plugins.local_dir, self.project_root)


def _locate_toml(config_path: str | None, start: Path | None) -> Path | None:
    """An explicit ``--config`` must exist; otherwise walk up from *start*."""
    if not config_path:
        return find_config(start)
    explicit = Path(config_path)
    if not explicit.is_file():
        raise click.ClickException(f"Config file not found: {explicit}")
    return explicit
