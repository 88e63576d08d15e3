"""Tests for the validate command and connection failures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from shiftdeploy.cli import cli
from shiftdeploy.domain.errors import BrokerConnectionError
from shiftdeploy.infrastructure.manager import ApplicationManager
from tests.conftest import FakeBroker


def test_valid_account(cli_runner: CliRunner, project: Path, cli_broker: FakeBroker) -> None:
    result = cli_runner.invoke(cli, ["--json", "validate"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["data"] == {"valid": True, "message": "ok"}


def test_no_domains(cli_runner: CliRunner, project: Path, cli_broker: FakeBroker) -> None:
    cli_broker.domains.clear()
    result = cli_runner.invoke(cli, ["validate"])
    assert result.exit_code == 1
    assert "doesn't have any domains" in result.stderr


def test_connection_failure(
    cli_runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _refuse(cls: type[ApplicationManager], settings: Any) -> ApplicationManager:
        raise BrokerConnectionError("Authentication against https://broker.example.com failed")

    monkeypatch.setattr(ApplicationManager, "from_settings", classmethod(_refuse))
    result = cli_runner.invoke(cli, ["--json", "validate"])
    assert result.exit_code == 1
    payload = json.loads(result.stderr)
    assert payload["op"] == "connect"
    assert payload["error"]["code"] == "CONNECTION_FAILED"


def test_broker_flags_reach_settings(
    cli_runner: CliRunner, project: Path, monkeypatch: pytest.MonkeyPatch, broker: FakeBroker
) -> None:
    seen: dict[str, Any] = {}

    def _capture(cls: type[ApplicationManager], settings: Any) -> ApplicationManager:
        seen["broker"] = settings.broker
        return cls(broker)

    monkeypatch.setattr(ApplicationManager, "from_settings", classmethod(_capture))
    monkeypatch.setenv("SHIFTDEPLOY_PASSWORD", "from-env")
    result = cli_runner.invoke(cli, ["--broker", "https://other.example.com", "validate"])
    assert result.exit_code == 0
    assert seen["broker"].url == "https://other.example.com"
    assert seen["broker"].username == "ci-bot"
    assert seen["broker"].password == "from-env"
