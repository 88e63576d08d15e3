"""Tests for the list command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from shiftdeploy.cli import cli
from shiftdeploy.domain.models import Domain
from tests.conftest import FakeBroker


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        (["list", "cartridges"], ["php-5.3", "jbossas-7", "mysql-5.1", "cron-1.4"]),
        (["list", "gear-profiles"], ["small", "medium"]),
        (["list", "domains"], ["myteam"]),
    ],
)
def test_quiet_listing(
    cli_runner: CliRunner, project: Path, cli_broker: FakeBroker, args: list[str], expected: list[str]
) -> None:
    result = cli_runner.invoke(cli, ["-q", *args])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == expected


def test_json_listing(cli_runner: CliRunner, project: Path, cli_broker: FakeBroker) -> None:
    cli_broker.domains.append(Domain(name="qa"))
    result = cli_runner.invoke(cli, ["--json", "list", "domains"])
    payload = json.loads(result.stdout)
    assert payload["op"] == "list_domains"
    assert payload["data"] == {"items": ["myteam", "qa"], "count": 2}


def test_gear_profiles_without_domain(
    cli_runner: CliRunner, project: Path, cli_broker: FakeBroker
) -> None:
    cli_broker.domains.clear()
    result = cli_runner.invoke(cli, ["list", "gear-profiles"])
    assert result.exit_code == 0
    assert "0 items" in result.stdout
