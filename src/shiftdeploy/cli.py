"""Root CLI group for shiftdeploy with global flags and command registration."""

from __future__ import annotations

from typing import Any

import click

from shiftdeploy import __version__
from shiftdeploy.commands import register_commands
from shiftdeploy.commands._context import AppContext
from shiftdeploy.config.settings import ShiftSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="shiftdeploy")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--broker", "broker_url", default=None, help="Broker URL (default: [broker].url).")
@click.option("-u", "--username", default=None, help="Broker login (default: [broker].username).")
@click.option(
    "--password",
    default=None,
    envvar="SHIFTDEPLOY_PASSWORD",
    help="Broker password (env: SHIFTDEPLOY_PASSWORD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    broker_url: str | None,
    username: str | None,
    password: str | None,
) -> None:
    """shiftdeploy — OpenShift application management for CI build steps."""
    ctx.ensure_object(dict)
    broker: dict[str, Any] = {
        key: value
        for key, value in (("url", broker_url), ("username", username), ("password", password))
        if value is not None
    }
    settings = ShiftSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        broker=broker or None,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
