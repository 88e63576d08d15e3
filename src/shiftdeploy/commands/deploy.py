"""Commands: ensure an application exists, and delete one."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shiftdeploy.commands._base import ShiftCommand

if TYPE_CHECKING:
    from shiftdeploy.commands._context import AppContext


def _parse_env(_ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]) -> dict[str, str]:
    env: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}")
        env[key] = value
    return env


@click.command(
    cls=ShiftCommand,
    examples="""\
  shiftdeploy deploy blog --domain myteam --cartridge php-5.3
  shiftdeploy deploy blog --domain myteam -C php-5.3 -C mysql-5.1 --gear-profile medium
  shiftdeploy deploy blog --env APP_MODE=ci --env DEBUG=0
  shiftdeploy deploy blog --auto-scale --timeout 600""",
)
@click.argument("application", required=False)
@click.option("--domain", "-d", default=None, help="Domain (default: [deploy].domain).")
@click.option(
    "--cartridge",
    "-C",
    "cartridges",
    multiple=True,
    help="Cartridge name; repeat for several (default: [deploy].cartridges).",
)
@click.option("--gear-profile", default=None, help="Gear profile for a new application.")
@click.option(
    "--env",
    "environment",
    multiple=True,
    callback=_parse_env,
    help="Environment variable KEY=VALUE; repeatable.",
)
@click.option(
    "--auto-scale/--no-auto-scale",
    default=None,
    help="Create the application scalable (default: [deploy].auto_scale).",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait for a new application to answer (default 300).",
)
@click.pass_obj
def deploy(
    app: AppContext,
    application: str | None,
    domain: str | None,
    cartridges: tuple[str, ...],
    gear_profile: str | None,
    environment: dict[str, str],
    auto_scale: bool | None,
    timeout: float | None,
) -> None:
    """Create APPLICATION if it does not exist, then apply environment variables."""
    from shiftdeploy.services.deploy import DeployService

    defaults = app.settings.deploy
    name = application or defaults.application
    if not name:
        raise click.UsageError("APPLICATION is required (argument or [deploy].application)")

    env = {**defaults.environment, **environment}
    result = DeployService(app.manager, app.plugins).deploy(
        name,
        domain or defaults.domain,
        list(cartridges) or defaults.cartridges,
        gear_profile=gear_profile or defaults.gear_profile,
        environment=env,
        auto_scale=defaults.auto_scale if auto_scale is None else auto_scale,
        wait_timeout=defaults.wait_timeout_seconds if timeout is None else timeout,
    )
    app.emit(result)


@click.command(
    cls=ShiftCommand,
    examples="""\
  shiftdeploy delete blog --domain myteam
  shiftdeploy --json delete blog""",
)
@click.argument("application", required=False)
@click.option("--domain", "-d", default=None, help="Domain (default: [deploy].domain).")
@click.pass_obj
def delete(app: AppContext, application: str | None, domain: str | None) -> None:
    """Destroy APPLICATION. Succeeds when it does not exist."""
    from shiftdeploy.services.deploy import DeployService

    defaults = app.settings.deploy
    name = application or defaults.application
    if not name:
        raise click.UsageError("APPLICATION is required (argument or [deploy].application)")

    app.emit(DeployService(app.manager, app.plugins).delete(name, domain or defaults.domain))
