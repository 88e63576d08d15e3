"""Command group: catalog listings for build-step forms."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shiftdeploy.commands._base import ShiftGroup

if TYPE_CHECKING:
    from shiftdeploy.commands._context import AppContext


@click.group(
    "list",
    cls=ShiftGroup,
    examples="""\
  shiftdeploy list cartridges
  shiftdeploy -q list gear-profiles
  shiftdeploy --json list domains""",
)
def list_cmd() -> None:
    """List cartridges, gear profiles, or domains."""


@list_cmd.command()
@click.pass_obj
def cartridges(app: AppContext) -> None:
    """Cartridges the broker offers."""
    from shiftdeploy.services.catalog import CatalogService

    app.emit(CatalogService(app.manager).cartridges())


@list_cmd.command("gear-profiles")
@click.pass_obj
def gear_profiles(app: AppContext) -> None:
    """Gear profiles of the default domain."""
    from shiftdeploy.services.catalog import CatalogService

    app.emit(CatalogService(app.manager).gear_profiles())


@list_cmd.command()
@click.pass_obj
def domains(app: AppContext) -> None:
    """Domains owned by the user."""
    from shiftdeploy.services.catalog import CatalogService

    app.emit(CatalogService(app.manager).domains())
