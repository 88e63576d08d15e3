"""Command: check that the account can host applications."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shiftdeploy.commands._base import ShiftCommand

if TYPE_CHECKING:
    from shiftdeploy.commands._context import AppContext


@click.command(
    cls=ShiftCommand,
    examples="""\
  shiftdeploy validate
  shiftdeploy --broker openshift.example.com -u ci-bot validate
  shiftdeploy --json validate""",
)
@click.pass_obj
def validate(app: AppContext) -> None:
    """Verify credentials and that the user owns at least one domain."""
    from shiftdeploy.services.deploy import DeployService

    app.emit(DeployService(app.manager).validate())
