"""Command group: SSH public key registration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from shiftdeploy.commands._base import ShiftGroup

if TYPE_CHECKING:
    from shiftdeploy.commands._context import AppContext

_PATH = click.Path(dir_okay=False, path_type=Path)


def _key_path(app: AppContext, path: Path | None) -> Path:
    return path if path is not None else app.settings.public_key_path


@click.group(
    "ssh-key",
    cls=ShiftGroup,
    examples="""\
  shiftdeploy ssh-key check
  shiftdeploy ssh-key ensure ~/.ssh/id_ed25519.pub
  shiftdeploy --json ssh-key upload keys/ci.pub""",
)
def ssh_key() -> None:
    """Check or register the build agent's public key."""


@ssh_key.command()
@click.argument("path", type=_PATH, required=False)
@click.pass_obj
def check(app: AppContext, path: Path | None) -> None:
    """Report whether the key at PATH is already on the account."""
    from shiftdeploy.services.keys import KeyService

    app.emit(KeyService(app.manager, app.plugins).check(_key_path(app, path)))


@ssh_key.command()
@click.argument("path", type=_PATH, required=False)
@click.pass_obj
def upload(app: AppContext, path: Path | None) -> None:
    """Register the key at PATH under jenkins-ci-<hostname>."""
    from shiftdeploy.services.keys import KeyService

    app.emit(KeyService(app.manager, app.plugins).upload(_key_path(app, path)))


@ssh_key.command()
@click.argument("path", type=_PATH, required=False)
@click.pass_obj
def ensure(app: AppContext, path: Path | None) -> None:
    """Upload the key at PATH unless it is already registered."""
    from shiftdeploy.services.keys import KeyService

    app.emit(KeyService(app.manager, app.plugins).ensure(_key_path(app, path)))
