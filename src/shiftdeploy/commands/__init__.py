"""Subcommand modules for shiftdeploy.

register_commands() imports lazily so ``shiftdeploy --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register both groups and all standalone commands on the root group."""
    # --- Groups ---
    from shiftdeploy.commands.list_cmd import list_cmd
    from shiftdeploy.commands.ssh_key import ssh_key

    cli.add_command(ssh_key)
    cli.add_command(list_cmd)

    # --- Standalone commands ---
    from shiftdeploy.commands.deploy import delete, deploy
    from shiftdeploy.commands.validate import validate

    cli.add_command(validate)
    cli.add_command(deploy)
    cli.add_command(delete)
