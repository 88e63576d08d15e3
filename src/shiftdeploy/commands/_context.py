"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. The broker connection and plugins are created lazily,
so ``--help``, ``--version`` and ``--examples`` never touch the network.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from shiftdeploy.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from shiftdeploy.config.settings import ShiftSettings
    from shiftdeploy.infrastructure.manager import ApplicationManager
    from shiftdeploy.plugins.manager import PluginManager
    from shiftdeploy.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ShiftSettings) -> None:
        self.settings = settings
        self._manager: ApplicationManager | None = None
        self._plugins: PluginManager | None = None

        from shiftdeploy.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def manager(self) -> ApplicationManager:
        """The connected manager (created on first access).

        A failed connection is emitted as a ``connect`` error and exits 1.
        """
        if self._manager is None:
            from shiftdeploy.domain.errors import BrokerConnectionError
            from shiftdeploy.infrastructure.manager import ApplicationManager
            from shiftdeploy.services.result import ServiceResult

            try:
                self._manager = ApplicationManager.from_settings(self.settings)
            except BrokerConnectionError as exc:
                self.emit(ServiceResult.failure("connect", exc.code, str(exc)))
        assert self._manager is not None
        return self._manager

    @property
    def plugins(self) -> PluginManager | None:
        """Loaded plugins, or None when ``[plugins].enabled`` is false."""
        if self._plugins is None and self.settings.plugins.enabled:
            from shiftdeploy.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(local_dir=self.settings.plugin_dir)
        return self._plugins

    def close(self) -> None:
        if self._manager is not None:
            self._manager.close()
            self._manager = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout. Warnings go to stderr outside JSON mode.
        * Failure: stderr, then exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
