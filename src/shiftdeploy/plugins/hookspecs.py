"""Pluggy hook specifications for build-step lifecycle events.

Hooks run synchronously after each mutation succeeds. A CI host (or any
pip-installed plugin) implements them to react to deployments, for example
to publish the application URL or notify a channel.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("shiftdeploy")


class ShiftDeployHookSpec:
    """Hook specifications for the shiftdeploy plugin system."""

    @hookspec
    def post_deploy(
        self,
        application: str,
        domain: str,
        created: bool,
        accessible: bool | None,
        app_url: str | None,
    ) -> None:
        """Called after an application was ensured (created or reused)."""

    @hookspec
    def post_delete(self, application: str, domain: str, deleted: bool) -> None:
        """Called after a delete request, whether or not anything existed."""

    @hookspec
    def post_ssh_key_upload(self, label: str, key_type: str) -> None:
        """Called after a public key was registered on the account."""
