"""BaseService — shared foundation for build-step services.

Every service receives an :class:`ApplicationManager` at construction time,
plus an optional :class:`PluginManager` for lifecycle hooks.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shiftdeploy.domain.errors import ShiftDeployError
from shiftdeploy.services.result import ServiceResult

if TYPE_CHECKING:
    from shiftdeploy.infrastructure.manager import ApplicationManager
    from shiftdeploy.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service classes.

    Subclasses call the manager, then return :meth:`_error` results for
    expected failures::

        class DeployService(BaseService):
            def delete(self, app: str, domain: str) -> ServiceResult:
                try:
                    found = self._manager.delete_application(app, domain)
                except ShiftDeployError as exc:
                    return self._error("delete", exc)
                ...
    """

    def __init__(
        self,
        manager: ApplicationManager,
        plugins: PluginManager | None = None,
    ) -> None:
        self._manager = manager
        self._plugins = plugins

    @staticmethod
    def _error(op: str, exc: ShiftDeployError, **detail: Any) -> ServiceResult:
        return ServiceResult.failure(op, exc.code, str(exc), detail=detail)

    @staticmethod
    def _file_error(op: str, exc: OSError, path: str) -> ServiceResult:
        reason = exc.strerror or str(exc)
        return ServiceResult.failure(
            op,
            "KEY_FILE_UNREADABLE",
            f"Cannot read public key {path}: {reason}",
            detail={"path": path},
        )

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a lifecycle hook. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        hook = getattr(self._plugins.hook, hook_name, None)
        if hook is None:
            return
        try:
            hook(**payload)
        except Exception:
            logger.debug("Hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
