"""CatalogService — name lists used to populate build-step forms."""

from __future__ import annotations

from collections.abc import Callable

from shiftdeploy.domain.errors import ShiftDeployError
from shiftdeploy.services.base import BaseService
from shiftdeploy.services.result import ServiceResult


class CatalogService(BaseService):
    """Read-only listings of cartridges, gear profiles, and domains."""

    def cartridges(self) -> ServiceResult:
        return self._listing("list_cartridges", self._manager.list_cartridges)

    def gear_profiles(self) -> ServiceResult:
        """Profiles of the default domain; empty when the user has no domain."""
        return self._listing("list_gear_profiles", self._manager.list_gear_profiles)

    def domains(self) -> ServiceResult:
        return self._listing("list_domains", self._manager.list_domains)

    def _listing(self, op: str, fetch: Callable[[], list[str]]) -> ServiceResult:
        try:
            names = fetch()
        except ShiftDeployError as exc:
            return self._error(op, exc)
        return ServiceResult(ok=True, op=op, data={"items": names, "count": len(names)})
