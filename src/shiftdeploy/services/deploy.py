"""DeployService — account validation, application ensure, and delete.

Pipeline for deploy: CHECK INPUTS → ENSURE → NOTIFY → RESPOND
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shiftdeploy.domain.errors import ShiftDeployError
from shiftdeploy.services.base import BaseService
from shiftdeploy.services.result import ServiceResult

if TYPE_CHECKING:
    import threading
    from collections.abc import Mapping, Sequence


class DeployService(BaseService):
    """Build-step operations on applications."""

    def validate(self) -> ServiceResult:
        """Report whether the account can host applications."""
        result = self._manager.validate()
        if not result.valid:
            return ServiceResult.failure("validate", "VALIDATION_FAILED", result.message)
        return ServiceResult(ok=True, op="validate", data=result.model_dump())

    def deploy(
        self,
        application: str,
        domain: str | None,
        cartridges: Sequence[str],
        *,
        gear_profile: str | None = None,
        environment: Mapping[str, str] | None = None,
        auto_scale: bool = False,
        wait_timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> ServiceResult:
        """Ensure *application* exists in *domain* and apply *environment*."""
        op = "deploy"
        warnings: list[str] = []

        # ── CHECK INPUTS ─────────────────────────────────────────
        if not domain:
            return ServiceResult.failure(op, "MISSING_CONFIG", "No domain given (--domain or [deploy].domain)")

        # ── ENSURE ───────────────────────────────────────────────
        try:
            app = self._manager.get_or_create_application(
                application,
                domain,
                list(cartridges),
                gear_profile=gear_profile,
                environment_variables=environment,
                auto_scale=auto_scale,
                wait_timeout=wait_timeout,
                cancel=cancel,
            )
        except ShiftDeployError as exc:
            return self._error(op, exc, application=application, domain=domain)

        if app.created and gear_profile and app.gear_profile not in (None, gear_profile):
            warnings.append(
                f"Gear profile {gear_profile!r} not available in domain {domain!r}; "
                f"using {app.gear_profile!r}"
            )
        if app.accessible is False:
            warnings.append(f"Application {application!r} was not accessible before the wait deadline")

        # ── NOTIFY ───────────────────────────────────────────────
        self._dispatch_event(
            "post_deploy",
            {
                "application": app.name,
                "domain": app.domain,
                "created": app.created,
                "accessible": app.accessible,
                "app_url": app.app_url,
            },
            warnings,
        )

        # ── RESPOND ──────────────────────────────────────────────
        data: dict[str, Any] = app.summary()
        if environment:
            data["environment"] = sorted(environment)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def delete(self, application: str, domain: str | None) -> ServiceResult:
        """Destroy *application* if it exists. Deleting nothing is not an error."""
        op = "delete"
        warnings: list[str] = []
        if not domain:
            return ServiceResult.failure(op, "MISSING_CONFIG", "No domain given (--domain or [deploy].domain)")

        try:
            found = self._manager.delete_application(application, domain)
        except ShiftDeployError as exc:
            return self._error(op, exc, application=application, domain=domain)

        self._dispatch_event(
            "post_delete",
            {"application": application, "domain": domain, "deleted": found is not None},
            warnings,
        )
        data: dict[str, Any] = {
            "name": application,
            "domain": domain,
            "deleted": found is not None,
        }
        if found is not None and found.uuid:
            data["uuid"] = found.uuid
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
