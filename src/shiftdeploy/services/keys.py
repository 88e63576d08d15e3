"""KeyService — SSH public key registration for the build agent."""

from __future__ import annotations

from pathlib import Path

from shiftdeploy.domain.errors import ShiftDeployError
from shiftdeploy.services.base import BaseService
from shiftdeploy.services.result import ServiceResult


class KeyService(BaseService):
    """Check and register the agent's public key on the account."""

    def check(self, public_key_file: Path) -> ServiceResult:
        op = "ssh_key_check"
        path = str(public_key_file)
        try:
            exists = self._manager.ssh_key_exists(public_key_file)
        except OSError as exc:
            return self._file_error(op, exc, path)
        except ShiftDeployError as exc:
            return self._error(op, exc, path=path)
        return ServiceResult(ok=True, op=op, data={"path": path, "exists": exists})

    def upload(self, public_key_file: Path) -> ServiceResult:
        op = "ssh_key_upload"
        path = str(public_key_file)
        warnings: list[str] = []
        try:
            key = self._manager.upload_ssh_key(public_key_file)
        except OSError as exc:
            return self._file_error(op, exc, path)
        except ShiftDeployError as exc:
            return self._error(op, exc, path=path)

        self._dispatch_event("post_ssh_key_upload", {"label": key.name, "key_type": key.type}, warnings)
        return ServiceResult(
            ok=True,
            op=op,
            data={"path": path, "label": key.name, "type": key.type, "uploaded": True},
            warnings=warnings,
        )

    def ensure(self, public_key_file: Path) -> ServiceResult:
        """Upload the key only when its material is not registered yet."""
        checked = self.check(public_key_file)
        if not checked.ok:
            return checked.model_copy(update={"op": "ssh_key_ensure"})
        if checked.data["exists"]:
            return ServiceResult(
                ok=True,
                op="ssh_key_ensure",
                data={"path": str(public_key_file), "uploaded": False},
            )
        uploaded = self.upload(public_key_file)
        return uploaded.model_copy(update={"op": "ssh_key_ensure"})
