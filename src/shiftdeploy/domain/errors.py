"""Error hierarchy for broker and build-step failures.

Every error raised by the domain and infrastructure layers derives from
:class:`ShiftDeployError`, except for ``OSError`` raised while reading local
key files. The service layer maps each kind to a ``ServiceError`` code.
"""

from __future__ import annotations


class ShiftDeployError(Exception):
    """Base class for all shiftdeploy errors."""

    code = "ERROR"


class BrokerConnectionError(ShiftDeployError, ConnectionError):
    """Authentication or handshake with the broker failed."""

    code = "CONNECTION_FAILED"


class DomainNotFoundError(ShiftDeployError):
    """The named domain does not exist for the user."""

    code = "DOMAIN_NOT_FOUND"

    def __init__(self, domain: str) -> None:
        super().__init__(f"Domain '{domain}' doesn't exist.")
        self.domain = domain


class CartridgeNotFoundError(ShiftDeployError):
    """None of the requested names is an available standalone cartridge."""

    code = "CARTRIDGE_NOT_FOUND"

    def __init__(self, requested: list[str]) -> None:
        names = ", ".join(requested) if requested else "(none)"
        super().__init__(f"No standalone cartridge available among: {names}")
        self.requested = list(requested)


class RemoteServiceError(ShiftDeployError):
    """Any other failure reported by the broker.

    Carries the broker's message text unchanged and, when known, the HTTP
    status code of the failing response.
    """

    code = "REMOTE_ERROR"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvalidKeyError(ShiftDeployError, ValueError):
    """A local file is not an OpenSSH public key."""

    code = "INVALID_KEY"
