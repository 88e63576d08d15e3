"""BrokerPort — the capabilities the manager needs from a broker.

The manager depends on this structural contract only. The REST adapter in
:mod:`shiftdeploy.infrastructure.broker` implements it against a live
broker; tests implement it in memory.

"Not found" is an explicit ``None`` from :meth:`BrokerPort.get_domain` and
:meth:`BrokerPort.get_application`. Every other failure raises a
:class:`~shiftdeploy.domain.errors.ShiftDeployError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import threading

    from shiftdeploy.domain.keys import PublicKey
    from shiftdeploy.domain.models import (
        Application,
        Cartridge,
        Domain,
        GearProfile,
        SSHKey,
        User,
    )
    from shiftdeploy.domain.types import ApplicationScale


@runtime_checkable
class BrokerPort(Protocol):
    """Authenticated connection to an OpenShift broker."""

    def get_user(self) -> User: ...

    def get_domains(self) -> list[Domain]: ...

    def get_domain(self, name: str) -> Domain | None: ...

    def get_application(self, domain: str, name: str) -> Application | None: ...

    def create_application(
        self,
        domain: str,
        name: str,
        cartridge: Cartridge,
        *,
        scale: ApplicationScale,
        gear_profile: GearProfile | None = None,
    ) -> Application: ...

    def add_cartridges(
        self, application: Application, cartridges: list[Cartridge]
    ) -> Application: ...

    def add_environment_variables(
        self, application: Application, variables: dict[str, str]
    ) -> None: ...

    def destroy_application(self, application: Application) -> None: ...

    def get_cartridges(self) -> list[Cartridge]: ...

    def get_gear_profiles(self, domain: Domain) -> list[GearProfile]: ...

    def get_ssh_keys(self) -> list[SSHKey]: ...

    def add_ssh_key(self, name: str, key: PublicKey) -> SSHKey: ...

    def wait_for_accessible(
        self,
        application: Application,
        *,
        timeout: float,
        cancel: threading.Event | None = None,
    ) -> bool:
        """Block until *application* answers or *timeout* seconds pass."""
        ...

    def close(self) -> None: ...
