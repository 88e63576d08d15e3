"""ApplicationManager — build-step operations over one broker connection.

The manager is the single dependency injected into every service. It owns
the authenticated connection for its whole lifetime and turns build-step
inputs (names, cartridge lists, env maps, key files) into broker calls.

Operations raise :class:`~shiftdeploy.domain.errors.ShiftDeployError`
subclasses (or ``OSError`` for key files) and never retry. The one exception
is :meth:`ApplicationManager.validate`, which always returns a result.

Get-or-create is a check followed by a create. Two callers racing on the
same (domain, application) pair can both see "absent"; nothing here guards
against that.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Self

import structlog

from shiftdeploy.domain.errors import CartridgeNotFoundError, DomainNotFoundError
from shiftdeploy.domain.keys import PublicKey, key_label
from shiftdeploy.domain.models import (
    Application,
    Cartridge,
    Domain,
    GearProfile,
    SSHKey,
    ValidationResult,
)
from shiftdeploy.domain.types import ApplicationScale

if TYPE_CHECKING:
    import threading
    from collections.abc import Mapping, Sequence
    from types import TracebackType

    from shiftdeploy.config.settings import ShiftSettings
    from shiftdeploy.domain.ports import BrokerPort

logger = structlog.get_logger(__name__)

DEFAULT_WAIT_TIMEOUT = 300.0
DEFAULT_LABEL_PREFIX = "jenkins-ci"
NO_DOMAINS_MESSAGE = "User doesn't have any domains. Create a domain for the user in OpenShift"


class ApplicationManager:
    """Domain, application, cartridge and key operations for one account.

    Parameters:
        broker: Connected broker implementing ``BrokerPort``.
        wait_timeout: Default upper bound, in seconds, for the reachability
            wait after creating an application.
        label_prefix: Prefix for uploaded SSH key labels.
    """

    def __init__(
        self,
        broker: BrokerPort,
        *,
        wait_timeout: float = DEFAULT_WAIT_TIMEOUT,
        label_prefix: str = DEFAULT_LABEL_PREFIX,
    ) -> None:
        self._broker = broker
        self._wait_timeout = wait_timeout
        self._label_prefix = label_prefix

    @classmethod
    def connect(
        cls,
        broker_url: str,
        username: str,
        password: str,
        *,
        verify_ssl: bool = True,
        wait_timeout: float = DEFAULT_WAIT_TIMEOUT,
        label_prefix: str = DEFAULT_LABEL_PREFIX,
    ) -> ApplicationManager:
        """Open and authenticate a broker connection.

        Raises:
            BrokerConnectionError: if authentication or the handshake fails.
        """
        from shiftdeploy.infrastructure.broker import RestBroker

        broker = RestBroker(broker_url, username, password, verify=verify_ssl)
        try:
            broker.connect()
        except Exception:
            broker.close()
            raise
        return cls(broker, wait_timeout=wait_timeout, label_prefix=label_prefix)

    @classmethod
    def from_settings(cls, settings: ShiftSettings) -> ApplicationManager:
        """Build a connected manager from the ``[broker]``/``[deploy]``/``[ssh]`` config."""
        from shiftdeploy.infrastructure.broker import RestBroker

        broker = RestBroker.from_config(
            settings.broker,
            poll_interval=settings.deploy.poll_interval_seconds,
        )
        try:
            broker.connect()
        except Exception:
            broker.close()
            raise
        return cls(
            broker,
            wait_timeout=settings.deploy.wait_timeout_seconds,
            label_prefix=settings.ssh.label_prefix,
        )

    @property
    def broker(self) -> BrokerPort:
        return self._broker

    def close(self) -> None:
        """Release the broker connection."""
        self._broker.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """Check that the account has at least one domain. Never raises."""
        try:
            if not self._broker.get_domains():
                return ValidationResult(valid=False, message=NO_DOMAINS_MESSAGE)
        except Exception as exc:
            logger.debug("validate.failed", error=str(exc))
            return ValidationResult(valid=False, message=str(exc) or exc.__class__.__name__)
        return ValidationResult(valid=True, message="ok")

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def find_application(self, app_name: str, domain_name: str) -> Application | None:
        """Look up an application without changing anything."""
        domain = self._require_domain(domain_name)
        return self._broker.get_application(domain.name, app_name)

    def get_or_create_application(
        self,
        app_name: str,
        domain_name: str,
        cartridges: Sequence[str],
        gear_profile: str | None = None,
        environment_variables: Mapping[str, str] | None = None,
        auto_scale: bool = False,
        *,
        wait_timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> Application:
        """Return the named application, creating it first when absent.

        A new application gets the first requested standalone cartridge,
        every requested embedded cartridge, and the gear profile when it
        resolves. Creation then blocks until the application answers or
        *wait_timeout* seconds pass; an application still inaccessible at
        the deadline is returned with ``accessible=False``.

        Environment variables are applied on every call, to new and existing
        applications alike.

        Raises:
            DomainNotFoundError: *domain_name* does not exist.
            CartridgeNotFoundError: creation needed but no requested name is
                an available standalone cartridge.
            RemoteServiceError: the broker rejected a call.
        """
        domain = self._require_domain(domain_name)
        log = logger.bind(application=app_name, domain=domain.name)

        app = self._broker.get_application(domain.name, app_name)
        if app is None:
            app = self._create_application(
                domain,
                app_name,
                list(cartridges),
                gear_profile=gear_profile,
                auto_scale=auto_scale,
                wait_timeout=self._wait_timeout if wait_timeout is None else wait_timeout,
                cancel=cancel,
            )
        else:
            log.debug("application.exists")

        if environment_variables:
            self._broker.add_environment_variables(app, dict(environment_variables))
            log.info("environment.applied", keys=sorted(environment_variables))

        return app

    def delete_application(self, app_name: str, domain_name: str) -> Application | None:
        """Destroy the named application if it exists and return what was found."""
        domain = self._require_domain(domain_name)
        app = self._broker.get_application(domain.name, app_name)
        if app is not None:
            self._broker.destroy_application(app)
            logger.info("application.destroyed", application=app_name, domain=domain.name)
        else:
            logger.debug("application.absent", application=app_name, domain=domain.name)
        return app

    # ------------------------------------------------------------------
    # SSH keys
    # ------------------------------------------------------------------

    def ssh_key_exists(self, public_key_file: Path | str) -> bool:
        """Whether the key in *public_key_file* is already on the account.

        Keys are compared by key material only; labels are ignored.
        """
        key = PublicKey.from_file(Path(public_key_file))
        return any(key.matches(existing.content) for existing in self._broker.get_ssh_keys())

    def upload_ssh_key(self, public_key_file: Path | str) -> SSHKey:
        """Register the key in *public_key_file* under ``<prefix>-<hostname>``."""
        key = PublicKey.from_file(Path(public_key_file))
        label = key_label(self._label_prefix)
        registered = self._broker.add_ssh_key(label, key)
        logger.info("ssh_key.uploaded", label=label, key_type=key.type)
        return registered

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def list_cartridges(self) -> list[str]:
        return [c.name for c in self._broker.get_cartridges()]

    def list_gear_profiles(self) -> list[str]:
        """Gear profiles of the default (first) domain, or [] without one."""
        domains = self._broker.get_domains()
        if not domains:
            return []
        return [p.name for p in self._broker.get_gear_profiles(domains[0])]

    def list_domains(self) -> list[str]:
        return [d.name for d in self._broker.get_domains()]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _require_domain(self, domain_name: str) -> Domain:
        domain = self._broker.get_domain(domain_name)
        if domain is None:
            raise DomainNotFoundError(domain_name)
        return domain

    def _create_application(
        self,
        domain: Domain,
        app_name: str,
        cartridge_names: list[str],
        *,
        gear_profile: str | None,
        auto_scale: bool,
        wait_timeout: float,
        cancel: threading.Event | None,
    ) -> Application:
        available = self._broker.get_cartridges()
        standalone = _first_standalone(available, cartridge_names)
        if standalone is None:
            raise CartridgeNotFoundError(cartridge_names)
        embedded = _embedded(available, cartridge_names)

        profile = self._resolve_gear_profile(domain, gear_profile) if gear_profile else None
        scale = ApplicationScale.from_auto_scale(auto_scale)

        log = logger.bind(application=app_name, domain=domain.name)
        app = self._broker.create_application(
            domain.name,
            app_name,
            standalone,
            scale=scale,
            gear_profile=profile,
        )
        log.info(
            "application.created",
            cartridge=standalone.name,
            scale=str(scale),
            gear_profile=profile.name if profile else None,
        )

        if embedded:
            app = self._broker.add_cartridges(app, embedded)
            log.info("cartridges.embedded", cartridges=[c.name for c in embedded])

        accessible = self._broker.wait_for_accessible(app, timeout=wait_timeout, cancel=cancel)
        if not accessible:
            log.warning("application.inaccessible", timeout_seconds=wait_timeout)
        return app.model_copy(update={"created": True, "accessible": accessible})

    def _resolve_gear_profile(self, domain: Domain, name: str) -> GearProfile | None:
        for profile in self._broker.get_gear_profiles(domain):
            if profile.name == name:
                return profile
        logger.warning("gear_profile.unresolved", gear_profile=name, domain=domain.name)
        return None


def _first_standalone(available: list[Cartridge], names: list[str]) -> Cartridge | None:
    """First requested name that is an available standalone cartridge."""
    standalone = {c.name: c for c in available if c.is_standalone}
    for name in names:
        if name in standalone:
            return standalone[name]
    return None


def _embedded(available: list[Cartridge], names: list[str]) -> list[Cartridge]:
    """Every requested name that is an available embedded cartridge."""
    embedded = {c.name: c for c in available if not c.is_standalone}
    return [embedded[name] for name in names if name in embedded]
