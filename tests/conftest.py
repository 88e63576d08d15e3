"""Shared pytest fixtures and test helpers for shiftdeploy tests."""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from shiftdeploy.domain.errors import RemoteServiceError
from shiftdeploy.domain.keys import PublicKey
from shiftdeploy.domain.models import (
    Application,
    Cartridge,
    Domain,
    GearProfile,
    SSHKey,
    User,
)
from shiftdeploy.domain.types import ApplicationScale, CartridgeKind
from shiftdeploy.infrastructure.manager import ApplicationManager

# Base64 material of two distinct (truncated but well-formed) RSA keys.
KEY_MATERIAL = "AAAAB3NzaC1yc2EAAAADAQABAAABAQC7vbqajDhA"
OTHER_KEY_MATERIAL = "AAAAC3NzaC1lZDI1NTE5AAAAIOMqqnkVzrm0SdG6"

DEFAULT_CARTRIDGES = [
    Cartridge(name="php-5.3", kind=CartridgeKind.STANDALONE),
    Cartridge(name="jbossas-7", kind=CartridgeKind.STANDALONE),
    Cartridge(name="mysql-5.1", kind=CartridgeKind.EMBEDDED),
    Cartridge(name="cron-1.4", kind=CartridgeKind.EMBEDDED),
]


class FakeBroker:
    """In-memory BrokerPort with call recording."""

    def __init__(
        self,
        *,
        domains: list[Domain] | None = None,
        cartridges: list[Cartridge] | None = None,
        gear_sizes: list[str] | None = None,
        accessible: bool = True,
    ) -> None:
        self.domains = list(domains) if domains is not None else [Domain(name="myteam")]
        self.cartridges = list(cartridges) if cartridges is not None else list(DEFAULT_CARTRIDGES)
        self.gear_sizes = gear_sizes if gear_sizes is not None else ["small", "medium"]
        self.accessible = accessible
        self.apps: dict[tuple[str, str], Application] = {}
        self.env: dict[tuple[str, str], dict[str, str]] = {}
        self.keys: list[SSHKey] = []
        self.calls: list[tuple[str, Any]] = []
        self.waits: list[float] = []
        self.fail_domains: Exception | None = None
        self.closed = False

    # --- BrokerPort ---

    def get_user(self) -> User:
        return User(login="ci-bot", gear_sizes=self.gear_sizes)

    def get_domains(self) -> list[Domain]:
        if self.fail_domains is not None:
            raise self.fail_domains
        return list(self.domains)

    def get_domain(self, name: str) -> Domain | None:
        return next((d for d in self.domains if d.name == name), None)

    def get_application(self, domain: str, name: str) -> Application | None:
        return self.apps.get((domain, name))

    def create_application(
        self,
        domain: str,
        name: str,
        cartridge: Cartridge,
        *,
        scale: ApplicationScale,
        gear_profile: GearProfile | None = None,
    ) -> Application:
        self.calls.append(("create", (domain, name, cartridge.name, scale, gear_profile)))
        app = Application(
            name=name,
            domain=domain,
            uuid=f"uuid-{len(self.apps) + 1}",
            app_url=f"http://{name}-{domain}.rhcloud.com/",
            framework=cartridge.name,
            scalable=scale is ApplicationScale.SCALE,
            gear_profile=gear_profile.name if gear_profile else "small",
            cartridges=[cartridge.name],
        )
        self.apps[(domain, name)] = app
        return app

    def add_cartridges(self, application: Application, cartridges: list[Cartridge]) -> Application:
        self.calls.append(("embed", [c.name for c in cartridges]))
        updated = application.model_copy(
            update={"cartridges": application.cartridges + [c.name for c in cartridges]}
        )
        self.apps[(application.domain, application.name)] = updated
        return updated

    def add_environment_variables(self, application: Application, variables: dict[str, str]) -> None:
        self.calls.append(("env", dict(variables)))
        self.env.setdefault((application.domain, application.name), {}).update(variables)

    def destroy_application(self, application: Application) -> None:
        self.calls.append(("destroy", application.name))
        del self.apps[(application.domain, application.name)]

    def get_cartridges(self) -> list[Cartridge]:
        return list(self.cartridges)

    def get_gear_profiles(self, domain: Domain) -> list[GearProfile]:
        sizes = domain.allowed_gear_sizes if domain.allowed_gear_sizes is not None else self.gear_sizes
        return [GearProfile(name=s) for s in sizes]

    def get_ssh_keys(self) -> list[SSHKey]:
        return list(self.keys)

    def add_ssh_key(self, name: str, key: PublicKey) -> SSHKey:
        if any(k.content == key.content for k in self.keys):
            raise RemoteServiceError("Given public key is already in use.", status_code=409)
        added = SSHKey(name=name, type=key.type, content=key.content)
        self.keys.append(added)
        return added

    def wait_for_accessible(
        self,
        application: Application,
        *,
        timeout: float,
        cancel: threading.Event | None = None,
    ) -> bool:
        self.waits.append(timeout)
        return self.accessible

    def close(self) -> None:
        self.closed = True

    # --- Helpers ---

    def seed_app(self, domain: str, name: str, **fields: Any) -> Application:
        app = Application(name=name, domain=domain, uuid=f"seed-{name}", **fields)
        self.apps[(domain, name)] = app
        return app

    def created(self) -> list[tuple[str, Any]]:
        return [call for call in self.calls if call[0] == "create"]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def manager(broker: FakeBroker) -> ApplicationManager:
    return ApplicationManager(broker)


@pytest.fixture
def public_key(tmp_path: Path) -> Path:
    """A readable public key file."""
    path = tmp_path / "id_rsa.pub"
    path.write_text(f"ssh-rsa {KEY_MATERIAL} ci@build-agent\n", encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated project directory with a shiftdeploy.toml, as CWD."""
    for var in ("SHIFTDEPLOY_CONFIG", "SHIFTDEPLOY_PASSWORD"):
        monkeypatch.delenv(var, raising=False)
    (tmp_path / "shiftdeploy.toml").write_text(
        "[broker]\n"
        'url = "https://broker.example.com"\n'
        'username = "ci-bot"\n'
        'password = "secret"\n'
        "[deploy]\n"
        'domain = "myteam"\n'
        'cartridges = ["php-5.3"]\n'
        "[plugins]\n"
        "enabled = false\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_broker(monkeypatch: pytest.MonkeyPatch, broker: FakeBroker) -> FakeBroker:
    """Route the CLI's manager construction to the in-memory broker."""

    def _from_settings(cls: type[ApplicationManager], settings: Any) -> ApplicationManager:
        return cls(
            broker,
            wait_timeout=settings.deploy.wait_timeout_seconds,
            label_prefix=settings.ssh.label_prefix,
        )

    monkeypatch.setattr(ApplicationManager, "from_settings", classmethod(_from_settings))
    return broker


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Generator[None]:
    """CLI invocations rebind the root handler to the runner's stderr."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    root.handlers = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture(autouse=True)
def _offline_name_resolution(monkeypatch: pytest.MonkeyPatch) -> None:
    """Key labels resolve the hostname; keep that off the network."""
    monkeypatch.setattr(socket, "gethostbyname", lambda name: "127.0.0.1")
