"""RestBroker — httpx client for the OpenShift v2 broker REST API.

Implements :class:`~shiftdeploy.domain.ports.BrokerPort`. Every broker
response is wrapped in an envelope::

    {"status": "ok", "type": "domains", "data": [...], "messages": [{"text": ...}]}

Only ``data`` is handed to the model parsers. On failure the ``messages``
texts become the error message, so the user sees what the broker said.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from shiftdeploy import __version__
from shiftdeploy.domain.errors import BrokerConnectionError, RemoteServiceError
from shiftdeploy.domain.models import Application, Cartridge, Domain, GearProfile, SSHKey, User
from shiftdeploy.domain.types import ApplicationScale, CartridgeKind
from shiftdeploy.infrastructure.reachability import DEFAULT_CHECK_TIMEOUT, wait_until_accessible

if TYPE_CHECKING:
    import threading

    from shiftdeploy.config.models import BrokerConfig
    from shiftdeploy.domain.keys import PublicKey

logger = logging.getLogger(__name__)

REST_PATH = "broker/rest"
_AUTH_FAILURES = frozenset({401, 403})


def rest_root(url: str) -> str:
    """Normalize a broker URL to its REST root with a trailing slash.

    Examples:
        >>> rest_root("openshift.example.com")
        'https://openshift.example.com/broker/rest/'
        >>> rest_root("https://broker.local/broker/rest")
        'https://broker.local/broker/rest/'
    """
    base = url.strip().rstrip("/")
    if "://" not in base:
        base = f"https://{base}"
    if not base.endswith(REST_PATH):
        base = f"{base}/{REST_PATH}"
    return f"{base}/"


def _segment(value: str) -> str:
    return quote(value, safe="")


def _error_message(response: httpx.Response) -> str:
    texts = [m.get("text", "") for m in _envelope(response).get("messages") or []]
    texts = [t for t in texts if t]
    if texts:
        return "; ".join(texts)
    return f"{response.status_code} {response.reason_phrase}".strip()


def _envelope(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


# ---------------------------------------------------------------------------
# Payload parsers
# ---------------------------------------------------------------------------


def _parse_user(data: dict[str, Any]) -> User:
    capabilities = data.get("capabilities") or {}
    return User(
        login=str(data.get("login", "")),
        gear_sizes=list(capabilities.get("gear_sizes") or []),
    )


def _parse_domain(data: dict[str, Any]) -> Domain:
    allowed = data.get("allowed_gear_sizes")
    return Domain(
        name=str(data.get("name") or data.get("id")),
        suffix=data.get("suffix"),
        allowed_gear_sizes=list(allowed) if allowed is not None else None,
    )


def _parse_application(data: dict[str, Any], domain: str) -> Application:
    framework = data.get("framework")
    cartridges = [framework] if framework else []
    cartridges.extend(name for name in (data.get("embedded") or {}) if name not in cartridges)
    return Application(
        name=str(data.get("name")),
        domain=str(data.get("domain_id") or domain),
        uuid=data.get("uuid") or data.get("id"),
        app_url=data.get("app_url"),
        git_url=data.get("git_url"),
        framework=framework,
        scalable=bool(data.get("scalable", False)),
        gear_profile=data.get("gear_profile"),
        cartridges=cartridges,
    )


def _parse_cartridge(data: dict[str, Any]) -> Cartridge:
    kind = CartridgeKind.STANDALONE if data.get("type") == "standalone" else CartridgeKind.EMBEDDED
    return Cartridge(name=str(data.get("name")), kind=kind, display_name=data.get("display_name"))


def _parse_key(data: dict[str, Any]) -> SSHKey:
    return SSHKey(
        name=str(data.get("name")),
        type=str(data.get("type", "")),
        content=str(data.get("content", "")),
    )


# ---------------------------------------------------------------------------
# RestBroker
# ---------------------------------------------------------------------------


class RestBroker:
    """Authenticated broker connection over one ``httpx.Client``.

    Parameters:
        url: Broker URL (host, base URL, or full REST root).
        username: Account login.
        password: Account password.
        verify: Verify TLS certificates and hostnames.
        timeout: Per-request timeout in seconds.
        api_version: Broker API version sent in the ``Accept`` header.
        client_id: Identifies this client in the ``User-Agent``.
        poll_interval: Pause between reachability checks.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        *,
        verify: bool = True,
        timeout: float = 60.0,
        api_version: str = "1.6",
        client_id: str = "jenkins-ci",
        poll_interval: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._verify = verify
        self._poll_interval = poll_interval
        self._transport = transport
        self._http = httpx.Client(
            base_url=rest_root(url),
            auth=httpx.BasicAuth(username, password),
            verify=verify,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": f"application/json; version={api_version}",
                "User-Agent": f"{client_id} shiftdeploy/{__version__}",
            },
        )
        self._user: User | None = None

    @classmethod
    def from_config(
        cls,
        config: BrokerConfig,
        *,
        poll_interval: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> RestBroker:
        if not config.username or config.password is None:
            raise BrokerConnectionError("Broker username and password are required")
        return cls(
            config.url,
            config.username,
            config.password,
            verify=config.verify_ssl,
            timeout=config.timeout_seconds,
            api_version=config.api_version,
            client_id=config.client_id,
            poll_interval=poll_interval,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._http.base_url)

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def connect(self) -> User:
        """Fetch the API root and the user resource.

        Raises:
            BrokerConnectionError: on bad credentials, an unreachable broker,
                or any other handshake failure.
        """
        try:
            self._request("GET", "api")
            self._user = _parse_user(self._request("GET", "user") or {})
        except RemoteServiceError as exc:
            if exc.status_code in _AUTH_FAILURES:
                msg = f"Authentication against {self.base_url} failed: {exc}"
            else:
                msg = f"Could not connect to broker {self.base_url}: {exc}"
            raise BrokerConnectionError(msg) from exc
        logger.debug("Connected to %s as %s", self.base_url, self._user.login)
        return self._user

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # BrokerPort
    # ------------------------------------------------------------------

    def get_user(self) -> User:
        if self._user is None:
            self._user = _parse_user(self._request("GET", "user") or {})
        return self._user

    def get_domains(self) -> list[Domain]:
        return [_parse_domain(d) for d in self._request("GET", "domains") or []]

    def get_domain(self, name: str) -> Domain | None:
        data = self._request("GET", f"domain/{_segment(name)}", missing_ok=True)
        return _parse_domain(data) if data is not None else None

    def get_application(self, domain: str, name: str) -> Application | None:
        data = self._request(
            "GET",
            f"domain/{_segment(domain)}/application/{_segment(name)}",
            missing_ok=True,
        )
        return _parse_application(data, domain) if data is not None else None

    def create_application(
        self,
        domain: str,
        name: str,
        cartridge: Cartridge,
        *,
        scale: ApplicationScale,
        gear_profile: GearProfile | None = None,
    ) -> Application:
        body: dict[str, Any] = {
            "name": name,
            "cartridges": [{"name": cartridge.name}],
            "scale": scale is ApplicationScale.SCALE,
        }
        if gear_profile is not None:
            body["gear_size"] = gear_profile.name
        data = self._request("POST", f"domain/{_segment(domain)}/applications", json=body)
        return _parse_application(data or {"name": name}, domain)

    def add_cartridges(self, application: Application, cartridges: list[Cartridge]) -> Application:
        names = list(application.cartridges)
        for cartridge in cartridges:
            self._request(
                "POST",
                f"{self._app_path(application)}/cartridges",
                json={"name": cartridge.name},
            )
            if cartridge.name not in names:
                names.append(cartridge.name)
        return application.model_copy(update={"cartridges": names})

    def add_environment_variables(self, application: Application, variables: dict[str, str]) -> None:
        body = {"environment_variables": [{"name": k, "value": v} for k, v in variables.items()]}
        self._request("POST", f"{self._app_path(application)}/environment-variables", json=body)

    def destroy_application(self, application: Application) -> None:
        self._request("DELETE", self._app_path(application))

    def get_cartridges(self) -> list[Cartridge]:
        return [_parse_cartridge(c) for c in self._request("GET", "cartridges") or []]

    def get_gear_profiles(self, domain: Domain) -> list[GearProfile]:
        sizes = domain.allowed_gear_sizes
        if sizes is None:
            sizes = self.get_user().gear_sizes
        return [GearProfile(name=size) for size in sizes]

    def get_ssh_keys(self) -> list[SSHKey]:
        return [_parse_key(k) for k in self._request("GET", "user/keys") or []]

    def add_ssh_key(self, name: str, key: PublicKey) -> SSHKey:
        body = {"name": name, "type": key.type, "content": key.content}
        data = self._request("POST", "user/keys", json=body)
        return _parse_key(data) if data else SSHKey(**body)

    def wait_for_accessible(
        self,
        application: Application,
        *,
        timeout: float,
        cancel: threading.Event | None = None,
    ) -> bool:
        if not application.app_url:
            logger.warning("Application %s has no URL to check", application.name)
            return False
        with httpx.Client(
            follow_redirects=True,
            timeout=DEFAULT_CHECK_TIMEOUT,
            verify=self._verify,
            transport=self._transport,
        ) as checker:
            return wait_until_accessible(
                application.app_url,
                timeout=timeout,
                interval=self._poll_interval,
                cancel=cancel,
                client=checker,
            )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _app_path(application: Application) -> str:
        return f"domain/{_segment(application.domain)}/application/{_segment(application.name)}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        missing_ok: bool = False,
    ) -> Any:
        """Send one request and return the envelope's ``data``.

        Returns None for a 404 when *missing_ok* is set.
        """
        try:
            response = self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise RemoteServiceError(f"{method} {path} failed: {exc}") from exc

        if missing_ok and response.status_code == 404:
            return None
        if response.is_error:
            raise RemoteServiceError(_error_message(response), status_code=response.status_code)
        return _envelope(response).get("data")
