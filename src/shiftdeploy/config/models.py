"""Pydantic models for each shiftdeploy.toml section."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_BROKER_URL = "https://openshift.redhat.com"
DEFAULT_CLIENT_ID = "jenkins-ci"


class BrokerConfig(BaseModel):
    """[broker] section."""

    model_config = {"frozen": True}

    url: str = DEFAULT_BROKER_URL
    username: str | None = None
    password: str | None = Field(default=None, repr=False)
    verify_ssl: bool = True
    timeout_seconds: float = Field(default=60.0, gt=0)
    api_version: str = "1.6"
    client_id: str = DEFAULT_CLIENT_ID


class DeployConfig(BaseModel):
    """[deploy] section — defaults for deploy/delete options."""

    model_config = {"frozen": True}

    domain: str | None = None
    application: str | None = None
    cartridges: list[str] = Field(default_factory=list)
    gear_profile: str | None = None
    auto_scale: bool = False
    environment: dict[str, str] = Field(default_factory=dict)
    wait_timeout_seconds: float = Field(default=300.0, ge=0)
    poll_interval_seconds: float = Field(default=5.0, gt=0)


class SshConfig(BaseModel):
    """[ssh] section."""

    model_config = {"frozen": True}

    public_key_path: str = "~/.ssh/id_rsa.pub"
    label_prefix: str = DEFAULT_CLIENT_ID


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".shiftdeploy/plugins"

