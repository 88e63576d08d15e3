"""Frozen models for resources owned by the broker.

Nothing here talks to the network. Instances are built by the broker
adapter from REST payloads and handed to the manager and services.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from shiftdeploy.domain.types import CartridgeKind


class User(BaseModel):
    """The authenticated account."""

    model_config = {"frozen": True}

    login: str
    gear_sizes: list[str] = Field(default_factory=list)


class Domain(BaseModel):
    """Named namespace owned by the user."""

    model_config = {"frozen": True}

    name: str
    suffix: str | None = None
    allowed_gear_sizes: list[str] | None = None


class Cartridge(BaseModel):
    """A capability that can be attached to an application."""

    model_config = {"frozen": True}

    name: str
    kind: CartridgeKind
    display_name: str | None = None

    @property
    def is_standalone(self) -> bool:
        return self.kind is CartridgeKind.STANDALONE


class GearProfile(BaseModel):
    """A resource-sizing tier."""

    model_config = {"frozen": True}

    name: str


class Application(BaseModel):
    """A deployable unit within a domain.

    Attributes:
        created: True only on the call that created the application.
        accessible: Result of the post-creation reachability wait, or None
            when no wait happened (existing application).
    """

    model_config = {"frozen": True}

    name: str
    domain: str
    uuid: str | None = None
    app_url: str | None = None
    git_url: str | None = None
    framework: str | None = None
    scalable: bool = False
    gear_profile: str | None = None
    cartridges: list[str] = Field(default_factory=list)
    created: bool = False
    accessible: bool | None = None

    def summary(self) -> dict[str, Any]:
        """Plain-data projection used in service results and hook payloads."""
        return self.model_dump(exclude_none=True)


class SSHKey(BaseModel):
    """A public key registered on the account."""

    model_config = {"frozen": True}

    name: str
    type: str
    content: str


class ValidationResult(BaseModel):
    """Outcome of an account validation. Never raised, always returned."""

    model_config = {"frozen": True}

    valid: bool
    message: str
