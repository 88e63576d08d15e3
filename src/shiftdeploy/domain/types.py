"""Classification enums for broker resources."""

from __future__ import annotations

from enum import StrEnum


class CartridgeKind(StrEnum):
    """How a cartridge attaches to an application."""

    STANDALONE = "standalone"
    EMBEDDED = "embedded"


class ApplicationScale(StrEnum):
    """Scaling mode chosen at application creation."""

    SCALE = "scale"
    NO_SCALE = "no_scale"

    @classmethod
    def from_auto_scale(cls, auto_scale: bool) -> ApplicationScale:
        return cls.SCALE if auto_scale else cls.NO_SCALE
