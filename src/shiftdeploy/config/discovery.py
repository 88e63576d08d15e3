"""Locating shiftdeploy.toml and anchoring paths from it.

A build workspace usually carries its config at the repository root, so the
finder walks up from the working directory. ``SHIFTDEPLOY_CONFIG`` pins an
exact file and disables the walk.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "shiftdeploy.toml"
CONFIG_ENV_VAR = "SHIFTDEPLOY_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest shiftdeploy.toml at or above *start*, or None.

    When ``SHIFTDEPLOY_CONFIG`` is set, only that file is considered.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        candidate = Path(pinned)
        return candidate if candidate.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for folder in (directory, *directory.parents):
        candidate = folder / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_path(value: str, root: Path) -> Path:
    """Expand ``~`` and anchor relative *value* paths at *root*."""
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path
