"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from the project's ``.shiftdeploy/plugins/``.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from typing import TYPE_CHECKING

import pluggy

from shiftdeploy.plugins.hookspecs import ShiftDeployHookSpec

if TYPE_CHECKING:
    from pathlib import Path
    from types import ModuleType

PROJECT_NAME = "shiftdeploy"
ENTRY_POINT_GROUP = "shiftdeploy.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, registration, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ShiftDeployHookSpec)

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then local single-file plugins.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_class_plugins()
        if local_dir is not None:
            self._discover_local(local_dir)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Load ``*.py`` files in *local_dir* and register their hook classes.

        Files starting with ``_`` are skipped. A broken plugin file is logged
        and skipped; it never stops the build step.
        """
        if not local_dir.is_dir():
            return
        candidates = [p for p in sorted(local_dir.glob("*.py")) if not p.name.startswith("_")]
        for path in candidates:
            module = _import_plugin_file(path)
            if module is None:
                continue
            for cls in _hook_classes(module):
                self._register_class(cls, f"{module.__name__}.{cls.__name__}")

    def _instantiate_class_plugins(self) -> None:
        """Swap entry-point plugin classes for instances so ``self`` binds."""
        registered = [p for p in self._pm.get_plugins() if inspect.isclass(p) and _has_hook_impls(p)]
        for cls in registered:
            name = self._pm.get_name(cls) or cls.__name__
            self._pm.unregister(cls)
            self._register_class(cls, name)

    def _register_class(self, cls: type, name: str) -> None:
        try:
            self.register_plugin(cls(), name=name)
        except Exception:
            logger.warning("Plugin class %s could not be registered", name, exc_info=True)


def _import_plugin_file(path: Path) -> ModuleType | None:
    """Execute *path* as module ``shiftdeploy_local_plugin_<stem>``."""
    module_name = f"shiftdeploy_local_plugin_{path.stem}"
    loader_spec = importlib.util.spec_from_file_location(module_name, path)
    if loader_spec is None or loader_spec.loader is None:
        logger.warning("Skipping %s: not importable", path)
        return None
    module = importlib.util.module_from_spec(loader_spec)
    sys.modules[module_name] = module
    try:
        loader_spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Skipping %s: import failed", path, exc_info=True)
        return None
    return module


def _hook_classes(module: ModuleType) -> list[type]:
    """Classes defined in *module* itself that implement at least one hook."""
    return [
        cls
        for _, cls in inspect.getmembers(module, inspect.isclass)
        if cls.__module__ == module.__name__ and _has_hook_impls(cls)
    ]


def _has_hook_impls(cls: type) -> bool:
    marker = f"{PROJECT_NAME}_impl"
    return any(
        callable(getattr(cls, attr, None)) and getattr(getattr(cls, attr), marker, None)
        for attr in dir(cls)
        if not attr.startswith("_")
    )
