"""Extension layer — plugin system via pluggy.

INVARIANT: Plugin failures are warnings, never errors.
"""

import pluggy

from shiftdeploy.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("shiftdeploy")

__all__ = ["PluginManager", "hookimpl"]
