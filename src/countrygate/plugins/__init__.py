"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from ``.countrygate/plugins/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from countrygate.plugins.manager import PluginManager

__all__ = ["PluginManager"]
