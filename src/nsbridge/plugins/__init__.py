"""Host adapter — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
The host fires the hooks in :mod:`nsbridge.plugins.hookspecs`; the built-in
DependencyRewriterPlugin forwards them to :class:`DependencyRewriter`.
"""

from nsbridge.plugins.manager import PluginManager

__all__ = ["PluginManager"]
