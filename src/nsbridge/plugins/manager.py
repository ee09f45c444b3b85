"""Plugin registration for one host invocation.

The built-in :class:`DependencyRewriterPlugin` is always registered, under
the name ``dependency-rewriter``. Third-party hook implementations come
from the ``nsbridge.plugins`` entry point group, where the built-in is
also published; whichever way it arrives, exactly one instance ends up
registered and it receives the manager's settings and application factory.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

import pluggy

from nsbridge.plugins.builtins.dependency_rewriter import DependencyRewriterPlugin
from nsbridge.plugins.hookspecs import NsbridgeHookSpec

if TYPE_CHECKING:
    from nsbridge.config.settings import BridgeSettings
    from nsbridge.host import ApplicationFactory

PROJECT_NAME = "nsbridge"
ENTRY_POINT_GROUP = "nsbridge.plugins"
BUILTIN_PLUGIN_NAME = "dependency-rewriter"

logger = logging.getLogger(__name__)


class PluginManager:
    """Registers nsbridge plugins and relays host hooks to them.

    Parameters:
        settings: Passed to the built-in rewriter. Discovered on
            ``activate`` when omitted.
        application_factory: Passed to the built-in rewriter for the
            nested lock update.
    """

    def __init__(
        self,
        *,
        settings: BridgeSettings | None = None,
        application_factory: ApplicationFactory | None = None,
    ) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(NsbridgeHookSpec)
        self._settings = settings
        self._application_factory = application_factory
        self._loaded = False

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins, then make sure the built-in is present.

        Returns the names of all registered plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_entry_point_classes()
        if self.builtin is None:
            self.register_plugin(self._make_builtin(), name=BUILTIN_PLUGIN_NAME)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def builtin(self) -> DependencyRewriterPlugin | None:
        """The registered dependency rewriter, if any."""
        for plugin in self._pm.get_plugins():
            if isinstance(plugin, DependencyRewriterPlugin):
                return plugin
        return None

    @property
    def hook(self) -> pluggy.HookRelay:
        """Hook relay the host fires lifecycle events through."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _make_builtin(self) -> DependencyRewriterPlugin:
        return DependencyRewriterPlugin(
            settings=self._settings,
            application_factory=self._application_factory,
        )

    def _instantiate_entry_point_classes(self) -> None:
        """Swap plugin classes registered by entry points for instances.

        pluggy registers whatever the entry point names. A class would
        leave ``self`` unbound on dispatch. The built-in class is built
        with this manager's settings; a second copy is dropped.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            if issubclass(plugin, DependencyRewriterPlugin):
                if self.builtin is not None:
                    logger.debug("Dropping duplicate rewriter plugin: %s", name)
                    continue
                instance: object = self._make_builtin()
            else:
                try:
                    instance = plugin()
                except Exception:
                    logger.warning("Failed to instantiate entry-point plugin %s", name, exc_info=True)
                    continue

            self._pm.register(instance, name=name)
            logger.debug("Instantiated entry-point plugin: %s", name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether any public attribute of *cls* carries an ``nsbridge_impl`` marker."""
        return any(
            callable(getattr(cls, attr, None)) and getattr(getattr(cls, attr), "nsbridge_impl", None)
            for attr in dir(cls)
            if not attr.startswith("_")
        )
