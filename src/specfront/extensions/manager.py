"""Extension registry -- discovery, registration, and lifecycle management.

:class:`ExtensionRegistry` collects the handlers a compilation will use and
hands them to the root :class:`~specfront.context.Context`. Handlers come
from two places:

* executables listed in :attr:`~specfront.models.ExtensionsConfig.handlers`
  (or passed with ``--handler``), each wrapped in a
  :class:`~specfront.extensions.process.ProcessExtensionHandler`;
* in-process handlers registered as Python entry points in the
  ``specfront.extensions`` group::

    [project.entry-points."specfront.extensions"]
    my-handler = "my_package.handler:MyHandler"

Registration order is dispatch order. The registry is read-only once the
root context has been created.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Iterable, Optional

from specfront.context import Context, new_context
from specfront.exceptions import ConfigError
from specfront.extensions.base import ExtensionHandler
from specfront.extensions.process import ProcessExtensionHandler
from specfront.models import ExtensionsConfig

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "specfront.extensions"
"""The entry-point group name used for handler discovery."""

ROOT_CONTEXT_NAME = "$root"


class ExtensionRegistry:
    """Discovers, registers and cleans up extension handlers.

    Example::

        registry = ExtensionRegistry()
        registry.discover(config.extensions)
        root = registry.root_context()
    """

    def __init__(self, handlers: Optional[Iterable[ExtensionHandler]] = None) -> None:
        self._handlers: dict[str, ExtensionHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, config: ExtensionsConfig) -> list[str]:
        """Register configured executables, then entry-point handlers.

        Entry points are filtered by ``config.enabled`` (an allowlist when
        non-empty) and ``config.disabled``. An entry point that fails to
        load is logged and skipped; a duplicate name is a configuration
        error.

        Returns:
            The names registered by this call, in order.
        """
        names = []
        for executable in config.handlers:
            handler = ProcessExtensionHandler(executable)
            self.register(handler)
            names.append(handler.name)

        enabled_set = set(config.enabled)
        disabled_set = set(config.disabled)
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            if enabled_set and ep.name not in enabled_set:
                logger.debug("Extension handler '%s' not in enabled list, skipping", ep.name)
                continue
            if ep.name in disabled_set:
                logger.debug("Extension handler '%s' is disabled, skipping", ep.name)
                continue

            try:
                handler_cls = ep.load()
                handler = handler_cls()
            except Exception as exc:
                logger.warning("Failed to load extension handler '%s': %s", ep.name, exc)
                continue
            self.register(handler)
            names.append(handler.name)

        return names

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, handler: ExtensionHandler) -> None:
        """Append *handler* to the dispatch order.

        Raises:
            ConfigError: If a handler with the same name is registered.
        """
        if handler.name in self._handlers:
            raise ConfigError(f"Extension handler '{handler.name}' is already registered")
        self._handlers[handler.name] = handler
        logger.info("Registered extension handler '%s' v%s", handler.name, handler.version)

    def get(self, name: str) -> ExtensionHandler:
        """Return the handler registered as *name*.

        Raises:
            ConfigError: If no such handler is registered.
        """
        try:
            return self._handlers[name]
        except KeyError:
            raise ConfigError(f"Extension handler '{name}' is not registered") from None

    def handlers(self) -> tuple[ExtensionHandler, ...]:
        return tuple(self._handlers.values())

    def list_handlers(self) -> list[dict[str, str]]:
        """Return ``name``/``version``/``description`` for each handler."""
        return [
            {
                "name": handler.name,
                "version": handler.version,
                "description": handler.description,
            }
            for handler in self._handlers.values()
        ]

    def root_context(self, name: str = ROOT_CONTEXT_NAME) -> Context:
        """Create a root context carrying a snapshot of the handlers."""
        return new_context(name, None, self.handlers())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cleanup(self) -> None:
        """Call ``cleanup`` on every handler and forget them.

        A failing cleanup is logged so the remaining handlers still run.
        """
        for name, handler in self._handlers.items():
            try:
                handler.cleanup()
            except Exception as exc:
                logger.warning("Error cleaning up extension handler '%s': %s", name, exc)
        self._handlers.clear()
