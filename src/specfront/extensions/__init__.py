"""Vendor-extension handling -- the out-of-process plugin protocol.

Key pieces:

* :class:`ExtensionHandler` -- capability interface for handlers.
* :class:`ProcessExtensionHandler` -- runs an external executable per request.
* :func:`dispatch_extension` -- the dispatch loop over a context's handlers.
* :class:`ExtensionRegistry` -- builds the handler list from configuration
  and entry points and creates the root context.
* :mod:`~specfront.extensions.wire` -- msgpack encoding of wire messages.
* :mod:`~specfront.extensions.plugin` -- helper for handler executables
  written in Python.
"""

from specfront.extensions.base import ExtensionHandler
from specfront.extensions.dispatch import UNHANDLED, ExtensionResult, dispatch_extension
from specfront.extensions.manager import ENTRY_POINT_GROUP, ExtensionRegistry
from specfront.extensions.process import ProcessExtensionHandler

__all__ = [
    "ENTRY_POINT_GROUP",
    "ExtensionHandler",
    "ExtensionRegistry",
    "ExtensionResult",
    "ProcessExtensionHandler",
    "UNHANDLED",
    "dispatch_extension",
]
