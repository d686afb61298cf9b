"""Abstract base class for vendor-extension handlers.

An :class:`ExtensionHandler` is a capability: given an
:class:`~specfront.models.ExtensionRequest` describing one vendor-extension
field, it returns an :class:`~specfront.models.ExtensionResponse` saying
whether it handled the field, the compiled value, and any errors.

The production implementation,
:class:`~specfront.extensions.process.ProcessExtensionHandler`, runs an
external executable and exchanges wire messages over its standard I/O.
Keeping the interface separate from that transport lets the dispatch loop
run against in-process handlers, which is how the test suite exercises it.

Example:
    Minimal in-process handler::

        class UpperHandler(ExtensionHandler):
            @property
            def name(self) -> str:
                return "upper"

            def handle(self, request):
                if request.extension_name != "x-shout":
                    return ExtensionResponse(handled=False)
                return ExtensionResponse(
                    handled=True, value=request.wrapper.yaml.upper().encode()
                )
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from specfront.models import ExtensionRequest, ExtensionResponse


class ExtensionHandler(ABC):
    """Base class for all extension handlers.

    Subclasses must implement :attr:`name` and :meth:`handle`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the handler name used in diagnostics and registration."""
        ...

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def handle(self, request: ExtensionRequest) -> ExtensionResponse:
        """Compile one vendor-extension field.

        Returns:
            ``handled=False`` with no errors to decline the field,
            ``handled=True`` with a ``value`` to claim it, or a non-empty
            ``errors`` list to fail the compilation.

        Raises:
            ExtensionProtocolError: If the handler cannot produce a
                well-formed response at all.
        """
        ...

    def cleanup(self) -> None:
        """Release resources. Called once by the registry at shutdown."""
