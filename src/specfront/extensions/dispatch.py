"""Dispatch of vendor-extension fields to the registered handlers.

A field the compiler does not natively recognize starts *Unhandled*. The
dispatcher builds one :class:`~specfront.models.ExtensionRequest` and offers
it to each handler carried by the :class:`~specfront.context.Context`, in
registration order:

* a response with non-empty ``errors`` ends in *Failed*: an
  :class:`~specfront.exceptions.ExtensionError` naming the messages, the
  context description and the handler;
* a response with ``handled=True`` ends in *Handled*: its ``value`` is the
  compiled field and no further handler runs;
* when every handler declines, the field stays *Unhandled*. That is not an
  error -- most extensions are meant for one consumer only.

A handler that cannot be run or misbehaves raises
:class:`~specfront.exceptions.ExtensionProtocolError`, which is fatal too.
For in-process handlers that includes any unexpected exception and any
return value that is not an :class:`~specfront.models.ExtensionResponse`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from specfront import COMPILER_VERSION
from specfront.context import Context
from specfront.exceptions import ExtensionError, ExtensionProtocolError, SpecfrontError
from specfront.models import ExtensionRequest, ExtensionResponse, Version, Wrapper
from specfront.nodes import Node, render_yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtensionResult:
    """Outcome of a dispatch.

    Attributes:
        handled: Whether some handler claimed the field.
        value: The compiled value when handled, else ``None``.
        type_url: Type name of ``value`` as reported by the handler.
        handler: Name of the handler that claimed the field.
    """

    handled: bool
    value: Optional[bytes] = None
    type_url: str = ""
    handler: str = ""


UNHANDLED = ExtensionResult(handled=False)


def build_request(
    extension_name: str,
    node: Node,
    wrapper_version: str = "unknown",
    parameter: str = "",
) -> ExtensionRequest:
    """Build the request describing *node* for the field *extension_name*."""
    major, minor, patch = COMPILER_VERSION
    return ExtensionRequest(
        compiler_version=Version(major=major, minor=minor, patch=patch),
        wrapper=Wrapper(name=extension_name, version=wrapper_version, yaml=render_yaml(node)),
        extension_name=extension_name,
        parameter=parameter,
    )


def dispatch_extension(
    context: Context,
    extension_name: str,
    node: Node,
    wrapper_version: str = "unknown",
) -> ExtensionResult:
    """Offer the vendor extension *extension_name* to the context's handlers.

    Args:
        context: Position of the field; supplies the handlers and the
            description embedded in errors.
        extension_name: The field name, e.g. ``"x-book"``.
        node: The raw field value.
        wrapper_version: Version label of the document format being
            compiled, forwarded to handlers.

    Returns:
        The handling result, or :data:`UNHANDLED`.

    Raises:
        ExtensionError: If a handler reports errors.
        ExtensionProtocolError: If a handler cannot be run or misbehaves.
    """
    if not context.extension_handlers:
        return UNHANDLED

    request = build_request(extension_name, node, wrapper_version)
    for handler in context.extension_handlers:
        logger.debug(
            "offering %s at %s to %s", extension_name, context.description(), handler.name
        )
        try:
            response = handler.handle(request)
        except SpecfrontError as exc:
            exc.with_context(context.description())
            raise
        except Exception as exc:
            raise ExtensionProtocolError(
                f"Extension handler {handler.name} failed: {exc}",
                handler=handler.name,
                context=context.description(),
            ) from exc

        if not isinstance(response, ExtensionResponse):
            raise ExtensionProtocolError(
                f"Extension handler {handler.name} returned "
                f"{type(response).__name__}, expected ExtensionResponse",
                handler=handler.name,
                context=context.description(),
            )
        if response.errors:
            messages = "; ".join(response.errors)
            raise ExtensionError(
                f"Errors compiling {extension_name} with extension handler "
                f"{handler.name}: {messages}",
                handler=handler.name,
                extension_name=extension_name,
                messages=response.errors,
                context=context.description(),
            )
        if response.handled:
            return ExtensionResult(
                handled=True,
                value=response.value,
                type_url=response.type_url,
                handler=handler.name,
            )

    return UNHANDLED
