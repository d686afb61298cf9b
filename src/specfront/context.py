"""Naming-context chain used for diagnostics during recursive model building.

Every recursive "build a typed node" call receives a :class:`Context`
describing where it is in the document, e.g.
``$root.paths./pets.get.parameters.0``. Errors raised at that point embed
the description so that a failure is reported as ``"path.to.field: message"``
without threading an explicit path list through every function signature.

A context also carries the registered extension handlers. They are set on
the root and inherited unchanged by every child, so any point in the tree
can dispatch a vendor extension (see
:func:`~specfront.extensions.dispatch.dispatch_extension`) without
re-plumbing handler configuration.

Contexts are immutable and stack-scoped: a child is created for each step
of a descent and discarded when that step returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Union

if TYPE_CHECKING:
    from specfront.extensions.base import ExtensionHandler


@dataclass(frozen=True, eq=False)
class Context:
    """One step in a parent-linked naming chain.

    Attributes:
        name: This step's name (a key, an index, or a root label).
        parent: The enclosing context, or ``None`` at the root.
        extension_handlers: Handlers available to this descent, in
            registration order.
    """

    name: str
    parent: Optional["Context"] = None
    extension_handlers: tuple["ExtensionHandler", ...] = ()

    def description(self) -> str:
        """Return the dotted path from the root to this context."""
        return ".".join(self.path())

    def path(self) -> list[str]:
        """Return the names from the root down to this context."""
        names = []
        context: Optional[Context] = self
        while context is not None:
            names.append(context.name)
            context = context.parent
        names.reverse()
        return names

    def child(self, name: Union[str, int]) -> "Context":
        """Shorthand for ``new_context(name, self)``."""
        return new_context(name, self)

    def __str__(self) -> str:
        return self.description()

    def __repr__(self) -> str:
        return f"Context({self.description()!r})"


def new_context(
    name: Union[str, int],
    parent: Optional[Context] = None,
    extension_handlers: Optional[Iterable["ExtensionHandler"]] = None,
) -> Context:
    """Create a context named *name* below *parent*.

    Args:
        name: The step name. Sequence indexes may be passed as ints.
        parent: The enclosing context, or ``None`` for a root.
        extension_handlers: Handlers for a root context. Children inherit
            their parent's handlers when this is ``None``.

    Example::

        root = new_context("$root", extension_handlers=handlers)
        get = new_context("get", new_context("/pets", new_context("paths", root)))
        get.description()  # '$root.paths./pets.get'
    """
    if extension_handlers is not None:
        handlers = tuple(extension_handlers)
    elif parent is not None:
        handlers = parent.extension_handlers
    else:
        handlers = ()
    return Context(name=str(name), parent=parent, extension_handlers=handlers)
