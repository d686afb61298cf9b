"""Collaborator facade over loading, resolution, contexts and extensions.

Downstream model builders (OpenAPI v2/v3, Discovery, JSON Schema) need four
operations and nothing else:

* :meth:`Compiler.load` -- a document's root node;
* :meth:`Compiler.resolve` -- the node a ``$ref`` designates;
* :meth:`Compiler.new_context` -- a naming context for diagnostics;
* :meth:`Compiler.dispatch_extension` -- hand a vendor extension to the
  registered handlers.

A :class:`Compiler` owns one :class:`~specfront.document.ReferenceResolver`
(and therefore one reference cache) and one
:class:`~specfront.extensions.ExtensionRegistry`, so two compilers never
share state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from specfront.cache import FetchCache
from specfront.context import Context, new_context
from specfront.document import DocumentSource, ReferenceResolver
from specfront.extensions import ExtensionRegistry, ExtensionResult, dispatch_extension
from specfront.models import GlobalConfig
from specfront.nodes import Mapping, Node, Sequence

logger = logging.getLogger(__name__)

EXTENSION_PREFIX = "x-"


@dataclass(frozen=True)
class ExtensionOutcome:
    """One vendor-extension field found by :meth:`Compiler.compile_extensions`."""

    path: str
    name: str
    result: ExtensionResult


class Compiler:
    """Front end shared by the model builders of one compilation.

    Args:
        config: Global configuration; only ``fetch`` is read here. Use
            :meth:`from_config` to also honour ``cache`` and ``extensions``.
        registry: Extension handlers. Defaults to none.
        fetch_cache: Optional persistent cache for fetched URLs, handed to
            the resolver.
        cache_enabled: Whether the reference cache is used.
    """

    def __init__(
        self,
        config: Optional[GlobalConfig] = None,
        registry: Optional[ExtensionRegistry] = None,
        fetch_cache: Optional[FetchCache] = None,
        cache_enabled: bool = True,
    ) -> None:
        self._config = config or GlobalConfig()
        self._registry = registry or ExtensionRegistry()
        self._resolver = ReferenceResolver(
            DocumentSource(self._config.fetch),
            cache_enabled=cache_enabled,
            fetch_cache=fetch_cache,
        )

    @classmethod
    def from_config(cls, config: GlobalConfig) -> "Compiler":
        """Build a compiler with the disk cache and handlers *config* describes."""
        from specfront.config import get_cache_dir

        fetch_cache = None
        if config.cache.enabled:
            fetch_cache = FetchCache(get_cache_dir(), config.cache)
        registry = ExtensionRegistry()
        registry.discover(config.extensions)
        return cls(config, registry=registry, fetch_cache=fetch_cache)

    @property
    def resolver(self) -> ReferenceResolver:
        return self._resolver

    @property
    def registry(self) -> ExtensionRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Collaborator operations
    # ------------------------------------------------------------------

    def load(self, locator: str) -> Node:
        """Return the root node of *locator* (cached)."""
        return self._resolver.load(locator)

    def resolve(self, base_locator: str, ref: str) -> Node:
        """Return the node *ref* designates, relative to *base_locator*."""
        return self._resolver.resolve(base_locator, ref)

    def new_context(self, name: Union[str, int], parent: Optional[Context] = None) -> Context:
        """Create a context; a root context receives the registered handlers."""
        if parent is None:
            return new_context(name, None, self._registry.handlers())
        return new_context(name, parent)

    def dispatch_extension(
        self, context: Context, extension_name: str, node: Node
    ) -> ExtensionResult:
        """Offer a vendor extension to the handlers carried by *context*."""
        return dispatch_extension(context, extension_name, node)

    # ------------------------------------------------------------------
    # Whole-document helpers
    # ------------------------------------------------------------------

    def expand(self, locator: str) -> Node:
        """Load *locator* and inline all of its references."""
        return self._resolver.expand(locator, self.load(locator))

    def compile_extensions(self, locator: str) -> list[ExtensionOutcome]:
        """Dispatch every ``x-`` field of the document *locator*.

        The document is walked depth-first in source order without
        following references. The first fatal error stops the walk.
        """
        logger.debug("compiling extensions of %s", locator)
        root = self.load(locator)
        context = self.new_context("$root")
        return list(self._walk_extensions(root, context))

    def _walk_extensions(self, node: Node, context: Context) -> Iterator[ExtensionOutcome]:
        if isinstance(node, Mapping):
            for key, value in node.items:
                child = context.child(key)
                if key.startswith(EXTENSION_PREFIX):
                    result = self.dispatch_extension(child, key, value)
                    yield ExtensionOutcome(child.description(), key, result)
                else:
                    yield from self._walk_extensions(value, child)
        elif isinstance(node, Sequence):
            for index, item in enumerate(node.items):
                yield from self._walk_extensions(item, context.child(index))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._registry.cleanup()
        if self._resolver.fetch_cache is not None:
            self._resolver.fetch_cache.close()

    def __enter__(self) -> "Compiler":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

