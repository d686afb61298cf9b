"""Resolve ``$ref`` pointers within and across documents.

A reference has the form ``[locator]#[/segment/segment...]``:

* ``other.yaml#/definitions/Pet`` -- a fragment of another document, located
  relative to the directory of the referring document.
* ``#/definitions/Pet`` -- a fragment of the referring document itself,
  always walked from that document's root.
* ``other.yaml`` -- a whole document.

:class:`ReferenceResolver` owns an explicit cache keyed by the *normalized*
document identity plus the fragment text, so the same ref string written in
two different documents never collides, and two spellings of the same
document never miss each other. Parsed documents are cached separately so
several fragments of one document cost a single load. Nothing is ever
evicted automatically: documents are assumed not to change during a run.
An optional :class:`~specfront.cache.FetchCache` additionally keeps the
bytes of fetched URL documents on disk between runs; it is consulted only
when a document misses the in-memory cache.

:meth:`ReferenceResolver.resolve` returns a single fragment and never
follows the ``$ref`` entries inside it, so it cannot loop on cyclic
documents. :meth:`ReferenceResolver.expand` inlines references recursively
and leaves a ``$ref`` in place when it would re-enter a reference already
being expanded.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from specfront.cache import FetchCache
from specfront.document.loader import DocumentSource, parse_document
from specfront.document.locators import is_url, join_locator, normalize_locator
from specfront.exceptions import UnresolvedReferenceError
from specfront.nodes import Mapping, Node, Scalar, Sequence

logger = logging.getLogger(__name__)

RefKey = tuple[str, str]

_INDEX_RE = re.compile(r"^(0|[1-9][0-9]*)\Z")


def split_ref(ref: str) -> tuple[str, str]:
    """Split *ref* on its first ``#`` into ``(locator, fragment)``.

    An absent ``#`` yields an empty fragment (the whole document).
    """
    locator, _, fragment = ref.partition("#")
    return locator, fragment


def walk_pointer(root: Node, fragment: str, ref: str = "") -> Node:
    """Follow the JSON-pointer-like *fragment* from *root*.

    Mapping nodes are entered by key (first match wins), sequence nodes by
    a non-negative decimal index without leading zeros. ``~1`` and ``~0``
    are unescaped to ``/`` and ``~`` (RFC 6901).

    Args:
        root: The document root.
        fragment: ``""`` for the whole document, otherwise a ``/``-delimited
            path such as ``/definitions/Pet``.
        ref: The full reference, for error messages.

    Returns:
        The designated node.

    Raises:
        UnresolvedReferenceError: If a key is missing, an index is not an
            integer or out of range, or the path descends into a scalar.
    """
    if not fragment:
        return root

    pointer = fragment[1:] if fragment.startswith("/") else fragment
    segments = pointer.split("/")
    ref = ref or f"#{fragment}"

    current = root
    for position, raw_segment in enumerate(segments):
        segment = raw_segment.replace("~1", "/").replace("~0", "~")
        path = "/".join(segments[: position + 1])

        if isinstance(current, Mapping):
            value = current.get(segment)
            if value is None:
                raise UnresolvedReferenceError(
                    f"Cannot resolve $ref '{ref}': key '{segment}' not found at '{path}'",
                    ref=ref,
                    segment=segment,
                    path=path,
                )
            current = value
        elif isinstance(current, Sequence):
            if not _INDEX_RE.match(segment) or int(segment) >= len(current):
                raise UnresolvedReferenceError(
                    f"Cannot resolve $ref '{ref}': invalid index '{segment}' at '{path}' "
                    f"(sequence has {len(current)} items)",
                    ref=ref,
                    segment=segment,
                    path=path,
                )
            current = current[int(segment)]
        else:
            raise UnresolvedReferenceError(
                f"Cannot resolve $ref '{ref}': cannot descend into a scalar at '{path}'",
                ref=ref,
                segment=segment,
                path=path,
            )

    return current


class ReferenceResolver:
    """Resolves references against base documents, backed by a cache.

    One resolver should serve one compilation. It is not thread-safe; a
    parallel compiler would need one resolver per worker or a locked cache.

    Args:
        source: The loader used on cache misses.
        cache_enabled: When ``False``, every call reloads and re-walks its
            document. Useful when documents are being edited between calls.
        fetch_cache: Optional persistent store of fetched URL bytes,
            consulted before the source fetches a URL and filled after.

    Example::

        resolver = ReferenceResolver()
        pet = resolver.resolve("api/openapi.yaml", "models.yaml#/Pet")
        same = resolver.resolve("api/openapi.yaml", "./models.yaml#/Pet")
        assert pet is same
    """

    def __init__(
        self,
        source: Optional[DocumentSource] = None,
        cache_enabled: bool = True,
        fetch_cache: Optional[FetchCache] = None,
    ) -> None:
        self._source = source or DocumentSource()
        self._cache_enabled = cache_enabled
        self._fetch_cache = fetch_cache
        self._documents: dict[str, Node] = {}
        self._fragments: dict[RefKey, Node] = {}

    @property
    def source(self) -> DocumentSource:
        return self._source

    @property
    def fetch_cache(self) -> Optional[FetchCache]:
        return self._fetch_cache

    @property
    def cache_size(self) -> int:
        """Number of cached fragments."""
        return len(self._fragments)

    def load(self, locator: str) -> Node:
        """Return the root of the document named by *locator*, loading it once."""
        identity = normalize_locator(locator)
        document = self._documents.get(identity)
        if document is None:
            document = self._read(identity)
            if self._cache_enabled:
                self._documents[identity] = document
        return document

    def _read(self, identity: str) -> Node:
        if self._fetch_cache is None or not is_url(identity):
            return self._source.load(identity)

        data = self._fetch_cache.get(identity)
        if data is None:
            data = self._source.fetch_bytes(identity)
            self._fetch_cache.set(identity, data)
        else:
            logger.debug("using cached copy of %s", identity)
        return parse_document(data, identity)

    def target(self, base_locator: str, ref: str) -> RefKey:
        """Return the cache key ``(document identity, fragment)`` of *ref*."""
        locator, fragment = split_ref(ref)
        if locator:
            return join_locator(base_locator, locator), fragment
        return normalize_locator(base_locator), fragment

    def resolve(self, base_locator: str, ref: str) -> Node:
        """Return the node that *ref* designates.

        Args:
            base_locator: The locator of the document containing the
                reference. Always pass the document itself, never a
                position inside it: fragments are walked from the root.
            ref: The reference string, e.g. ``"#/definitions/Pet"``.

        Raises:
            UnresolvedReferenceError: If the fragment cannot be followed.
            FetchError, FileNotFoundError_, ParseError: If the target
                document cannot be loaded.
        """
        key = self.target(base_locator, ref)
        cached = self._fragments.get(key)
        if cached is not None:
            return cached

        logger.debug("resolving %s against %s", ref, base_locator)
        identity, fragment = key
        node = walk_pointer(self.load(identity), fragment, ref)
        if self._cache_enabled:
            self._fragments[key] = node
        return node

    def expand(self, base_locator: str, node: Node) -> Node:
        """Return *node* with every ``{$ref: ...}`` mapping replaced by its target.

        Nested references are resolved relative to the document that
        contains them. Sibling keys next to ``$ref`` are dropped. A
        reference that is already being expanded higher up (a cycle) is
        left as its ``$ref`` mapping.
        """
        return self._expand(normalize_locator(base_locator), node, ())

    def _expand(self, base: str, node: Node, stack: tuple[RefKey, ...]) -> Node:
        if isinstance(node, Mapping):
            ref_node = node.get("$ref")
            if isinstance(ref_node, Scalar) and isinstance(ref_node.value, str):
                key = self.target(base, ref_node.value)
                if key in stack:
                    logger.debug("leaving cyclic $ref %s unexpanded", ref_node.value)
                    return node
                resolved = self.resolve(base, ref_node.value)
                return self._expand(key[0], resolved, stack + (key,))
            return Mapping(
                tuple((key, self._expand(base, value, stack)) for key, value in node.items),
                node.line,
                node.column,
            )
        if isinstance(node, Sequence):
            return Sequence(
                tuple(self._expand(base, item, stack) for item in node.items),
                node.line,
                node.column,
            )
        return node

    def forget(self, locator: str) -> None:
        """Evict a document and every fragment cached from it."""
        identity = normalize_locator(locator)
        self._documents.pop(identity, None)
        for key in [key for key in self._fragments if key[0] == identity]:
            del self._fragments[key]

    def clear(self) -> None:
        """Empty both the document and the fragment caches."""
        self._documents.clear()
        self._fragments.clear()
