"""Document loading and ``$ref`` resolution.

Typical usage::

    from specfront.document import DocumentSource, ReferenceResolver

    resolver = ReferenceResolver(DocumentSource())
    root = resolver.load("openapi.yaml")
    pet = resolver.resolve("openapi.yaml", "#/definitions/Pet")

Sub-modules:

* :mod:`~specfront.document.locators` -- URL/path detection,
  normalization and relative joining.
* :mod:`~specfront.document.loader` -- I/O layer (URL, file, stdin) and
  YAML composition.
* :mod:`~specfront.document.resolver` -- Cached ``$ref`` resolution across
  documents.
"""

from specfront.document.loader import DocumentSource, load_document, parse_document
from specfront.document.locators import is_url, join_locator, normalize_locator
from specfront.document.resolver import ReferenceResolver, split_ref, walk_pointer

__all__ = [
    "DocumentSource",
    "ReferenceResolver",
    "is_url",
    "join_locator",
    "load_document",
    "normalize_locator",
    "parse_document",
    "split_ref",
    "walk_pointer",
]
