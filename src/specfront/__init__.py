"""specfront -- the document-compilation front end of an API-description compiler.

This package turns YAML/JSON API descriptions (local files or remote URLs)
into an immutable, order-preserving node tree, resolves ``$ref`` pointers
across documents with an explicit per-resolver cache, tracks the position of
every recursive build step in a :class:`~specfront.context.Context` chain,
and delegates vendor-extension fields to external plugin processes.

Downstream model builders (OpenAPI v2/v3, Discovery, JSON Schema) use only
the collaborator operations exposed by :mod:`specfront.compiler`::

    from specfront.compiler import Compiler

    compiler = Compiler()
    root = compiler.load("openapi.yaml")
    pet = compiler.resolve("openapi.yaml", "#/definitions/Pet")
    ctx = compiler.new_context("$root")
    result = compiler.dispatch_extension(ctx.child("x-book"), "x-book", node)

Modules:
    nodes: The NodeTree data model and YAML composition.
    document: Locator loading and ``$ref`` resolution.
    context: Immutable naming-context chain.
    extensions: Vendor-extension handler protocol.
    compiler: Collaborator facade.
    models: Pydantic models for configuration and plugin wire messages.
    config: XDG-aware configuration management.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"

COMPILER_VERSION = (0, 1, 0)
"""The ``(major, minor, patch)`` triple sent to extension handlers."""
