"""Resolve command -- print the fragment a ``$ref`` designates."""

from __future__ import annotations

import typer

from specfront.commands import build_compiler, report_errors
from specfront.nodes import to_python
from specfront.output import format_document


def resolve_command(
    ctx: typer.Context,
    base: str = typer.Argument(help="Locator of the document containing the reference."),
    ref: str = typer.Argument(help="Reference, e.g. '#/definitions/Pet' or 'models.yaml#/Pet'."),
    expand: bool = typer.Option(
        False, "--expand", "-e", help="Also inline references inside the fragment."
    ),
) -> None:
    """Resolve REF relative to BASE and print the result.

    Example::

        specfront resolve openapi.yaml '#/definitions/Pet'
        specfront resolve openapi.yaml 'common.yaml#/parameters/limit'
    """
    with report_errors(), build_compiler(ctx) as compiler:
        node = compiler.resolve(base, ref)
        if expand:
            target, _ = compiler.resolver.target(base, ref)
            node = compiler.resolver.expand(target, node)

    format_document(to_python(node))
