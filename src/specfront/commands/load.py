"""Load command -- parse a document and print it.

``specfront load LOCATOR`` reads a local file, ``file://`` URL, ``http(s)``
URL or ``-`` (stdin) and prints the parsed document. With ``--expand`` every
``$ref`` is inlined first; with ``--describe`` the indented debugging dump
is printed instead of JSON/YAML.
"""

from __future__ import annotations

import typer

from specfront.commands import build_compiler, report_errors
from specfront.nodes import describe, to_python
from specfront.output import format_document, print_data


def load_command(
    ctx: typer.Context,
    locator: str = typer.Argument(help="Path, URL, or '-' for stdin."),
    expand: bool = typer.Option(
        False, "--expand", "-e", help="Inline every $ref before printing."
    ),
    describe_tree: bool = typer.Option(
        False, "--describe", help="Print an indented key/value dump."
    ),
) -> None:
    """Load a document and print it.

    Example::

        specfront load openapi.yaml
        specfront --yaml load https://example.com/openapi.json --expand
    """
    with report_errors(), build_compiler(ctx) as compiler:
        node = compiler.expand(locator) if expand else compiler.load(locator)

    if describe_tree:
        print_data(describe(node).rstrip("\n"))
    else:
        format_document(to_python(node))
