"""Extension commands -- run vendor-extension handlers over a document.

``specfront extensions run LOCATOR`` walks the document and offers every
``x-`` field to the configured handlers (``--handler``, ``SPECFRONT_HANDLERS``
or the ``extensions.handlers`` config key), printing one row per field.
``specfront extensions list`` shows which handlers would be used.
"""

from __future__ import annotations

import typer

from specfront.commands import build_compiler, report_errors
from specfront.extensions import ExtensionResult
from specfront.output import info, print_table, suggest

extensions_app = typer.Typer(no_args_is_help=True)

_PREVIEW_CHARS = 60


def _preview(result: ExtensionResult) -> str:
    """Short printable form of a handled value."""
    if not result.handled or result.value is None:
        return ""
    try:
        text = result.value.decode("utf-8")
    except UnicodeDecodeError:
        return f"<{len(result.value)} bytes>"
    text = " ".join(text.split())
    if len(text) > _PREVIEW_CHARS:
        text = text[: _PREVIEW_CHARS - 3] + "..."
    return text


@extensions_app.command("run")
def extensions_run(
    ctx: typer.Context,
    locator: str = typer.Argument(help="Path, URL, or '-' for stdin."),
) -> None:
    """Dispatch every vendor extension in a document.

    Example::

        specfront --handler ./my-handler extensions run openapi.yaml
    """
    with report_errors(), build_compiler(ctx) as compiler:
        if not compiler.registry.handlers():
            info("No extension handlers configured; every extension stays unhandled.")
            suggest("Pass --handler EXECUTABLE or set extensions.handlers")
        outcomes = compiler.compile_extensions(locator)

    rows = [
        [
            outcome.path,
            outcome.name,
            "handled" if outcome.result.handled else "unhandled",
            outcome.result.handler,
            _preview(outcome.result),
        ]
        for outcome in outcomes
    ]
    print_table(["path", "extension", "status", "handler", "value"], rows, title="Extensions")


@extensions_app.command("list")
def extensions_list(ctx: typer.Context) -> None:
    """List the extension handlers that would be used, in dispatch order."""
    with report_errors(), build_compiler(ctx) as compiler:
        handlers = compiler.registry.list_handlers()

    rows = [[h["name"], h["version"], h["description"]] for h in handlers]
    print_table(["name", "version", "description"], rows, title="Extension handlers")
