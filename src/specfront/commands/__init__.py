"""Built-in CLI commands for specfront.

Each module defines either a single command function or a Typer sub-app:

* :mod:`~specfront.commands.load` -- ``specfront load``
* :mod:`~specfront.commands.resolve` -- ``specfront resolve``
* :mod:`~specfront.commands.extensions` -- ``specfront extensions run|list``
* :mod:`~specfront.commands.config` -- ``specfront config show|set|reset``

The helpers below are shared: :func:`build_compiler` turns the global CLI
options stored on the Typer context into a configured
:class:`~specfront.compiler.Compiler`, and :func:`report_errors` converts a
fatal :class:`~specfront.exceptions.SpecfrontError` into an error line on
stderr and the matching exit code.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from specfront.compiler import Compiler
from specfront.config import resolve_config
from specfront.exceptions import SpecfrontError
from specfront.output import debug, error


def build_compiler(ctx: typer.Context) -> Compiler:
    """Create a compiler from resolved config plus the CLI overrides in ``ctx.obj``."""
    obj = ctx.obj or {}
    config = resolve_config(
        cli_handlers=obj.get("handlers"),
        cli_timeout=obj.get("timeout"),
    )
    debug(f"Extension handlers: {', '.join(config.extensions.handlers) or '(none)'}")
    return Compiler.from_config(config)


@contextmanager
def report_errors() -> Iterator[None]:
    """Report the first fatal error as ``"path.to.field: message"`` and exit."""
    try:
        yield
    except SpecfrontError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
