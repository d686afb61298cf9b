"""Typer application and CLI entry point for specfront.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``load``, ``resolve``, ``extensions``,
``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`specfront.config`: Global configuration resolution.
    :mod:`specfront.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, List, Optional

import typer

from specfront import __version__
from specfront.exit_codes import EXIT_GENERIC_FAILURE
from specfront.output import OutputFormat


app = typer.Typer(
    name="specfront",
    help="Load API description documents, resolve $ref pointers and run extension handlers.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from specfront.commands.config import config_app  # noqa: E402
from specfront.commands.extensions import extensions_app  # noqa: E402
from specfront.commands.load import load_command  # noqa: E402
from specfront.commands.resolve import resolve_command  # noqa: E402

app.command("load")(load_command)
app.command("resolve")(resolve_command)
app.add_typer(extensions_app, name="extensions", help="Vendor extension handlers.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specfront {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    yaml_output: bool = typer.Option(
        False, "--yaml", help="YAML output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    handlers: Optional[List[str]] = typer.Option(
        None,
        "--handler",
        "-x",
        help="Extension handler executable (repeatable). Overrides configured handlers.",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Timeout in seconds for fetching remote documents."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~specfront.output.OutputManager` and the
    ``specfront`` logger from CLI flags, and stores shared options
    (``handlers``, ``timeout``, ``force``) in the Typer context so that
    sub-commands can read them via ``ctx.obj``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        yaml_output: Force YAML output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output and log records.
        handlers: Extension handler executables (highest precedence).
        timeout: Fetch timeout override.
        force: Skip interactive confirmations.
        output_file: Redirect primary data output to a file path.
    """
    from specfront.output import OutputManager, configure_logging, set_output, warning

    problem = None
    if json_output:
        fmt = OutputFormat.JSON
    elif yaml_output:
        fmt = OutputFormat.YAML
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt, problem = _configured_format()

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
        output_file=output_file,
    )
    set_output(output)
    configure_logging(verbose, console=output.stderr_console)
    if problem:
        warning(problem)

    ctx.ensure_object(dict)
    ctx.obj["handlers"] = handlers or None
    ctx.obj["timeout"] = timeout
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _configured_format() -> tuple[OutputFormat, Optional[str]]:
    """Return the ``output.format`` config value and a warning, if any.

    An unreadable config yields ``AUTO`` without a warning; the command
    reports the :class:`~specfront.exceptions.ConfigError` itself when it
    resolves config.
    """
    from specfront.config import resolve_config
    from specfront.exceptions import ConfigError

    try:
        name = resolve_config().output.format
    except ConfigError:
        return OutputFormat.AUTO, None
    try:
        return OutputFormat(name), None
    except ValueError:
        return OutputFormat.AUTO, f"Unknown output format '{name}' in config; using auto"


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specfront.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specfront`` console script.

    Unhandled :class:`~specfront.exceptions.SpecfrontError` instances cause
    a clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specfront.exceptions import SpecfrontError
        from specfront.output import error

        if isinstance(exc, SpecfrontError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
