"""Typer application and CLI entry point for vimeokit.

This module wires together the top-level Typer application and registers the
built-in sub-commands (``call``, ``url``, ``cache``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Library errors (:class:`~vimeokit.exceptions.VimeoError`)
are printed and mapped to their exit code; anything else is written to a
crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from vimeokit import __version__
from vimeokit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="vimeokit",
    help="Query the Vimeo Simple API from the command line.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"vimeokit {__version__}")
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
    api_version: Optional[str] = typer.Option(
        None, "--api-version", help="API version path segment (default v2)."
    ),
    hostname: Optional[str] = typer.Option(
        None, "--hostname", help="Alternate API hostname."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
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
        False, "--verbose", "-v", help="Show requests and cache hits/misses."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~vimeokit.output.OutputManager` and stores
    the request overrides in ``ctx.obj`` for the sub-commands.
    """
    from vimeokit.config import load_global_config
    from vimeokit.output import OutputFormat, OutputManager, set_output, warning

    fmt = OutputFormat.AUTO
    bad_format: Optional[str] = None
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        configured = load_global_config().output.format
        try:
            fmt = OutputFormat(configured)
        except ValueError:
            bad_format = configured

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    if bad_format is not None:
        warning(f"Unknown output format '{bad_format}' in config, using auto")

    ctx.ensure_object(dict)
    ctx.obj["api_version"] = api_version
    ctx.obj["hostname"] = hostname
    ctx.obj["verbose"] = verbose


from vimeokit.commands.cache import cache_app  # noqa: E402
from vimeokit.commands.call import call_command, url_command  # noqa: E402
from vimeokit.commands.config import config_app  # noqa: E402

app.command("call")(call_command)
app.command("url")(url_command)
app.add_typer(cache_app, name="cache", help="Inspect and purge the response cache.")
app.add_typer(config_app, name="config", help="Show configuration.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to disk and return the log file path."""
    from vimeokit.config import get_data_dir

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = get_data_dir() / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``vimeokit`` console script.

    :class:`~vimeokit.exceptions.VimeoError` instances cause a clean exit
    with the error's ``exit_code``. All other exceptions produce a crash log
    and a generic failure exit.

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
        from vimeokit.exceptions import VimeoError
        from vimeokit.output import error

        if isinstance(exc, VimeoError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
