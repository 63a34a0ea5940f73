"""Root Typer application and the ``honeycli`` console entry point.

The root app carries the global options (profile, API URL, output mode)
and mounts three command groups:

* ``honeycli api <path>`` -- send an arbitrary request to the Honeycomb API
  (:mod:`honeycli.commands.api`).
* ``honeycli auth ...`` -- store, verify, and remove keys
  (:mod:`honeycli.commands.auth`).
* ``honeycli config ...`` -- read and edit the global config file
  (:mod:`honeycli.commands.config`).

:func:`main` owns the process exit status. A
:class:`~honeycli.exceptions.HoneycliError` becomes a single ``Error:`` line
on stderr and the exit code the error carries; anything else is written to a
crash log under the data directory and exits with
:data:`~honeycli.exit_codes.EXIT_GENERIC_FAILURE`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from honeycli import __version__
from honeycli.commands.api import api_command
from honeycli.commands.auth import auth_app
from honeycli.commands.config import config_app
from honeycli.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="honeycli",
    help="Command-line client for the Honeycomb API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.command("api")(api_command)
app.add_typer(auth_app, name="auth", help="Manage and verify API keys.")
app.add_typer(config_app, name="config", help="Show and edit the global config file.")


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"honeycli {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile whose keys and settings to use."
    ),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="API base URL (default: https://api.honeycomb.io)."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Render tables and config as JSON."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Render tables and config as tab-separated text."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", help="Suppress informational messages on stderr."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace every HTTP exchange on stderr."
    ),
) -> None:
    """Install the output manager and share the global options.

    Response bodies from ``honeycli api`` are written untouched whatever
    the output mode; ``--json`` and ``--plain`` only shape the tables and
    config dumps of the ``auth`` and ``config`` groups.
    """
    from honeycli.output import OutputFormat, OutputManager, set_output

    if json_output and plain_output:
        raise typer.BadParameter("--json and --plain cannot be combined")

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj.update(profile=profile, api_url=api_url, verbose=verbose)


def _install_signal_handlers() -> None:
    """Exit 130 on Ctrl-C and die quietly when the reader of stdout goes away.

    ``honeycli api`` swaps in its own SIGINT handler for the duration of a
    run so that the first Ctrl-C can stop pagination between pages.
    """

    def _on_interrupt(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)

    signal.signal(signal.SIGINT, _on_interrupt)
    # `honeycli api /1/columns/ds --paginate | head` must not end in a traceback.
    if hasattr(signal, "SIGPIPE"):
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)


def _write_crash_log(exc: BaseException) -> str:
    """Write the traceback of *exc* under ``<data dir>/logs`` and return the file path."""
    from honeycli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return str(log_path)


def _report(exc: Exception) -> int:
    """Print the diagnostic line for *exc* and return the exit code to use."""
    from honeycli.exceptions import HoneycliError
    from honeycli.output import error

    if isinstance(exc, HoneycliError):
        error(str(exc))
        return exc.exit_code
    error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
    return EXIT_GENERIC_FAILURE


def main() -> None:
    """Console-script entry point; always ends in :class:`SystemExit`."""
    _install_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        sys.exit(_report(exc))
