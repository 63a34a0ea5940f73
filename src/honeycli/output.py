"""Everything honeycli prints goes through here.

Two streams, two jobs:

* **stdout** carries data: API response bodies (byte for byte), jq
  results, and the tables and config dumps of the ``auth`` and ``config``
  groups. Scripts pipe and parse it.
* **stderr** carries diagnostics: the ``--include`` status line and
  headers, warnings, errors, next-step hints and ``--verbose`` traces.

Tables and config dumps render as a Rich table or syntax-highlighted JSON
on an interactive terminal and as tab-separated text when piped; ``--json``
and ``--plain`` force one or the other. Colour honours ``NO_COLOR``,
``TERM=dumb`` and ``--no-color``.

:func:`~honeycli.app.main_callback` builds one :class:`OutputManager` per
invocation and installs it with :func:`set_output`; the module-level
functions below forward to it so commands need not pass it around.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How tables and config dumps are rendered.

    ``AUTO`` picks ``RICH`` for a colour-capable terminal and ``PLAIN``
    otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Rendering for :meth:`print_table` and :meth:`format_response`.
        no_color: Disable colour and Rich markup on both streams.
        quiet: Drop :meth:`info`, :meth:`success` and :meth:`suggest` output.
        verbose: Show :meth:`debug` output.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    # -- stdout -------------------------------------------------------- #

    def write_bytes(self, data: bytes) -> None:
        """Write an HTTP response body to stdout unchanged, without a newline.

        Goes through the binary buffer under ``sys.stdout`` when there is
        one, so bodies that are not UTF-8 survive.
        """
        buffer = getattr(sys.stdout, "buffer", None)
        if buffer is None:
            sys.stdout.write(data.decode("utf-8", errors="replace"))
            sys.stdout.flush()
            return
        sys.stdout.flush()
        buffer.write(data)
        buffer.flush()

    def print_data(self, text: str) -> None:
        """Write one line of data to stdout."""
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Render a JSON-compatible value (the global config, for instance)."""
        if self._format == OutputFormat.PLAIN:
            self._print_plain(data)
            return
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(text)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render rows of strings.

        JSON mode emits one object per row keyed by header; plain mode emits
        a tab-separated header line followed by the rows. *title* is shown
        in Rich mode only.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # -- stderr -------------------------------------------------------- #

    def print_stderr(self, text: str) -> None:
        """Write *text* to stderr as is. Used for ``--include`` output."""
        sys.stderr.write(text)
        sys.stderr.flush()

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, message, markup=False)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, f"[green]{escape(message)}[/green]")

    def suggest(self, message: str) -> None:
        """A next-step hint, prefixed with an arrow."""
        if not self._quiet:
            self._diagnostic(f"→ {message}", f"[dim]→ {escape(message)}[/dim]")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diagnostic(
            f"Warning: {message}", f"[yellow]Warning:[/yellow] {escape(message)}"
        )

    def error(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._diagnostic(
            f"Error: {message}", f"[bold red]Error:[/bold red] {escape(message)}"
        )

    def debug(self, message: str) -> None:
        """Shown only with ``--verbose``, prefixed with ``[debug]``."""
        if self._verbose:
            self._diagnostic(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")

    # -- helpers ------------------------------------------------------- #

    def _diagnostic(self, plain: str, styled: str, markup: bool = True) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(styled, markup=markup, highlight=False)

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                if isinstance(value, (dict, list)):
                    value = json.dumps(value, ensure_ascii=False, default=str)
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(str(v) for v in item.values()))
                else:
                    self.print_data(str(item))
        else:
            self.print_data(str(data))


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# -- global instance --------------------------------------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one if needed."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager. Tests call this between cases."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)
