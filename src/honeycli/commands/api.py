"""Api command -- make an authenticated request to any API path.

Provides ``honeycli api <path>``, the generic escape hatch for endpoints
that have no dedicated command. The heavy lifting lives in
:mod:`honeycli.api.runner`; this module only maps CLI flags onto
:class:`~honeycli.models.ApiOptions` and sets up the client.

Examples::

    honeycli api /1/auth
    honeycli api /1/boards -f name="My Board"
    honeycli api /2/teams/my-team/environments -F name=prod --jq .id
    honeycli api /1/columns/my-dataset --paginate
    honeycli api /1/events/my-dataset --input event.json
"""

from __future__ import annotations

import signal
import sys
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer

from honeycli.exit_codes import EXIT_CANCELLED


def api_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="API path (e.g. /1/auth) or absolute URL."),
    method: Optional[str] = typer.Option(
        None, "--method", "-X", help="HTTP method (default: GET, or POST when a payload is given)."
    ),
    fields: Optional[list[str]] = typer.Option(
        None, "--field", "-f", help="String field: key=value. Repeatable."
    ),
    typed_fields: Optional[list[str]] = typer.Option(
        None,
        "--typed-field",
        "-F",
        help="Typed field: key=value with bool/number/null coercion and @file. Repeatable.",
    ),
    headers: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Request header: key:value. Repeatable."
    ),
    jq_expr: Optional[str] = typer.Option(
        None, "--jq", "-q", help="Filter the response with a jq expression."
    ),
    include: bool = typer.Option(
        False, "--include", "-i", help="Print the response status line and headers to stderr."
    ),
    paginate: bool = typer.Option(
        False, "--paginate", help='Follow Link rel="next" pagination (GET only).'
    ),
    raw: bool = typer.Option(
        False, "--raw", help="Do not unwrap JSON:API envelopes from v2 responses."
    ),
    key_type: Optional[str] = typer.Option(
        None, "--key-type", help="Override the key type: config, ingest, management."
    ),
    input_path: Optional[str] = typer.Option(
        None, "--input", help="Read the request body from a file (- for stdin)."
    ),
) -> None:
    """Make an authenticated API request and print the response.

    The key type is inferred from the path: ``/2/...`` uses the management
    key, ``/1/events``, ``/1/batch`` and ``/1/kinesis_events`` use the
    ingest key, everything else the config key.

    Raises:
        HoneycliError: Propagated to :func:`honeycli.app.main`, which prints
            it and exits with its code. A status of 400 or above is an error
            even though the body was already printed.
    """
    from honeycli.api.runner import run_api
    from honeycli.client import SyncClient
    from honeycli.config import resolve_config
    from honeycli.models import ApiOptions

    obj: dict[str, Any] = ctx.obj or {}
    resolved = resolve_config(obj.get("profile"), obj.get("api_url"))

    options = ApiOptions(
        path=path,
        method=method,
        fields=fields or [],
        typed_fields=typed_fields or [],
        headers=headers or [],
        jq=jq_expr,
        include=include,
        paginate=paginate,
        raw=raw,
        key_type=key_type,
        input=input_path,
    )

    stdin = getattr(sys.stdin, "buffer", None)

    with _cancel_on_interrupt() as cancel, SyncClient(resolved.request) as client:
        run_api(
            options,
            client=client,
            base_url=resolved.api_url,
            profile=resolved.profile,
            stdin=stdin,
            cancel=cancel,
        )


@contextmanager
def _cancel_on_interrupt() -> Iterator[threading.Event]:
    """Turn the first Ctrl-C into a cancellation request; the second exits.

    The in-flight request finishes (bounded by the request timeout) and the
    run stops before sending the next one.
    """
    cancel = threading.Event()
    if threading.current_thread() is not threading.main_thread():
        yield cancel
        return

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        if cancel.is_set():
            sys.stderr.write("\nCancelled.\n")
            sys.exit(EXIT_CANCELLED)
        cancel.set()
        sys.stderr.write("\nStopping after the current request (Ctrl-C again to abort).\n")

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield cancel
    finally:
        signal.signal(signal.SIGINT, previous)
