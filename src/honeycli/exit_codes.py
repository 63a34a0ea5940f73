"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~honeycli.exceptions.HoneycliError` subclass.
Shell wrappers can inspect the exit code to tell a rejected key from a
missing resource without parsing stderr.

Example::

    $ honeycli api /1/boards/missing
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including HTTP 4xx other than 401/403/404)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments, fields, or headers."""

EXIT_AUTH_FAILURE = 3
"""No key is configured, or the API rejected it (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, TLS, connection refused)."""

EXIT_FILTER_ERROR = 8
"""The jq expression could not be parsed or evaluated, or the input was not JSON."""

EXIT_CANCELLED = 130
"""The operation was interrupted (Ctrl-C or a cancellation between pages)."""
