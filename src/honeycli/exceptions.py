"""Exception hierarchy for honeycli.

All exceptions inherit from :class:`HoneycliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`honeycli.exit_codes`.
The top-level error handler in :func:`honeycli.app.main` catches
``HoneycliError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    HoneycliError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- ConnectionError_    (exit 6)
    +-- APIStatusError      (exit 1, 3, 4 or 5 depending on status)
    +-- FilterError         (exit 8)
    +-- CancelledError_     (exit 130)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from honeycli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CANCELLED,
    EXIT_CONNECTION_ERROR,
    EXIT_FILTER_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class HoneycliError(Exception):
    """Base exception for all honeycli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`honeycli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(HoneycliError):
    """Raised for malformed fields, headers, key types, or flag combinations.

    Always detected before any network call.
    """

    exit_code = EXIT_INVALID_USAGE


class AuthError(HoneycliError):
    """Raised when no key is configured for the resolved key type."""

    exit_code = EXIT_AUTH_FAILURE


class ConnectionError_(HoneycliError):
    """Raised on network-level failures (timeout, DNS resolution, TLS, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class APIStatusError(HoneycliError):
    """Raised when the API answers with a status code of 400 or above.

    The response body has already been written to stdout by the time this
    is raised; the exception only carries what the caller needs for the
    diagnostic line.

    Args:
        method: HTTP method of the failed request.
        path: Path (or absolute URL) the request targeted.
        status_code: Numeric HTTP status.
        detail: Optional message extracted from the error body.
    """

    def __init__(self, method: str, path: str, status_code: int, detail: str = ""):
        message = f"{method} {path}: HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, exit_code=_exit_code_for_status(status_code))
        self.method = method
        self.path = path
        self.status_code = status_code
        self.detail = detail


class FilterError(HoneycliError):
    """Raised when a jq expression fails to parse or evaluate, or the input is not JSON."""

    exit_code = EXIT_FILTER_ERROR


class CancelledError_(HoneycliError):
    """Raised when a run is cancelled between requests."""

    exit_code = EXIT_CANCELLED


class ConfigError(HoneycliError):
    """Raised for configuration problems (invalid JSON, failed validation, unwritable files)."""

    exit_code = EXIT_GENERIC_FAILURE


def _exit_code_for_status(status: int) -> int:
    if status in (401, 403):
        return EXIT_AUTH_FAILURE
    if status == 404:
        return EXIT_NOT_FOUND
    if status >= 500:
        return EXIT_SERVER_ERROR
    return EXIT_GENERIC_FAILURE
