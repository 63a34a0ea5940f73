"""Synchronous HTTP client used by ``honeycli api``.

This module provides :class:`SyncClient`, a thin wrapper around
:class:`httpx.Client` that:

- applies the configured timeout and TLS verification,
- sends exactly one request per call, with no retry,
- reads the whole response body before returning,
- maps transport failures (DNS, refused connections, timeouts, TLS) to
  :class:`~honeycli.exceptions.ConnectionError_`.

Status codes are never interpreted here; deciding what counts as failure
is up to the caller, which must see the body first.
"""

from __future__ import annotations

from typing import Optional

import httpx

from honeycli.exceptions import ConnectionError_
from honeycli.models import RequestConfig
from honeycli.output import get_output


class SyncClient:
    """Synchronous HTTP client for API calls.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        request_config: Timeout and TLS settings.
        transport: Optional custom transport (``httpx.MockTransport`` in tests).

    Example::

        with SyncClient(RequestConfig()) as client:
            response = client.send(httpx.Request("GET", "https://api.honeycomb.io/1/auth"))
    """

    def __init__(
        self,
        request_config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = request_config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send *request* once and return the fully read response.

        Redirects are not followed; a 3xx response is returned as-is.

        Args:
            request: The request to send.

        Returns:
            The :class:`httpx.Response`, body already loaded.

        Raises:
            ConnectionError_: On any transport-level failure.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        get_output().debug(f"{request.method} {request.url}")
        try:
            response = self._client.send(request)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"request failed: {exc}") from exc

        get_output().debug(
            f"HTTP {response.status_code} {response.reason_phrase} "
            f"({len(response.content)} bytes)"
        )
        return response
