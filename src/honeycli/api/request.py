"""Build outgoing :class:`httpx.Request` objects and read pagination links.

:func:`build_request` decides where encoded fields go (query string for
``GET``/``HEAD``/``DELETE``, JSON body otherwise), applies header overrides,
and picks a default ``Content-Type`` based on the path's API version.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any, Optional

import httpx

from honeycli.api.jsonapi import content_type_for_path, is_absolute_url
from honeycli.exceptions import InvalidUsageError

_QUERY_METHODS = frozenset({"GET", "HEAD", "DELETE"})


def build_request(
    method: str,
    base_url: str,
    path: str,
    fields: Optional[dict[str, Any]] = None,
    body: Optional[bytes] = None,
    headers: Optional[list[str]] = None,
) -> httpx.Request:
    """Turn a method, target, and payload into a transport-ready request.

    Args:
        method: HTTP method (already upper-cased).
        base_url: API base URL; ignored when *path* is an absolute URL.
        path: Path relative to *base_url*, or an absolute ``http(s)`` URL
            (as returned by pagination).
        fields: Encoded fields. Sent as query parameters for
            ``GET``/``HEAD``/``DELETE``, otherwise as a JSON body. Ignored
            when *body* is given.
        body: Raw request body.
        headers: ``key:value`` header overrides.

    Returns:
        The :class:`httpx.Request`.

    Raises:
        InvalidUsageError: If a header is not ``key:value`` or the URL is
            malformed.
    """
    overrides = parse_headers(headers or [])

    try:
        url = httpx.URL(path if is_absolute_url(path) else join_url(base_url, path))
    except httpx.InvalidURL as exc:
        raise InvalidUsageError(f"building URL: {exc}") from exc

    content: Optional[bytes] = body
    if body is None and fields:
        if method in _QUERY_METHODS:
            for key, value in fields.items():
                url = url.copy_set_param(key, query_value(value))
        else:
            content = json.dumps(fields, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    request_headers = httpx.Headers()
    for key, value in overrides:
        # Repeated names collapse to the last value given.
        request_headers[key] = value
    if content is not None and "content-type" not in request_headers:
        request_headers["Content-Type"] = content_type_for_path(path)

    return httpx.Request(method, url, headers=request_headers, content=content)


def join_url(base_url: str, path: str) -> str:
    """Join *path* onto *base_url* with exactly one slash between them."""
    if not base_url:
        return path
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def parse_headers(headers: list[str]) -> list[tuple[str, str]]:
    """Split ``key:value`` strings on the first colon, trimming both sides.

    Raises:
        InvalidUsageError: If an entry has no colon.
    """
    parsed: list[tuple[str, str]] = []
    for header in headers:
        key, sep, value = header.partition(":")
        if not sep:
            raise InvalidUsageError(f"invalid header '{header}' (must be key:value)")
        parsed.append((key.strip(), value.strip()))
    return parsed


def query_value(value: Any) -> str:
    """Render a field value for a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _format_float(value: float) -> str:
    """Shortest digits that round-trip, with no trailing ``.0``.

    Exponent form is used when the decimal exponent is below -4 or at least
    6, so ``1.0`` renders as ``1`` and ``1e6`` as ``1e+06``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    _, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    point = len(digits) + exponent
    if point - 1 < -4 or point - 1 >= 6:
        return format(value, f".{len(digits) - 1}e")
    return format(value, f".{max(len(digits) - point, 0)}f")


def next_page_url(response: httpx.Response) -> Optional[str]:
    """Return the ``rel="next"`` target of the response's ``Link`` header.

    Relative targets are resolved against the URL that produced *response*.
    """
    link = response.links.get("next")
    if not link or not link.get("url"):
        return None
    url = link["url"]
    if not is_absolute_url(url):
        url = str(response.request.url.join(url))
    return url


def format_response_headers(response: httpx.Response) -> str:
    """Render the status line and headers the way they came off the wire.

    Example::

        HTTP/1.1 200 OK
        Content-Type: application/json

    The block ends with an empty line.
    """
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()]
    for key, value in response.headers.raw:
        lines.append(f"{key.decode('latin-1')}: {value.decode('latin-1')}")
    return "\n".join(lines) + "\n\n"
