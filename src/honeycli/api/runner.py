"""Drive one ``honeycli api`` invocation from raw flags to emitted output.

The run moves through fixed stages::

    resolve inputs -> build & send -> normalize -> emit -> (next page | done)

* **Resolve inputs** (:func:`prepare`) -- encode fields, read the body
  source, pick the method and key type, and reject invalid combinations.
  Nothing touches the network until this succeeds.
* **Build & send** -- wrap v2 fields in a JSON:API envelope, build the
  request, attach the key, send it once.
* **Normalize** -- optionally dump the status line and headers to stderr,
  then unwrap v2 envelopes unless ``--raw`` was given.
* **Emit** -- write the body (or the jq results) to stdout. This happens
  before the status check so error payloads stay visible.
* **Next page** -- on success with ``--paginate``, follow ``Link:
  rel="next"`` with fields and body cleared.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Optional

from honeycli.api.fields import parse_fields
from honeycli.api.filter import filter_json
from honeycli.api.jsonapi import (
    infer_resource_type,
    is_v2_path,
    should_wrap,
    unwrap_jsonapi,
    wrap_jsonapi,
)
from honeycli.api.request import build_request, format_response_headers, next_page_url
from honeycli.auth.keys import apply_auth, get_key, resolve_key_type
from honeycli.client.response import describe_error
from honeycli.client.sync_client import SyncClient
from honeycli.exceptions import APIStatusError, CancelledError_, InvalidUsageError
from honeycli.models import ApiOptions, KeyType
from honeycli.output import get_output


@dataclass
class PreparedRequest:
    """Everything resolved from the invocation before the first request."""

    method: str
    fields: dict[str, Any]
    body: Optional[bytes]
    key_type: KeyType


def prepare(options: ApiOptions, stdin: Optional[BinaryIO] = None) -> PreparedRequest:
    """Resolve fields, body, method, and key type for *options*.

    Raises:
        InvalidUsageError: For malformed fields, unreadable inputs, an
            invalid key type, or ``--paginate`` with a non-GET method.
    """
    fields = parse_fields(options.fields, options.typed_fields, stdin)
    body = resolve_body(options.input, stdin)
    method = resolve_method(options, has_body=body is not None)

    if options.paginate and method != "GET":
        raise InvalidUsageError("--paginate is only supported with GET requests")

    key_type = resolve_key_type(options.key_type, options.path)

    if body is not None and fields:
        get_output().warning("--input was given; ignoring --field/--typed-field values")
        fields = {}

    return PreparedRequest(method=method, fields=fields, body=body, key_type=key_type)


def resolve_method(options: ApiOptions, has_body: bool) -> str:
    """Explicit ``--method`` wins; otherwise POST when there is a payload, else GET."""
    if options.method:
        return options.method.upper()
    if options.fields or options.typed_fields or has_body:
        return "POST"
    return "GET"


def resolve_body(source: Optional[str], stdin: Optional[BinaryIO] = None) -> Optional[bytes]:
    """Read the raw request body named by ``--input``.

    ``-`` reads stdin to the end; any other value is a file path.

    Raises:
        InvalidUsageError: If the source cannot be read.
    """
    if not source:
        return None
    if source == "-":
        if stdin is None:
            raise InvalidUsageError("reading input: stdin is not available")
        try:
            return stdin.read()
        except OSError as exc:
            raise InvalidUsageError(f"reading input: {exc}") from exc
    try:
        return Path(source).read_bytes()
    except OSError as exc:
        raise InvalidUsageError(f"opening input file: {exc}") from exc


def run_api(
    options: ApiOptions,
    *,
    client: SyncClient,
    base_url: str,
    profile: str,
    stdin: Optional[BinaryIO] = None,
    cancel: Optional[threading.Event] = None,
) -> int:
    """Execute the request described by *options*, following pages if asked.

    Args:
        options: The invocation inputs.
        client: An entered :class:`~honeycli.client.SyncClient`.
        base_url: API base URL for relative paths.
        profile: Profile whose key is used.
        stdin: Binary stream for ``@-`` fields and ``--input -``.
        cancel: When set, the run stops before issuing its next request.

    Returns:
        The number of requests issued.

    Raises:
        InvalidUsageError: For input errors (always before any request).
        AuthError: If no key is configured for the resolved key type.
        ConnectionError_: On transport failure.
        FilterError: If the jq expression fails.
        APIStatusError: If a response status is 400 or above, after its
            body has been written.
        CancelledError_: If *cancel* is set between requests.
    """
    output = get_output()
    prepared = prepare(options, stdin)
    key = get_key(profile, prepared.key_type)
    method = prepared.method

    path = options.path
    fields = prepared.fields
    body = prepared.body
    requests_sent = 0

    while True:
        if cancel is not None and cancel.is_set():
            raise CancelledError_(f"{method} {path}: cancelled after {requests_sent} request(s)")

        payload = fields
        if should_wrap(method, path, bool(fields), body is not None):
            payload = wrap_jsonapi(fields, infer_resource_type(method, path))

        request = build_request(method, base_url, path, payload, body, options.headers)
        apply_auth(request, prepared.key_type, key)

        response = client.send(request)
        requests_sent += 1

        if options.include:
            output.print_stderr(format_response_headers(response))

        content = response.content
        if not options.raw and is_v2_path(path):
            content = unwrap_jsonapi(content)

        if options.jq:
            filter_json(content, options.jq, output.print_data)
        else:
            output.write_bytes(content)

        if response.status_code >= 400:
            raise APIStatusError(method, path, response.status_code, describe_error(response.content))

        if not options.paginate:
            break
        next_url = next_page_url(response)
        if not next_url:
            break

        output.debug(f"Following next page: {next_url}")
        path = next_url
        base_url = ""
        fields = {}
        body = None

    return requests_sent
