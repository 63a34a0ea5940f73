"""Translate between flat payloads and the v2 API's JSON:API envelopes.

Paths under ``/2/`` speak a JSON:API dialect: request bodies are wrapped as
``{"data": {"type": ..., "attributes": {...}}}`` and responses come back in
the same shape. This module detects v2 paths, wraps outgoing fields, and
flattens incoming resources so that v1 and v2 responses read alike.

Unwrapping is lenient by contract: anything that does not look like an
envelope is returned untouched.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlsplit

from pydantic import TypeAdapter, ValidationError

from honeycli.models import ResourceEnvelope

V2_PREFIX = "/2/"

JSONAPI_CONTENT_TYPE = "application/vnd.api+json"
JSON_CONTENT_TYPE = "application/json"

_WRAPPED_METHODS = frozenset({"POST", "PATCH", "PUT"})

_resource_list = TypeAdapter(list[ResourceEnvelope])


def is_absolute_url(path: str) -> bool:
    """Return ``True`` for ``http://`` and ``https://`` URLs."""
    return path.startswith(("http://", "https://"))


def extract_path(path: str) -> str:
    """Return the path portion of an absolute URL, or *path* unchanged."""
    if is_absolute_url(path):
        try:
            return urlsplit(path).path
        except ValueError:
            return path
    return path


def is_v2_path(path: str) -> bool:
    return extract_path(path).startswith(V2_PREFIX)


def content_type_for_path(path: str) -> str:
    """Default ``Content-Type`` for a request body sent to *path*."""
    return JSONAPI_CONTENT_TYPE if is_v2_path(path) else JSON_CONTENT_TYPE


def infer_resource_type(method: str, path: str) -> str:
    """Guess the JSON:API ``type`` from the request path.

    ``PATCH``/``PUT`` target an item (``/2/teams/t/environments/abc``), so
    the collection name is the second-to-last segment. Everything else
    targets the collection itself and uses the last segment.
    """
    path = extract_path(path).split("?", 1)[0].rstrip("/")
    segments = path.split("/")

    if method.upper() in ("PATCH", "PUT") and len(segments) >= 2:
        return segments[-2]
    return segments[-1]


def should_wrap(method: str, path: str, has_fields: bool, has_body: bool) -> bool:
    """Whether structured fields for this request go out in an envelope."""
    return (
        has_fields
        and not has_body
        and method.upper() in _WRAPPED_METHODS
        and is_v2_path(path)
    )


def wrap_jsonapi(fields: dict[str, Any], resource_type: str) -> dict[str, Any]:
    """Wrap *fields* as the attributes of a new resource of *resource_type*."""
    envelope = ResourceEnvelope(type=resource_type, attributes=fields)
    return {"data": envelope.model_dump(exclude_unset=True)}


def unwrap_jsonapi(body: bytes) -> bytes:
    """Flatten a JSON:API response body.

    A single resource becomes one flat object; a list of resources becomes a
    list of flat objects in the same order. Bodies that are not JSON, have no
    ``data`` member, or whose ``data`` does not match the resource shape are
    returned unchanged.

    A ``"data": null`` member is also returned unchanged rather than being
    turned into an empty list, so a caller can still tell "no resource"
    from "no resources".

    Args:
        body: The raw response body.

    Returns:
        Compact JSON for a flattened envelope, otherwise *body* itself.
    """
    try:
        document = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return body
    if not isinstance(document, dict):
        return body

    data = document.get("data")
    if data is None:
        return body

    if isinstance(data, dict):
        try:
            single = ResourceEnvelope.model_validate(data)
        except ValidationError:
            single = None
        if single is not None and single.type:
            return _dump(single.flatten())

    if isinstance(data, list):
        try:
            resources = _resource_list.validate_python(data)
        except ValidationError:
            return body
        return _dump([resource.flatten() for resource in resources])

    return body


def _dump(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
