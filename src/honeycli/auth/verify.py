"""Check a key against the API's auth introspection endpoints.

Config and ingest keys are checked with ``GET /1/auth``; management keys
with ``GET /2/auth``. A ``401`` marks the key invalid, any other non-2xx
status is reported as an error, and a ``200`` carries the team, environment,
and key identity the API attaches to the key.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel

from honeycli.api.request import build_request
from honeycli.auth.keys import apply_auth
from honeycli.client.sync_client import SyncClient
from honeycli.models import KeyType


class KeyStatus(BaseModel):
    """Outcome of verifying one key."""

    key_type: KeyType
    status: str
    team: Optional[str] = None
    environment: Optional[str] = None
    key_id: Optional[str] = None
    name: Optional[str] = None
    error: Optional[str] = None


def auth_path(key_type: KeyType) -> str:
    """The read-only endpoint that exercises a key of *key_type*."""
    return "/2/auth" if key_type == KeyType.MANAGEMENT else "/1/auth"


def verify_key(client: SyncClient, base_url: str, key_type: KeyType, key: str) -> KeyStatus:
    """Send *key* to its auth endpoint and classify the answer.

    Args:
        client: An open :class:`~honeycli.client.SyncClient`.
        base_url: API base URL.
        key_type: Which class of key *key* is.
        key: The key value, as it would be sent on a real request.

    Returns:
        A :class:`KeyStatus` with ``status`` set to ``valid``, ``invalid``,
        or ``error``.

    Raises:
        ConnectionError_: If the request fails at the transport level.
    """
    request = build_request("GET", base_url, auth_path(key_type))
    apply_auth(request, key_type, key)
    response = client.send(request)

    if response.status_code == 401:
        return KeyStatus(key_type=key_type, status="invalid")
    if response.status_code != 200:
        return KeyStatus(
            key_type=key_type,
            status="error",
            error=f"{response.status_code} {response.reason_phrase}".strip(),
        )

    result = KeyStatus(key_type=key_type, status="valid")
    body = _json_object(response.content)
    if key_type == KeyType.MANAGEMENT:
        data = body.get("data")
        if isinstance(data, dict):
            result.key_id = _str_or_none(data.get("id"))
            attributes = data.get("attributes")
            if isinstance(attributes, dict):
                result.name = _str_or_none(attributes.get("name"))
    else:
        result.key_id = _str_or_none(body.get("id"))
        result.team = _nested_name(body.get("team"))
        result.environment = _nested_name(body.get("environment"))
    return result


def _json_object(content: bytes) -> dict[str, Any]:
    try:
        parsed = json.loads(content)
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _nested_name(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        return _str_or_none(value.get("name"))
    return None


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None
