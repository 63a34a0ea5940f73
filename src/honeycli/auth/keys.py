"""Decide which key a request needs and attach it.

The API splits credentials into three classes (:class:`~honeycli.models.KeyType`):

- ``management`` -- everything under ``/2/``, sent as ``Authorization: Bearer``.
- ``ingest`` -- the event ingestion endpoints (``/1/events``, ``/1/batch``,
  ``/1/kinesis_events``), sent in ``X-Honeycomb-Team``.
- ``config`` -- every other v1 endpoint, also sent in ``X-Honeycomb-Team``.

Keys are looked up from the environment (``HONEYCLI_<TYPE>_KEY``) first and
then from the profile's :class:`~honeycli.auth.credential_store.CredentialStore`.
"""

from __future__ import annotations

import os
from typing import Optional

import httpx

from honeycli.api.jsonapi import extract_path, is_v2_path
from honeycli.auth.credential_store import CredentialStore
from honeycli.exceptions import AuthError, InvalidUsageError
from honeycli.models import KeyType

TEAM_HEADER = "X-Honeycomb-Team"

INGEST_ENDPOINTS = frozenset({"events", "batch", "kinesis_events"})


def parse_key_type(value: str) -> KeyType:
    """Parse an explicit ``--key-type`` value.

    Raises:
        InvalidUsageError: If *value* is not a known key type.
    """
    try:
        return KeyType(value)
    except ValueError:
        raise InvalidUsageError(
            f"invalid key type '{value}' (must be config, ingest, or management)"
        ) from None


def infer_key_type(path: str) -> KeyType:
    """Infer the key type from the request path alone."""
    if is_v2_path(path):
        return KeyType.MANAGEMENT

    parts = extract_path(path).split("/", 3)
    if len(parts) >= 3 and parts[2] in INGEST_ENDPOINTS:
        return KeyType.INGEST

    return KeyType.CONFIG


def resolve_key_type(override: Optional[str], path: str) -> KeyType:
    """Use the explicit override when given, otherwise infer from *path*."""
    if override:
        return parse_key_type(override)
    return infer_key_type(path)


def key_env_var(key_type: KeyType) -> str:
    return f"HONEYCLI_{key_type.value.upper()}_KEY"


def get_key(profile: str, key_type: KeyType) -> str:
    """Look up the *key_type* key for *profile*.

    Raises:
        AuthError: If no key is configured.
    """
    value = os.environ.get(key_env_var(key_type))
    if value:
        return value

    value = CredentialStore(profile).get(key_type)
    if not value:
        raise AuthError(
            f"no {key_type.value} key configured for profile '{profile}' "
            f"(run honeycli auth login --key-type {key_type.value})"
        )
    return value


def apply_auth(request: httpx.Request, key_type: KeyType, key: str) -> None:
    """Set the auth header for *key_type* on *request* in place."""
    if key_type == KeyType.MANAGEMENT:
        request.headers["Authorization"] = f"Bearer {key}"
    else:
        request.headers[TEAM_HEADER] = key
