"""Canonical Pydantic models shared across all honeycli modules.

The models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`Profile`, and
    :class:`GlobalConfig`.

**Credential models** -- :class:`KeyType`, the credential class a request
needs.

**Request pipeline models** -- :class:`ApiOptions` (one ``honeycli api``
invocation) and :class:`ResourceEnvelope` (the JSON:API resource shape used
by the v2 API).

All models use Pydantic v2.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Credentials ---


class KeyType(str, enum.Enum):
    """Credential classes accepted by the API.

    ``config`` and ``ingest`` keys travel in the team header; ``management``
    keys are sent as bearer tokens and are the only class the v2 API accepts.
    """

    CONFIG = "config"
    INGEST = "ingest"
    MANAGEMENT = "management"


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")


class Profile(BaseModel):
    """Per-team settings stored under ``profiles`` in the global config.

    Keys themselves never live here; they are kept in the credential store
    (see :class:`~honeycli.auth.credential_store.CredentialStore`).
    """

    model_config = ConfigDict(extra="allow")

    api_url: Optional[str] = Field(
        default=None, description="Override the API base URL for this profile"
    )
    team: Optional[str] = Field(default=None, description="Team slug")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/honeycli/config.json``.

    Loaded and saved by :func:`~honeycli.config.load_global_config` and
    :func:`~honeycli.config.save_global_config`. Values here have the lowest
    precedence; see :func:`~honeycli.config.resolve_config`.
    """

    api_url: Optional[str] = None
    active_profile: Optional[str] = None
    profiles: dict[str, Profile] = Field(default_factory=dict)
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Request pipeline ---


class ApiOptions(BaseModel):
    """Inputs of a single ``honeycli api`` invocation.

    Attributes:
        path: Target path (``/1/auth``) or absolute URL.
        method: Explicit HTTP method; inferred when ``None``.
        fields: ``key=value`` string fields.
        typed_fields: ``key=value`` fields with bool/number/null/@file coercion.
        headers: ``key:value`` request headers.
        jq: Optional jq expression applied to each response body.
        include: Print the status line and response headers to stderr.
        paginate: Follow ``Link: rel="next"`` pagination (GET only).
        raw: Skip JSON:API envelope unwrapping of v2 responses.
        key_type: Explicit key type override (``config``, ``ingest``, ``management``).
        input: Request body file path, or ``-`` for stdin.
    """

    path: str
    method: Optional[str] = None
    fields: list[str] = Field(default_factory=list)
    typed_fields: list[str] = Field(default_factory=list)
    headers: list[str] = Field(default_factory=list)
    jq: Optional[str] = None
    include: bool = False
    paginate: bool = False
    raw: bool = False
    key_type: Optional[str] = None
    input: Optional[str] = None


class ResourceEnvelope(BaseModel):
    """A JSON:API resource object: ``{id?, type, attributes}``.

    Outgoing envelopes always carry ``type`` and omit ``id`` on create.
    When decoding responses a missing ``type`` reads as ``""`` and missing or
    null ``attributes`` read as ``None``; any other shape mismatch (a numeric
    ``id``, non-object ``attributes``) fails validation.
    """

    id: Optional[str] = None
    type: str = ""
    attributes: Optional[dict[str, Any]] = None

    def flatten(self) -> dict[str, Any]:
        """Merge ``attributes`` with ``id``/``type``; the envelope values win."""
        flat: dict[str, Any] = dict(self.attributes or {})
        if self.id:
            flat["id"] = self.id
        flat["type"] = self.type
        return flat
