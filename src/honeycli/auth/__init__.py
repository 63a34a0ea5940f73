"""Key management for honeycli.

- :mod:`~honeycli.auth.keys` -- infer the key type a path needs, look the
  key up, and attach it to a request.
- :mod:`~honeycli.auth.credential_store` -- persistent, per-profile key
  storage on disk.

Typical usage::

    from honeycli.auth import apply_auth, get_key, resolve_key_type

    key_type = resolve_key_type(None, "/2/teams")
    apply_auth(request, key_type, get_key("default", key_type))
"""

from honeycli.auth.credential_store import CredentialEntry, CredentialStore, stored_profiles
from honeycli.auth.keys import (
    apply_auth,
    get_key,
    infer_key_type,
    parse_key_type,
    resolve_key_type,
)

__all__ = [
    "CredentialEntry",
    "CredentialStore",
    "apply_auth",
    "get_key",
    "infer_key_type",
    "parse_key_type",
    "resolve_key_type",
    "stored_profiles",
]
