"""Persistent key store scoped per profile.

Stores keys in ``~/.local/share/honeycli/credentials/<profile>.json`` (XDG)
or the platform-equivalent directory. Files are written atomically with
``0o600`` permissions so that keys are never world-readable, even
momentarily.

Each profile maps to exactly one JSON file holding one
:class:`CredentialEntry` per :class:`~honeycli.models.KeyType`::

    {
      "config": {"credential": "...", "created_at": "2026-01-01T00:00:00Z"},
      "management": {"credential": "...", "created_at": "..."}
    }
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from honeycli.config import _atomic_write, get_data_dir
from honeycli.exceptions import ConfigError
from honeycli.models import KeyType


class CredentialEntry(BaseModel):
    """A single stored key.

    Attributes:
        credential: The secret value.
        created_at: When the key was stored (UTC).
    """

    credential: str = Field(description="The key value")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _credentials_dir() -> Path:
    """Return the credentials directory, creating it if needed."""
    path = get_data_dir() / "credentials"
    path.mkdir(parents=True, exist_ok=True)
    return path


class CredentialStore:
    """Read/write keys for a single profile.

    Args:
        profile_name: The profile identifier used to derive the file name.

    Example::

        store = CredentialStore("default")
        store.set(KeyType.CONFIG, "hcaik_123")
        assert store.get(KeyType.CONFIG) == "hcaik_123"
    """

    def __init__(self, profile_name: str) -> None:
        self._profile_name = profile_name
        self._path = _credentials_dir() / f"{profile_name}.json"

    @property
    def path(self) -> Path:
        """The filesystem path to this profile's credential file."""
        return self._path

    def get(self, key_type: KeyType) -> Optional[str]:
        """Return the stored key for *key_type*, or ``None`` when there is none."""
        entry = self._load().get(key_type)
        return entry.credential if entry is not None else None

    def entry(self, key_type: KeyType) -> Optional[CredentialEntry]:
        return self._load().get(key_type)

    def set(self, key_type: KeyType, credential: str) -> None:
        """Store *credential* as the profile's *key_type* key, replacing any previous one."""
        entries = self._load()
        entries[key_type] = CredentialEntry(credential=credential)
        self._save(entries)

    def delete(self, key_type: KeyType) -> bool:
        """Remove the *key_type* key.

        Returns:
            ``True`` if a key was removed, ``False`` if none was stored.
        """
        entries = self._load()
        if key_type not in entries:
            return False
        del entries[key_type]
        if entries:
            self._save(entries)
        else:
            self.clear()
        return True

    def key_types(self) -> list[KeyType]:
        """Key types that currently have a stored key, in declaration order."""
        entries = self._load()
        return [kt for kt in KeyType if kt in entries]

    def clear(self) -> None:
        """Delete the credential file if it exists."""
        if self._path.is_file():
            self._path.unlink()

    def _load(self) -> dict[KeyType, CredentialEntry]:
        if not self._path.is_file():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            raise ConfigError(f"Cannot read credentials at {self._path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Invalid credentials file at {self._path}")

        entries: dict[KeyType, CredentialEntry] = {}
        for name, value in raw.items():
            try:
                key_type = KeyType(name)
                entries[key_type] = CredentialEntry.model_validate(value)
            except (ValueError, ValidationError):
                # Unknown key types and malformed entries are skipped.
                continue
        return entries

    def _save(self, entries: dict[KeyType, CredentialEntry]) -> None:
        data = {kt.value: entry.model_dump(mode="json") for kt, entry in entries.items()}
        _atomic_write(self._path, json.dumps(data, indent=2) + "\n", mode=0o600)


def stored_profiles() -> list[str]:
    """Names of every profile with a credential file, sorted."""
    return sorted(path.stem for path in _credentials_dir().glob("*.json"))
