"""Tests for key-type inference, key lookup, and auth headers."""

from __future__ import annotations

import httpx
import pytest

from honeycli.auth import CredentialStore
from honeycli.auth.keys import (
    TEAM_HEADER,
    apply_auth,
    get_key,
    infer_key_type,
    key_env_var,
    parse_key_type,
    resolve_key_type,
)
from honeycli.exceptions import AuthError, InvalidUsageError
from honeycli.exit_codes import EXIT_AUTH_FAILURE, EXIT_INVALID_USAGE
from honeycli.models import KeyType


class TestInferKeyType:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/2/teams", KeyType.MANAGEMENT),
            ("/2/teams/t/environments", KeyType.MANAGEMENT),
            ("/1/events/my-dataset", KeyType.INGEST),
            ("/1/batch/my-dataset", KeyType.INGEST),
            ("/1/kinesis_events/my-dataset", KeyType.INGEST),
            ("/1/events", KeyType.INGEST),
            ("/1/boards", KeyType.CONFIG),
            ("/1/auth", KeyType.CONFIG),
            ("/1/eventsx/ds", KeyType.CONFIG),
            ("https://api.honeycomb.io/1/batch/ds", KeyType.INGEST),
            ("https://api.honeycomb.io/2/teams?page=2", KeyType.MANAGEMENT),
            ("/", KeyType.CONFIG),
        ],
    )
    def test_infer(self, path: str, expected: KeyType) -> None:
        assert infer_key_type(path) == expected


class TestParseKeyType:
    @pytest.mark.parametrize("value", ["config", "ingest", "management"])
    def test_valid(self, value: str) -> None:
        assert parse_key_type(value).value == value

    def test_invalid(self) -> None:
        with pytest.raises(InvalidUsageError) as exc_info:
            parse_key_type("admin")
        assert str(exc_info.value) == "invalid key type 'admin' (must be config, ingest, or management)"
        assert exc_info.value.exit_code == EXIT_INVALID_USAGE


class TestResolveKeyType:
    def test_override_wins(self) -> None:
        assert resolve_key_type("config", "/2/teams") == KeyType.CONFIG

    def test_inferred_when_no_override(self) -> None:
        assert resolve_key_type(None, "/2/teams") == KeyType.MANAGEMENT
        assert resolve_key_type("", "/1/events/ds") == KeyType.INGEST


class TestGetKey:
    def test_env_var_name(self) -> None:
        assert key_env_var(KeyType.MANAGEMENT) == "HONEYCLI_MANAGEMENT_KEY"

    def test_from_env(self, isolated_config, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HONEYCLI_INGEST_KEY", "from-env")
        assert get_key("default", KeyType.INGEST) == "from-env"

    def test_from_store(self, isolated_config) -> None:
        CredentialStore("prod").set(KeyType.CONFIG, "stored")
        assert get_key("prod", KeyType.CONFIG) == "stored"

    def test_env_shadows_store(self, isolated_config, monkeypatch: pytest.MonkeyPatch) -> None:
        CredentialStore("default").set(KeyType.CONFIG, "stored")
        monkeypatch.setenv("HONEYCLI_CONFIG_KEY", "from-env")
        assert get_key("default", KeyType.CONFIG) == "from-env"

    def test_store_is_per_profile(self, isolated_config) -> None:
        CredentialStore("prod").set(KeyType.CONFIG, "stored")
        with pytest.raises(AuthError):
            get_key("staging", KeyType.CONFIG)

    def test_missing(self, isolated_config) -> None:
        with pytest.raises(AuthError) as exc_info:
            get_key("default", KeyType.MANAGEMENT)
        assert str(exc_info.value) == (
            "no management key configured for profile 'default' "
            "(run honeycli auth login --key-type management)"
        )
        assert exc_info.value.exit_code == EXIT_AUTH_FAILURE


class TestApplyAuth:
    def _request(self) -> httpx.Request:
        return httpx.Request("GET", "https://api.honeycomb.io/1/auth")

    @pytest.mark.parametrize("key_type", [KeyType.CONFIG, KeyType.INGEST])
    def test_team_header(self, key_type: KeyType) -> None:
        request = self._request()
        apply_auth(request, key_type, "secret")
        assert request.headers[TEAM_HEADER] == "secret"
        assert "authorization" not in request.headers

    def test_bearer(self) -> None:
        request = self._request()
        apply_auth(request, KeyType.MANAGEMENT, "secret")
        assert request.headers["Authorization"] == "Bearer secret"
        assert TEAM_HEADER not in request.headers
