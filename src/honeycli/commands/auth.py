"""Auth commands -- manage the keys stored for a profile.

Provides the ``honeycli auth`` sub-command group. Each profile can hold one
key per :class:`~honeycli.models.KeyType`; keys are kept in the
:class:`~honeycli.auth.credential_store.CredentialStore`, never in the
global config file.

Typical workflow::

    honeycli auth login --key-type config        # paste the key at the prompt
    echo "$SECRET" | honeycli auth login --key-type management --key-id hcamk_id
    honeycli auth status
    honeycli auth profile list
    honeycli auth logout --key-type ingest
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Any, Optional

import typer

from honeycli.output import get_output, info, success, suggest, warning

if TYPE_CHECKING:
    from honeycli.auth.verify import KeyStatus
    from honeycli.config import ResolvedConfig
    from honeycli.models import KeyType


auth_app = typer.Typer(no_args_is_help=True)
profile_app = typer.Typer(no_args_is_help=True)
auth_app.add_typer(profile_app, name="profile", help="Inspect authentication profiles.")


def _resolve(ctx: typer.Context) -> ResolvedConfig:
    from honeycli.config import resolve_config

    obj: dict[str, Any] = ctx.obj or {}
    return resolve_config(obj.get("profile"), obj.get("api_url"))


@auth_app.command("login")
def auth_login(
    ctx: typer.Context,
    key_type: str = typer.Option(
        ..., "--key-type", help="Key type to store: config, ingest, management."
    ),
    key_id: Optional[str] = typer.Option(
        None, "--key-id", help="Key ID. The stored key becomes <key-id>:<secret>."
    ),
    key: Optional[str] = typer.Option(
        None, "--key", help="The key (or its secret with --key-id). Read from stdin or a prompt when omitted."
    ),
    verify: bool = typer.Option(
        True, "--verify/--no-verify", help="Check the key against the API before storing it."
    ),
) -> None:
    """Store a key for the active profile.

    When ``--key`` is omitted the key is read from stdin if stdin is piped,
    otherwise from a hidden interactive prompt. Surrounding whitespace is
    stripped. With ``--key-id`` the stored value is ``<key-id>:<secret>``,
    the form management keys are issued in.

    Unless ``--no-verify`` is given, the key is sent to ``/1/auth`` (or
    ``/2/auth`` for management keys) first and nothing is stored when the
    API rejects it.

    Raises:
        InvalidUsageError: If the key type is unknown or the key is empty.
        AuthError: If the API reports the key as invalid.
        HoneycliError: If verification fails with any other status.

    Example::

        honeycli auth login --key-type config --key hcaik_...
        honeycli --profile prod auth login --key-type management --key-id hcamk_id < secret.txt
    """
    from honeycli.auth import CredentialStore, parse_key_type
    from honeycli.exceptions import InvalidUsageError

    kt = parse_key_type(key_type)
    resolved = _resolve(ctx)

    if key is None:
        if sys.stdin.isatty():
            label = "secret" if key_id else "key"
            key = typer.prompt(f"{kt.value.capitalize()} {label}", hide_input=True)
        else:
            key = sys.stdin.read()
    key = key.strip()
    if not key:
        raise InvalidUsageError("no key provided")
    if key_id is not None:
        key_id = key_id.strip()
        if not key_id:
            raise InvalidUsageError("--key-id must not be empty")
        key = f"{key_id}:{key}"

    status = _check_key(resolved, kt, key) if verify else None

    CredentialStore(resolved.profile).set(kt, key)
    success(f"Stored {kt.value} key for profile '{resolved.profile}'.")
    if status is not None:
        identity = _identity(status)
        info(f"Authenticated as {identity}." if identity else "Key verified.")
    else:
        from honeycli.auth.verify import auth_path

        info("Key was not verified.")
        suggest(f"Test it: honeycli api {auth_path(kt)}")


@auth_app.command("logout")
def auth_logout(
    ctx: typer.Context,
    key_type: Optional[str] = typer.Option(
        None, "--key-type", help="Remove only this key type (default: all)."
    ),
) -> None:
    """Remove stored keys for the active profile.

    Example::

        honeycli auth logout
        honeycli auth logout --key-type ingest
    """
    from honeycli.auth import CredentialStore, parse_key_type

    profile = _resolve(ctx).profile
    store = CredentialStore(profile)

    if key_type:
        kt = parse_key_type(key_type)
        if store.delete(kt):
            success(f"Removed {kt.value} key for profile '{profile}'.")
        else:
            info(f"No {kt.value} key stored for profile '{profile}'.")
        return

    if not store.key_types():
        info(f"No keys stored for profile '{profile}'.")
        return
    store.clear()
    success(f"Removed all keys for profile '{profile}'.")


@auth_app.command("status")
def auth_status(
    ctx: typer.Context,
    offline: bool = typer.Option(
        False, "--offline", help="Only report where keys come from; skip API verification."
    ),
) -> None:
    """Show which keys are available to the active profile and whether they work.

    A key set through ``HONEYCLI_<TYPE>_KEY`` shadows the stored one and is
    reported as coming from the environment. Every available key is checked
    against the API unless ``--offline`` is given.

    Example::

        honeycli auth status
        honeycli --json auth status --offline
    """
    import os

    from honeycli.auth import CredentialStore
    from honeycli.auth.keys import key_env_var
    from honeycli.models import KeyType

    resolved = _resolve(ctx)
    store = CredentialStore(resolved.profile)

    available: dict[KeyType, str] = {}
    rows: dict[KeyType, list[str]] = {}
    for kt in KeyType:
        env_var = key_env_var(kt)
        entry = store.entry(kt)
        if os.environ.get(env_var):
            source = f"env:{env_var}"
            available[kt] = os.environ[env_var]
        elif entry is not None:
            source = "store"
            available[kt] = entry.credential
        else:
            source = "-"
        stored_at = entry.created_at.isoformat(timespec="seconds") if entry else "-"
        state = "stored" if kt in available else "-"
        rows[kt] = [kt.value, source, stored_at, state, "-", "-"]

    if available and not offline:
        from honeycli.auth.verify import verify_key
        from honeycli.client import SyncClient

        with SyncClient(resolved.request) as client:
            for kt, value in available.items():
                result = verify_key(client, resolved.api_url, kt, value)
                state = result.status
                if result.error:
                    state = f"{state} ({result.error})"
                rows[kt][3:] = [
                    state,
                    _identity(result) or "-",
                    result.key_id or "-",
                ]
                if result.status == "invalid":
                    warning(f"The {kt.value} key for profile '{resolved.profile}' was rejected.")

    get_output().print_table(
        ["Key Type", "Source", "Stored At", "Status", "Identity", "Key ID"],
        list(rows.values()),
        title=f"Keys for profile '{resolved.profile}'",
    )
    if not available:
        suggest("Add one: honeycli auth login --key-type config")


@profile_app.command("list")
def profile_list(ctx: typer.Context) -> None:
    """List profiles that have stored keys or a configured team.

    The active profile is listed first and marked with ``*``; the rest
    follow in name order.

    Example::

        honeycli auth profile list
        honeycli --json auth profile list
    """
    from honeycli.auth import CredentialStore, stored_profiles

    resolved = _resolve(ctx)
    configured = resolved.config.profiles

    others = (set(configured) | set(stored_profiles())) - {resolved.profile}
    rows: list[list[str]] = []
    for name in [resolved.profile, *sorted(others)]:
        keys = [kt.value for kt in CredentialStore(name).key_types()]
        settings = configured.get(name)
        team = settings.team if settings is not None else None
        if not keys and not team:
            continue
        rows.append([
            name,
            "*" if name == resolved.profile else "",
            ", ".join(keys) or "-",
            team or "-",
        ])

    if not rows:
        info("No profiles configured.")
        suggest("Add one: honeycli auth login --key-type config")
        return
    get_output().print_table(["Profile", "Active", "Keys", "Team"], rows, title="Profiles")


def _check_key(resolved: ResolvedConfig, key_type: KeyType, key: str) -> KeyStatus:
    """Verify *key* online, raising when the API does not accept it."""
    from honeycli.auth.verify import auth_path, verify_key
    from honeycli.client import SyncClient
    from honeycli.exceptions import AuthError, HoneycliError

    with SyncClient(resolved.request) as client:
        status = verify_key(client, resolved.api_url, key_type, key)
    if status.status == "invalid":
        raise AuthError(f"invalid {key_type.value} key (rejected by {auth_path(key_type)})")
    if status.status == "error":
        raise HoneycliError(f"verifying key: {status.error}")
    return status


def _identity(status: KeyStatus) -> str:
    """Who the API says a key belongs to: ``team (environment)`` or the key's name."""
    if status.team:
        if status.environment:
            return f"{status.team} ({status.environment})"
        return status.team
    if status.name:
        return f"key '{status.name}'"
    return ""
