"""Encode ``key=value`` command-line fields into a nested request payload.

Two flavours of field are accepted:

* **string fields** (``-f name=value``) -- the value is kept as text.
* **typed fields** (``-F name=value``) -- the value is coerced to a bool,
  ``None``, int, or float when it looks like one, and ``@path`` / ``@-``
  read the value from a file or stdin.

Keys use bracket paths to build structure::

    name=x         -> {"name": "x"}
    a[b][c]=x      -> {"a": {"b": {"c": "x"}}}
    tags[]=x       -> {"tags": ["x"]}   (repeat to append)

String fields are applied before typed fields; for any resolved key the
last writer wins.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, BinaryIO, Optional

from honeycli.exceptions import InvalidUsageError

# Plain decimal literals only: no underscores, whitespace, hex, nan or inf.
_INT_RE = re.compile(r"[+-]?\d+\Z")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\Z")


def parse_fields(
    raw: list[str],
    typed: list[str],
    stdin: Optional[BinaryIO] = None,
) -> dict[str, Any]:
    """Build a field mapping from string and typed ``key=value`` entries.

    Args:
        raw: String fields; values are stored verbatim.
        typed: Typed fields; values go through :func:`coerce_value`.
        stdin: Binary stream read by ``@-`` typed values.

    Returns:
        The nested field mapping (empty when no fields were given).

    Raises:
        InvalidUsageError: If an entry has no ``=`` or a ``@file`` value
            cannot be read.
    """
    result: dict[str, Any] = {}

    for entry in raw:
        key, value = _split_field(entry)
        set_field(result, key, value)

    for entry in typed:
        key, value = _split_field(entry)
        try:
            coerced = coerce_value(value, stdin)
        except InvalidUsageError as exc:
            raise InvalidUsageError(f"field '{key}': {exc}") from exc
        set_field(result, key, coerced)

    return result


def _split_field(entry: str) -> tuple[str, str]:
    key, sep, value = entry.partition("=")
    if not sep:
        raise InvalidUsageError(f"invalid field '{entry}' (must be key=value)")
    return key, value


def set_field(target: dict[str, Any], key: str, value: Any) -> None:
    """Assign *value* in *target* at the bracket path *key*.

    ``name[sub]`` creates (or reuses) a nested mapping at ``name`` and
    recurses with ``sub`` plus whatever follows the closing bracket.
    ``name[]`` appends to a list at ``name``. A ``[`` without a matching
    ``]`` makes the whole key literal.
    """
    bracket = key.find("[")
    if bracket < 0:
        target[key] = value
        return

    name, rest = key[:bracket], key[bracket:]
    close = rest.find("]")
    if close < 0:
        target[key] = value
        return

    inner = rest[1:close]
    if not inner:
        existing = target.get(name)
        items = existing if isinstance(existing, list) else []
        items.append(value)
        target[name] = items
        return

    nested = target.get(name)
    if not isinstance(nested, dict):
        nested = {}
        target[name] = nested
    set_field(nested, inner + rest[close + 1:], value)


def coerce_value(value: str, stdin: Optional[BinaryIO] = None) -> Any:
    """Coerce a typed-field value.

    Tried in order: ``true``/``false``, ``null``, ``@`` file reference,
    integer, float. Anything else stays a string.
    """
    if value == "true":
        return True
    if value == "false":
        return False
    if value == "null":
        return None

    if value.startswith("@"):
        return read_file_value(value[1:], stdin)

    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value):
        return float(value)

    return value


def read_file_value(path: str, stdin: Optional[BinaryIO] = None) -> str:
    """Read the full contents of *path*, or of *stdin* when *path* is ``-``.

    Raises:
        InvalidUsageError: If the file cannot be opened or read, or stdin is
            unavailable.
    """
    if path == "-":
        if stdin is None:
            raise InvalidUsageError("reading @-: stdin is not available")
        try:
            data = stdin.read()
        except OSError as exc:
            raise InvalidUsageError(f"reading @-: {exc}") from exc
    else:
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise InvalidUsageError(f"reading @{path}: {exc}") from exc

    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
