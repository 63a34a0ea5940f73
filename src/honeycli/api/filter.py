"""Apply a jq expression to a JSON response body.

The expression language itself is provided by the :mod:`jq` bindings. This
module only fixes the contract around it: compile once, decode the input as
a single JSON document, and emit one line per result -- strings unquoted,
everything else as compact JSON.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import jq

from honeycli.exceptions import FilterError


def filter_json(body: bytes, expression: str, write_line: Callable[[str], None]) -> int:
    """Run *expression* over *body* and pass each result line to *write_line*.

    Results are produced lazily. When evaluation fails part way, lines
    already handed to *write_line* stay written.

    Args:
        body: A single JSON document.
        expression: The jq program.
        write_line: Sink for each output line (without trailing newline).

    Returns:
        The number of lines written.

    Raises:
        FilterError: If the expression does not compile, the body is not
            JSON, or evaluation fails.
    """
    try:
        program = jq.compile(expression)
    except ValueError as exc:
        raise FilterError(f"parsing jq expression '{expression}': {exc}") from exc

    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise FilterError(f"decoding JSON for jq: {exc}") from exc

    written = 0
    results = iter(program.input_value(data))
    while True:
        try:
            value = next(results)
        except StopIteration:
            break
        except ValueError as exc:
            raise FilterError(f"jq: {exc} (expression '{expression}')") from exc
        write_line(format_result(value))
        written += 1
    return written


def format_result(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
