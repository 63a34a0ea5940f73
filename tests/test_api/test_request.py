"""Tests for request building, header parsing, and pagination links."""

from __future__ import annotations

import json

import httpx
import pytest

from honeycli.api.request import (
    build_request,
    format_response_headers,
    join_url,
    next_page_url,
    parse_headers,
    query_value,
)
from honeycli.exceptions import InvalidUsageError

BASE = "https://api.honeycomb.io"


class TestJoinUrl:
    @pytest.mark.parametrize(
        "base, path",
        [
            ("https://api.honeycomb.io", "/1/auth"),
            ("https://api.honeycomb.io/", "/1/auth"),
            ("https://api.honeycomb.io/", "1/auth"),
            ("https://api.honeycomb.io", "1/auth"),
        ],
    )
    def test_exactly_one_slash(self, base: str, path: str) -> None:
        assert join_url(base, path) == "https://api.honeycomb.io/1/auth"

    def test_empty_base(self) -> None:
        assert join_url("", "https://x.test/1/a") == "https://x.test/1/a"


class TestBuildRequest:
    def test_get_without_fields(self) -> None:
        request = build_request("GET", BASE, "/1/auth")
        assert request.method == "GET"
        assert str(request.url) == "https://api.honeycomb.io/1/auth"
        assert request.content == b""
        assert "content-type" not in request.headers

    def test_get_fields_become_query(self) -> None:
        request = build_request("GET", BASE, "/1/columns/ds", {"key_name": "duration_ms", "limit": 10})
        assert request.url.params["key_name"] == "duration_ms"
        assert request.url.params["limit"] == "10"
        assert request.content == b""

    @pytest.mark.parametrize("method", ["HEAD", "DELETE"])
    def test_other_query_methods(self, method: str) -> None:
        request = build_request(method, BASE, "/1/boards/b1", {"force": True})
        assert request.url.params["force"] == "true"

    def test_existing_query_preserved(self) -> None:
        request = build_request("GET", BASE, "/1/columns/ds?a=1", {"b": "2"})
        assert request.url.params["a"] == "1"
        assert request.url.params["b"] == "2"

    def test_post_fields_become_json_body(self) -> None:
        request = build_request("POST", BASE, "/1/boards", {"name": "My Board"})
        assert json.loads(request.content) == {"name": "My Board"}
        assert request.headers["content-type"] == "application/json"

    def test_v2_body_gets_jsonapi_content_type(self) -> None:
        request = build_request("POST", BASE, "/2/teams/t/environments", {"data": {"type": "environments"}})
        assert request.headers["content-type"] == "application/vnd.api+json"

    def test_raw_body_used_verbatim(self) -> None:
        request = build_request("POST", BASE, "/1/events/ds", {"ignored": "x"}, b'{"a":1}')
        assert request.content == b'{"a":1}'
        assert request.headers["content-type"] == "application/json"
        assert "ignored" not in str(request.url)

    def test_header_override_wins(self) -> None:
        request = build_request(
            "POST", BASE, "/1/boards", {"a": 1}, headers=["Content-Type: text/plain", "X-Trace:  abc "]
        )
        assert request.headers["content-type"] == "text/plain"
        assert request.headers["x-trace"] == "abc"

    def test_repeated_header_last_value_wins(self) -> None:
        request = build_request("GET", BASE, "/1/auth", headers=["X-Trace: first", "x-trace: second"])
        assert request.headers.get_list("x-trace") == ["second"]

    def test_absolute_url_ignores_base(self) -> None:
        request = build_request("GET", BASE, "https://eu.example.test/1/columns/ds?cursor=x")
        assert str(request.url) == "https://eu.example.test/1/columns/ds?cursor=x"

    def test_bad_header_raises(self) -> None:
        with pytest.raises(InvalidUsageError, match=r"invalid header 'nocolon' \(must be key:value\)"):
            build_request("GET", BASE, "/1/auth", headers=["nocolon"])


class TestParseHeaders:
    def test_splits_on_first_colon(self) -> None:
        assert parse_headers(["X-Url: https://a.test:8080"]) == [("X-Url", "https://a.test:8080")]

    def test_empty_list(self) -> None:
        assert parse_headers([]) == []


class TestQueryValue:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("s", "s"),
            (True, "true"),
            (False, "false"),
            (None, "null"),
            (3, "3"),
            (2.5, "2.5"),
            (1.0, "1"),
            (-3.0, "-3"),
            (100.0, "100"),
            (123456.5, "123456.5"),
            (1e6, "1e+06"),
            (1.5e-7, "1.5e-07"),
            (0.0001, "0.0001"),
            (0.0, "0"),
            ({"a": 1}, '{"a":1}'),
            ([1, 2], "[1,2]"),
        ],
    )
    def test_render(self, value: object, expected: str) -> None:
        assert query_value(value) == expected


def _response(headers: dict[str, str], url: str = "https://api.honeycomb.io/1/columns/ds") -> httpx.Response:
    return httpx.Response(200, headers=headers, request=httpx.Request("GET", url))


class TestNextPageUrl:
    def test_absolute_next(self) -> None:
        response = _response({"Link": '<https://api.honeycomb.io/1/columns/ds?page=2>; rel="next"'})
        assert next_page_url(response) == "https://api.honeycomb.io/1/columns/ds?page=2"

    def test_relative_next_resolved_against_request(self) -> None:
        response = _response({"Link": '</1/columns/ds?page=2>; rel="next"'})
        assert next_page_url(response) == "https://api.honeycomb.io/1/columns/ds?page=2"

    def test_picks_next_among_several(self) -> None:
        response = _response(
            {
                "Link": '<https://a.test/p1>; rel="prev", <https://a.test/p3>; rel="next"',
            }
        )
        assert next_page_url(response) == "https://a.test/p3"

    def test_no_link_header(self) -> None:
        assert next_page_url(_response({})) is None

    def test_no_next_relation(self) -> None:
        assert next_page_url(_response({"Link": '<https://a.test/p1>; rel="prev"'})) is None


class TestFormatResponseHeaders:
    def test_status_line_and_headers(self) -> None:
        response = httpx.Response(
            404,
            headers=[("Content-Type", "application/json"), ("X-Request-Id", "r1")],
            request=httpx.Request("GET", "https://a.test/"),
        )
        text = format_response_headers(response)
        lines = text.split("\n")
        assert lines[0] == "HTTP/1.1 404 Not Found"
        assert "Content-Type: application/json" in lines
        assert "X-Request-Id: r1" in lines
        assert text.endswith("\n\n")
