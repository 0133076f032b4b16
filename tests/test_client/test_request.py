"""Tests for request assembly."""

from __future__ import annotations

import json

import httpx
import pytest

from httpkit.client.request import build_request, merge_query
from httpkit.exceptions import EncodingError, InvalidRequestError, MalformedURLError


class TestBodylessMethods:
    @pytest.mark.parametrize("method", ["GET", "get", "DELETE", "delete"])
    def test_body_rejected(self, method: str) -> None:
        with pytest.raises(InvalidRequestError, match="must not carry a body"):
            build_request(method, "https://api.example.com/x", httpx.Headers(), body={"a": 1})

    def test_rejected_before_url_parsing(self) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            build_request("GET", "not a url", httpx.Headers(), body="x")
        assert not isinstance(exc_info.value, MalformedURLError)

    def test_get_without_body(self) -> None:
        request = build_request("get", "https://api.example.com/x", httpx.Headers())
        assert request.method == "GET"
        assert request.content == b""
        assert "content-type" not in request.headers


class TestContentType:
    def test_defaults_to_json_when_body_present(self) -> None:
        headers = httpx.Headers()
        request = build_request("POST", "https://api.example.com/users", headers, body={"a": 1})
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {"a": 1}

    def test_keeps_caller_content_type(self) -> None:
        headers = httpx.Headers({"Content-Type": "text/plain"})
        request = build_request("PUT", "https://api.example.com/notes/1", headers, body="hi")
        assert request.headers["content-type"] == "text/plain"
        assert request.content == b"hi"

    def test_no_content_type_without_body(self) -> None:
        request = build_request("POST", "https://api.example.com/ping", httpx.Headers())
        assert "content-type" not in request.headers

    def test_multipart_boundary_reaches_request(self) -> None:
        headers = httpx.Headers({"Content-Type": "multipart/form-data"})
        request = build_request("POST", "https://api.example.com/up", headers, body={"f": b"x"})
        assert "boundary=" in request.headers["content-type"]

    def test_encoding_errors_propagate(self) -> None:
        headers = httpx.Headers({"Content-Type": "application/x-www-form-urlencoded"})
        with pytest.raises(EncodingError):
            build_request("POST", "https://api.example.com/form", headers, body=[1, 2, 3])


class TestMergeQuery:
    def test_params_added_to_plain_url(self) -> None:
        url = merge_query("https://api.example.com/items", {"page": "1", "limit": "20"})
        assert url.params["page"] == "1"
        assert url.params["limit"] == "20"

    def test_params_merged_with_existing_query(self) -> None:
        url = merge_query("https://api.example.com/items?sort=asc&page=1", {"page": "3"})
        assert url.params["sort"] == "asc"
        assert url.params.get_list("page") == ["3"]

    def test_no_params_keeps_url(self) -> None:
        assert str(merge_query("https://api.example.com/a?b=c")) == "https://api.example.com/a?b=c"

    @pytest.mark.parametrize(
        "url",
        ["not a url", "/relative/path", "ftp://example.com/file", "https://"],
    )
    def test_malformed(self, url: str) -> None:
        with pytest.raises(MalformedURLError):
            merge_query(url, {"a": "1"})

    def test_malformed_is_invalid_request(self) -> None:
        with pytest.raises(InvalidRequestError):
            build_request("GET", "/users", httpx.Headers())
