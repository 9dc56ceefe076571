"""Tests for fetchkit.models -- request descriptors, validation and cache entries."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest
from pydantic import ValidationError

from fetchkit.exceptions import InvalidRequestError
from fetchkit.models import (
    CACHED_AT_EXTENSION,
    FROM_CACHE_EXTENSION,
    CacheEntry,
    FetchRequest,
    HTTPMethod,
    prepare_request,
    validate_request,
)


URL = "https://jsonplaceholder.typicode.com/users/1"


class TestFetchRequest:
    def test_defaults_to_get(self) -> None:
        req = FetchRequest(url=URL)
        assert req.method == HTTPMethod.GET
        assert req.headers == {}
        assert req.params == {}
        assert req.body is None

    def test_is_frozen(self) -> None:
        req = FetchRequest(url=URL)
        with pytest.raises(ValidationError):
            req.url = "https://example.com"  # type: ignore[misc]

    def test_coerce_wraps_string(self) -> None:
        assert FetchRequest.coerce(URL) == FetchRequest(url=URL)

    def test_coerce_returns_request_unchanged(self) -> None:
        req = FetchRequest(method=HTTPMethod.DELETE, url=URL)
        assert FetchRequest.coerce(req) is req

    def test_with_json_sets_body_and_content_type(self) -> None:
        req = FetchRequest.with_json("post", "https://example.com/posts", {"title": "hi"})
        assert req.method == HTTPMethod.POST
        assert req.headers["Content-Type"] == "application/json"
        assert json.loads(req.body) == {"title": "hi"}

    def test_with_json_keeps_extra_headers(self) -> None:
        req = FetchRequest.with_json(
            HTTPMethod.PUT, URL, {}, headers={"Authorization": "Bearer t"}
        )
        assert req.headers == {"Content-Type": "application/json", "Authorization": "Bearer t"}

    def test_to_httpx_merges_params(self) -> None:
        req = FetchRequest(url="https://example.com/posts?a=1", params={"userId": "3"})
        http_request = req.to_httpx()
        assert http_request.method == "GET"
        assert http_request.url.params["a"] == "1"
        assert http_request.url.params["userId"] == "3"


class TestCanonicalForm:
    def test_param_order_does_not_matter(self) -> None:
        a = FetchRequest(url="https://example.com/posts?b=2&a=1")
        b = FetchRequest(url="https://example.com/posts", params={"a": "1", "b": "2"})
        assert a.canonical_url() == "https://example.com/posts?a=1&b=2"
        assert a.canonical_key() == b.canonical_key()

    def test_reserved_characters_in_values_are_encoded(self) -> None:
        packed = FetchRequest(url="https://example.com/search", params={"a": "1&b=2"})
        split = FetchRequest(url="https://example.com/search", params={"a": "1", "b": "2"})
        assert packed.canonical_url() == "https://example.com/search?a=1%26b%3D2"
        assert packed.canonical_key() != split.canonical_key()

    def test_header_values_cannot_spoof_other_headers(self) -> None:
        a = FetchRequest(url=URL, headers={"Accept": "x", "Authorization": "y"})
        b = FetchRequest(url=URL, headers={"Accept": 'x","authorization:y'})
        assert a.canonical_key() != b.canonical_key()

    def test_method_is_part_of_key(self) -> None:
        get = FetchRequest(url=URL)
        delete = FetchRequest(method=HTTPMethod.DELETE, url=URL)
        assert get.canonical_key() != delete.canonical_key()

    def test_relevant_headers_are_case_insensitive(self) -> None:
        a = FetchRequest(url=URL, headers={"Accept": "application/json"})
        b = FetchRequest(url=URL, headers={"accept": "application/json"})
        assert a.canonical_key() == b.canonical_key()

    def test_authorization_separates_entries(self) -> None:
        a = FetchRequest(url=URL, headers={"Authorization": "Bearer one"})
        b = FetchRequest(url=URL, headers={"Authorization": "Bearer two"})
        assert a.canonical_key() != b.canonical_key()

    def test_unrelated_headers_are_ignored(self) -> None:
        a = FetchRequest(url=URL, headers={"X-Trace-Id": "1"})
        b = FetchRequest(url=URL, headers={"X-Trace-Id": "2"})
        assert a.canonical_key() == b.canonical_key()


class TestValidation:
    @pytest.mark.parametrize(
        "url",
        ["/users/1", "users/1", "ftp://example.com/file", "mailto:phil@example.com", "http://"],
    )
    def test_rejects_non_absolute_http_urls(self, url: str) -> None:
        with pytest.raises(InvalidRequestError):
            validate_request(FetchRequest(url=url))

    def test_rejects_non_ascii_header(self) -> None:
        with pytest.raises(InvalidRequestError, match="cannot be encoded"):
            validate_request(FetchRequest(url=URL, headers={"X-Name": "Zoë"}))

    def test_accepts_http_and_https(self) -> None:
        validate_request(FetchRequest(url="http://localhost:8080/x"))
        validate_request(FetchRequest(url=URL))

    def test_prepare_request_from_string(self) -> None:
        assert prepare_request(URL).url == URL

    def test_prepare_request_rejects_relative(self) -> None:
        with pytest.raises(InvalidRequestError):
            prepare_request("/users/1")

    def test_invalid_request_exit_code(self) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            prepare_request("nope")
        assert exc_info.value.exit_code == 2


class TestCacheEntry:
    def _response(self, **kwargs) -> httpx.Response:
        return httpx.Response(200, json={"id": 1, "name": "Phil"}, **kwargs)

    def test_from_response_snapshot(self) -> None:
        req = FetchRequest(url=URL)
        received = datetime(2024, 1, 1, tzinfo=timezone.utc)
        entry = CacheEntry.from_response(req, self._response(), received_at=received)

        assert entry.key == req.canonical_key()
        assert entry.url == URL
        assert entry.status_code == 200
        assert json.loads(entry.content) == {"id": 1, "name": "Phil"}
        assert entry.received_at == received

    def test_wire_headers_are_not_stored(self) -> None:
        response = self._response(headers={"Content-Encoding": "identity", "ETag": '"v1"'})
        entry = CacheEntry.from_response(FetchRequest(url=URL), response)
        names = {name.lower() for name, _ in entry.headers}
        assert "etag" in names
        assert "content-encoding" not in names
        assert "content-length" not in names

    def test_to_response_is_marked(self) -> None:
        req = FetchRequest(url=URL)
        entry = CacheEntry.from_response(req, self._response())
        response = entry.to_response(req)

        assert response.status_code == 200
        assert response.json() == {"id": 1, "name": "Phil"}
        assert response.extensions[FROM_CACHE_EXTENSION] is True
        assert response.extensions[CACHED_AT_EXTENSION] == entry.received_at
        assert str(response.request.url) == URL

    def test_dump_and_validate(self) -> None:
        req = FetchRequest(url=URL)
        entry = CacheEntry.from_response(req, self._response())
        assert CacheEntry.model_validate(entry.model_dump()) == entry
