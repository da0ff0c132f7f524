"""Tests for applying credentials to HTTP requests."""

from __future__ import annotations

import pytest

from tool_handle.credential import CredentialObject, HttpCredentialObject, coerce_credential
from tool_handle.http.credential import apply_credentials, apply_http_credentials
from tool_handle.http.message import HttpRequest
from tool_handle.infra.errors import InvalidCookieNameError


def _request(url: str = "https://api.example.com/items", **headers: str) -> HttpRequest:
    return HttpRequest(method="GET", url=url, headers=headers)


class TestApplyHttpCredentials:
    def test_headers_set(self) -> None:
        request = apply_http_credentials(
            _request(), HttpCredentialObject(headers={"Authorization": "Bearer t0k"})
        )
        assert request.headers["authorization"] == "Bearer t0k"

    def test_headers_overwrite_existing(self) -> None:
        request = apply_http_credentials(
            _request(authorization="Basic old"),
            HttpCredentialObject(headers={"Authorization": "Bearer new"}),
        )
        assert request.headers.get_list("authorization") == ["Bearer new"]

    def test_query_appended(self) -> None:
        request = apply_http_credentials(
            _request("https://api.example.com/items?k=v1"),
            HttpCredentialObject(query={"k": "v2", "api_key": "s3cret"}),
        )
        assert request.url == "https://api.example.com/items?k=v1&k=v2&api_key=s3cret"

    def test_cookie_value_encoded(self) -> None:
        request = apply_http_credentials(_request(), HttpCredentialObject(cookies={"session": "ab c"}))
        assert request.headers["cookie"] == "session=ab%20c"

    def test_cookies_appended_to_existing_header(self) -> None:
        request = apply_http_credentials(
            _request(cookie="a=1"), HttpCredentialObject(cookies={"b": "2", "c": "x;y"})
        )
        assert request.headers["cookie"] == "a=1; b=2; c=x%3By"

    def test_invalid_cookie_name(self) -> None:
        with pytest.raises(InvalidCookieNameError) as exc_info:
            apply_http_credentials(_request(), HttpCredentialObject(cookies={"bad name": "v"}))
        assert exc_info.value.cookie_name == "bad name"
        assert exc_info.value.code == "INVALID_COOKIE_NAME"

    @pytest.mark.parametrize("name", ['a"b', "a,b", "a;b", "a\\b", "", "café"])
    def test_non_token_names_rejected(self, name: str) -> None:
        with pytest.raises(InvalidCookieNameError):
            apply_http_credentials(_request(), HttpCredentialObject(cookies={name: "v"}))

    def test_original_request_not_mutated(self) -> None:
        original = _request("https://api.example.com/items", cookie="a=1")
        apply_http_credentials(
            original,
            HttpCredentialObject(headers={"X-Key": "k"}, query={"q": "1"}, cookies={"b": "2"}),
        )
        assert original.url == "https://api.example.com/items"
        assert original.headers["cookie"] == "a=1"
        assert "x-key" not in original.headers

    def test_empty_credentials_keep_request_fields(self) -> None:
        original = _request("https://api.example.com/items", accept="application/json")
        request = apply_http_credentials(original, HttpCredentialObject())
        assert request.url == original.url
        assert request.headers == original.headers


class TestApplyCredentials:
    def test_none_returns_request(self) -> None:
        original = _request()
        assert apply_credentials(original, None) is original

    def test_other_scheme_ignored(self) -> None:
        original = _request()
        credentials = CredentialObject(scheme="oauth2", token="t")
        assert apply_credentials(original, credentials) is original

    def test_http_scheme_applied(self) -> None:
        request = apply_credentials(_request(), HttpCredentialObject(headers={"X-Key": "k"}))
        assert request.headers["x-key"] == "k"


class TestCoerceCredential:
    def test_http_mapping(self) -> None:
        credentials = coerce_credential({"scheme": "http", "headers": {"X-Key": "k"}})
        assert isinstance(credentials, HttpCredentialObject)
        assert credentials.headers == {"X-Key": "k"}

    def test_other_mapping(self) -> None:
        credentials = coerce_credential({"scheme": "apikey", "value": "v"})
        assert type(credentials) is CredentialObject
        assert credentials.model_extra == {"value": "v"}

    def test_passthrough(self) -> None:
        credentials = HttpCredentialObject()
        assert coerce_credential(credentials) is credentials
        assert coerce_credential(None) is None

    def test_generic_object_with_http_scheme_upgraded(self) -> None:
        credentials = coerce_credential(
            CredentialObject(scheme="http", headers={"Authorization": "t"})
        )
        assert isinstance(credentials, HttpCredentialObject)
        assert credentials.headers == {"Authorization": "t"}

    def test_generic_object_with_other_scheme_kept(self) -> None:
        credentials = CredentialObject(scheme="oauth2", token="t")
        assert coerce_credential(credentials) is credentials

    @pytest.mark.parametrize("value", [{}, {"scheme": None}, {"scheme": 3, "headers": {"X": "y"}}])
    def test_missing_scheme_yields_none(self, value) -> None:
        assert coerce_credential(value) is None
