"""Tests for bearer credential extraction."""

import pytest
from starlette.requests import Request

from app.infrastructure.notifications import (
    HTTP_CREDENTIAL_SOURCES,
    CredentialSource,
    extract_credential,
)


def _request(*, query: bytes = b"", headers: list[tuple[bytes, bytes]] | None = None) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "query_string": query,
            "headers": headers or [],
        }
    )


def test_query_token_takes_precedence_over_header():
    request = _request(query=b"token=from-query", headers=[(b"authorization", b"Bearer from-header")])

    lookup = extract_credential(request)

    assert lookup.found
    assert lookup.token == "from-query"
    assert lookup.source is CredentialSource.QUERY_TOKEN


def test_auth_query_parameter_is_second_source():
    lookup = extract_credential(_request(query=b"auth=abc"))

    assert lookup.token == "abc"
    assert lookup.source is CredentialSource.QUERY_AUTH


@pytest.mark.parametrize("header", [b"Bearer abc", b"bearer abc", b"  Bearer   abc  "])
def test_bearer_header_is_parsed(header):
    lookup = extract_credential(_request(headers=[(b"authorization", header)]))

    assert lookup.token == "abc"
    assert lookup.source is CredentialSource.AUTHORIZATION_HEADER


def test_non_bearer_header_is_ignored():
    lookup = extract_credential(_request(headers=[(b"authorization", b"Basic dXNlcjpwYXNz")]))

    assert not lookup.found
    assert lookup.source is None


def test_cookie_is_last_source():
    lookup = extract_credential(_request(headers=[(b"cookie", b"access_token=cookie-token")]))

    assert lookup.token == "cookie-token"
    assert lookup.source is CredentialSource.COOKIE


def test_blank_values_count_as_absent():
    lookup = extract_credential(_request(query=b"token=&auth=%20"))

    assert not lookup.found


def test_http_sources_skip_query_parameters():
    request = _request(query=b"token=from-query")

    assert not extract_credential(request, HTTP_CREDENTIAL_SOURCES).found
