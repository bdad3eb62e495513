"""Unit tests for rate limit keying and the 429 response."""

import json

import pytest
from starlette.requests import Request

from core.rate_limit import limiter, rate_limit_exceeded_handler


def _request(client_host: str, authorization: str | None = None, path: str = "/") -> Request:
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": path,
            "headers": headers,
            "client": (client_host, 50000),
            "query_string": b"",
        }
    )


class TestRateLimitKey:
    def test_bearer_header_does_not_change_bucket(self) -> None:
        """Rotating made-up tokens from one client must not buy a fresh budget."""
        key = limiter._key_func

        first = key(_request("203.0.113.7", "Bearer not-a-jwt-aaaa"))
        second = key(_request("203.0.113.7", "Bearer not-a-jwt-bbbb"))
        anonymous = key(_request("203.0.113.7"))

        assert first == second == anonymous == "203.0.113.7"

    def test_distinct_clients_get_distinct_buckets(self) -> None:
        key = limiter._key_func

        assert key(_request("203.0.113.7")) != key(_request("198.51.100.2"))


class TestRateLimitExceededHandler:
    @pytest.mark.asyncio
    async def test_returns_standard_error_body(self) -> None:
        response = await rate_limit_exceeded_handler(
            _request("203.0.113.7", path="/api/v1/invitations/abc"), Exception("10 per 1 minute")
        )

        assert response.status_code == 429
        body = json.loads(response.body)
        assert body["error_code"] == "RATE_LIMIT_EXCEEDED"
        assert body["details"]["path"] == "/api/v1/invitations/abc"
