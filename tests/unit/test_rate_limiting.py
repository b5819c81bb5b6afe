"""Tests for rate limiting behavior.

Security: Tests for API abuse prevention via rate limiting.
"""

import json
import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock

from starlette.requests import Request as StarletteRequest

from urbanease.core.rate_limiting import _rate_limit_key_func, rate_limit_exceeded_handler
from urbanease.models.user import UserRole
from tests.conftest import bearer_headers

_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


def _request(headers: dict[str, str] | None = None) -> StarletteRequest:
    raw_headers = [
        (name.lower().encode(), value.encode())
        for name, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/auth/login",
        "headers": raw_headers,
        "client": ("203.0.113.7", 1234),
    }
    return StarletteRequest(scope)


class TestRateLimitKey:
    def test_anonymous_request_keyed_by_ip(self):
        assert _rate_limit_key_func(_request()) == "unauth:203.0.113.7"

    def test_invalid_bearer_token_keyed_by_ip(self):
        request = _request({"Authorization": "Bearer garbage"})
        assert _rate_limit_key_func(request) == "unauth:203.0.113.7"

    def test_valid_bearer_token_keyed_by_user(self):
        user = SimpleNamespace(id=_USER_ID, email="a@x.com", role=UserRole.CUSTOMER)
        request = _request(bearer_headers(user))
        assert (
            _rate_limit_key_func(request)
            == "user:00000000-0000-0000-0000-000000000001"
        )


class TestRateLimitExceededHandler:
    """Tests for rate limit exceeded response format."""

    def test_returns_429_with_error_envelope(self):
        exc = MagicMock()
        exc.detail = "10 per 1 minute"

        response = rate_limit_exceeded_handler(_request(), exc)

        assert response.status_code == 429
        body = json.loads(response.body)
        assert body["success"] is False
        assert body["code"] == "RATE_LIMITED"

    def test_falls_back_to_60_second_retry_after(self):
        exc = MagicMock()
        exc.detail = "10 per 1 minute"

        response = rate_limit_exceeded_handler(_request(), exc)

        assert response.headers["Retry-After"] == "60"
