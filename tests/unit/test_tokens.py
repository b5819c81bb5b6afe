"""Tests for session and capability tokens.

Covers issue/verify round trips, the access/refresh separation, expiry,
tampering and capability token format.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from urbanease.core.config import settings
from urbanease.core.errors import InvalidTokenError
from urbanease.core.tokens import (
    generate_capability_token,
    issue_session_tokens,
    new_refresh_token_id,
    verify_access_token,
    verify_refresh_token,
)
from urbanease.models.user import UserRole

_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
_TOKEN_ID = "family-1"


@dataclass
class _Subject:
    id: uuid.UUID
    email: str
    role: UserRole


@pytest.fixture
def subject() -> _Subject:
    return _Subject(id=_USER_ID, email="a@x.com", role=UserRole.CUSTOMER)


class TestIssueAndVerify:
    """issue_session_tokens() followed by verify_*()."""

    def test_access_token_round_trips_identity(self, subject):
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID)

        payload = verify_access_token(tokens.access_token)

        assert payload.user_id == _USER_ID
        assert payload.email == "a@x.com"
        assert payload.role == "CUSTOMER"
        assert payload.token_id is None

    def test_refresh_token_carries_token_id(self, subject):
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID)

        payload = verify_refresh_token(tokens.refresh_token)

        assert payload.user_id == _USER_ID
        assert payload.token_id == _TOKEN_ID

    def test_expires_in_matches_access_ttl(self, subject):
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID)
        assert tokens.expires_in == settings.access_token_ttl_minutes * 60

    def test_issued_at_is_recorded(self, subject):
        now = datetime.now(UTC).replace(microsecond=0)
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID, now=now)
        assert verify_access_token(tokens.access_token).issued_at == now

    def test_is_deterministic_for_fixed_clock(self, subject):
        now = datetime.now(UTC)
        first = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID, now=now)
        second = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID, now=now)
        assert first == second


class TestTokenSeparation:
    """Access and refresh tokens are not interchangeable."""

    def test_refresh_token_rejected_as_access_token(self, subject):
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID)
        with pytest.raises(InvalidTokenError):
            verify_access_token(tokens.refresh_token)

    def test_access_token_rejected_as_refresh_token(self, subject):
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID)
        with pytest.raises(InvalidTokenError):
            verify_refresh_token(tokens.access_token)

    def test_access_and_refresh_tokens_differ(self, subject):
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID)
        assert tokens.access_token != tokens.refresh_token


class TestRejection:
    """Every failure surfaces as the same InvalidTokenError."""

    def test_expired_access_token_rejected(self, subject):
        long_ago = datetime.now(UTC) - timedelta(hours=1)
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID, now=long_ago)
        with pytest.raises(InvalidTokenError):
            verify_access_token(tokens.access_token)

    def test_refresh_token_outlives_access_token(self, subject):
        an_hour_ago = datetime.now(UTC) - timedelta(hours=1)
        tokens = issue_session_tokens(
            subject, refresh_token_id=_TOKEN_ID, now=an_hour_ago
        )
        assert verify_refresh_token(tokens.refresh_token).token_id == _TOKEN_ID

    def test_expired_refresh_token_rejected(self, subject):
        last_month = datetime.now(UTC) - timedelta(days=30)
        tokens = issue_session_tokens(
            subject, refresh_token_id=_TOKEN_ID, now=last_month
        )
        with pytest.raises(InvalidTokenError):
            verify_refresh_token(tokens.refresh_token)

    def test_tampered_token_rejected(self, subject):
        tokens = issue_session_tokens(subject, refresh_token_id=_TOKEN_ID)
        tampered = tokens.access_token[:-4] + (
            "AAAA" if not tokens.access_token.endswith("AAAA") else "BBBB"
        )
        with pytest.raises(InvalidTokenError):
            verify_access_token(tampered)

    def test_wrong_secret_rejected(self):
        now = datetime.now(UTC)
        forged = jwt.encode(
            {
                "sub": str(_USER_ID),
                "email": "a@x.com",
                "role": "ADMIN",
                "typ": "access",
                "aud": settings.jwt_audience,
                "iss": settings.jwt_issuer,
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            "not-the-real-secret-but-long-enough-for-hs256",
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            verify_access_token(forged)

    def test_wrong_audience_rejected(self):
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": str(_USER_ID),
                "email": "a@x.com",
                "role": "CUSTOMER",
                "typ": "access",
                "aud": "someone-else",
                "iss": settings.jwt_issuer,
                "iat": now,
                "exp": now + timedelta(minutes=5),
            },
            settings.jwt_access_secret.get_secret_value(),
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            verify_access_token(token)

    def test_missing_iat_rejected(self):
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": str(_USER_ID),
                "email": "a@x.com",
                "role": "CUSTOMER",
                "typ": "access",
                "aud": settings.jwt_audience,
                "iss": settings.jwt_issuer,
                "exp": now + timedelta(minutes=5),
            },
            settings.jwt_access_secret.get_secret_value(),
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            verify_access_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(InvalidTokenError):
            verify_access_token("not-a-jwt")

    def test_session_token_errors_are_401(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            verify_access_token("not-a-jwt")
        assert exc_info.value.status_code == 401


class TestCapabilityTokens:
    """Opaque verification/reset tokens."""

    def test_is_64_hex_chars(self):
        token = generate_capability_token()
        assert len(token) == 64
        int(token, 16)

    def test_is_unique(self):
        assert generate_capability_token() != generate_capability_token()

    def test_refresh_token_ids_are_unique(self):
        assert new_refresh_token_id() != new_refresh_token_id()
