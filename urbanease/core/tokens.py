"""Session and capability token helpers.

Two kinds of tokens with different trust models:

- Session tokens (access + refresh) are signed, self-describing JWTs. They
  are verified without a database round trip. Access and refresh tokens
  use distinct secrets, distinct lifetimes and a ``typ`` claim so one can
  never be presented as the other.
- Capability tokens (email verification, password reset) are opaque random
  strings. They carry no claims; all authority comes from the server-side
  lookup against the stored value, which makes them single-use.
"""

import secrets
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

import jwt

from urbanease.core.config import settings
from urbanease.core.errors import InvalidTokenError

_ALGORITHM = "HS256"
_ACCESS_TYPE = "access"
_REFRESH_TYPE = "refresh"

# Capability tokens: 32 random bytes, hex encoded (64 chars)
_CAPABILITY_TOKEN_BYTES = 32


class TokenSubject(Protocol):
    """Anything with the identity fields encoded into session tokens."""

    id: uuid.UUID
    email: str
    role: str


@dataclass(frozen=True)
class TokenPayload:
    """Claims recovered from a verified session token.

    Attributes:
        user_id: Identity UUID (``sub`` claim).
        email: Identity email at issuance time.
        role: Identity role at issuance time.
        issued_at: ``iat`` claim as a UTC datetime.
        token_id: ``jti`` claim (refresh tokens only).
    """

    user_id: uuid.UUID
    email: str
    role: str
    issued_at: datetime
    token_id: str | None = None


@dataclass(frozen=True)
class SessionTokens:
    """Access/refresh pair returned by issue_session_tokens().

    Attributes:
        access_token: Short-lived bearer token.
        refresh_token: Long-lived token used solely to mint new pairs.
        expires_in: Access token lifetime in seconds.
    """

    access_token: str
    refresh_token: str
    expires_in: int


def access_token_ttl() -> timedelta:
    return timedelta(minutes=settings.access_token_ttl_minutes)


def refresh_token_ttl() -> timedelta:
    return timedelta(days=settings.refresh_token_ttl_days)


def _encode(
    subject: TokenSubject,
    *,
    token_type: str,
    secret: str,
    ttl: timedelta,
    now: datetime,
    token_id: str | None = None,
) -> str:
    role = getattr(subject.role, "value", subject.role)
    payload: dict = {
        "sub": str(subject.id),
        "email": subject.email,
        "role": role,
        "typ": token_type,
        "aud": settings.jwt_audience,
        "iss": settings.jwt_issuer,
        "iat": now,
        "exp": now + ttl,
    }
    if token_id is not None:
        payload["jti"] = token_id
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def issue_session_tokens(
    subject: TokenSubject,
    *,
    refresh_token_id: str,
    now: datetime | None = None,
) -> SessionTokens:
    """Issue an access/refresh token pair for an identity.

    Pure function of the identity, the clock, the secrets and the TTLs; the
    caller is responsible for persisting ``refresh_token_id``.

    Args:
        subject: Identity with id, email and role.
        refresh_token_id: Identifier embedded as the refresh token's ``jti``.
        now: Issuance time. Defaults to the current UTC time.

    Returns:
        SessionTokens with both tokens and the access TTL in seconds.
    """
    issued = now or datetime.now(UTC)
    access_ttl = access_token_ttl()
    access = _encode(
        subject,
        token_type=_ACCESS_TYPE,
        secret=settings.jwt_access_secret.get_secret_value(),
        ttl=access_ttl,
        now=issued,
    )
    refresh = _encode(
        subject,
        token_type=_REFRESH_TYPE,
        secret=settings.jwt_refresh_secret.get_secret_value(),
        ttl=refresh_token_ttl(),
        now=issued,
        token_id=refresh_token_id,
    )
    return SessionTokens(
        access_token=access,
        refresh_token=refresh,
        expires_in=int(access_ttl.total_seconds()),
    )


def _decode(token: str, *, secret: str, token_type: str) -> TokenPayload:
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[_ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp", "iat", "typ"]},
        )
        if claims["typ"] != token_type:
            raise InvalidTokenError()
        return TokenPayload(
            user_id=uuid.UUID(claims["sub"]),
            email=claims["email"],
            role=claims["role"],
            issued_at=datetime.fromtimestamp(claims["iat"], tz=UTC),
            token_id=claims.get("jti"),
        )
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError) as exc:
        # Security: never say whether the token expired or was tampered with
        raise InvalidTokenError() from exc


def verify_access_token(token: str) -> TokenPayload:
    """Verify an access token and return its claims.

    Raises:
        InvalidTokenError: Bad signature, expired, wrong type or malformed.
    """
    return _decode(
        token,
        secret=settings.jwt_access_secret.get_secret_value(),
        token_type=_ACCESS_TYPE,
    )


def verify_refresh_token(token: str) -> TokenPayload:
    """Verify a refresh token and return its claims.

    Raises:
        InvalidTokenError: Bad signature, expired, wrong type or malformed.
    """
    payload = _decode(
        token,
        secret=settings.jwt_refresh_secret.get_secret_value(),
        token_type=_REFRESH_TYPE,
    )
    if payload.token_id is None:
        raise InvalidTokenError()
    return payload


def new_refresh_token_id() -> str:
    """Random identifier for a refresh-token family member."""
    return uuid.uuid4().hex


def generate_capability_token() -> str:
    """Generate an opaque single-use token for verification/reset links."""
    return secrets.token_hex(_CAPABILITY_TOKEN_BYTES)
