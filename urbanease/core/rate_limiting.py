"""Rate limiting configuration using slowapi.

Security: Slows credential stuffing and email flooding on the
unauthenticated auth endpoints.

Requests carrying a valid bearer access token are keyed on the token
subject (per-user); everything else falls back to IP-based keying.

Usage in routers:
    from urbanease.core.rate_limiting import limiter

    @router.post("/login")
    @limiter.limit(lambda: settings.rate_limit_auth)
    async def login(request: Request, ...):
        ...
"""

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from urbanease.core.config import settings
from urbanease.core.errors import InvalidTokenError
from urbanease.core.responses import ErrorResponse
from urbanease.core.tokens import verify_access_token


def _rate_limit_key_func(request: Request) -> str:
    """Get rate limit key from request.

    Key format:
    - Valid bearer token: "user:{sub}"
    - No/invalid token: "unauth:{ip}"

    Args:
        request: The incoming request.

    Returns:
        Rate limit key string.
    """
    # Note: No revocation check here. Rate limiting only needs the sub
    # claim for keying. Full auth validation happens in deps.py.
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            payload = verify_access_token(token)
        except InvalidTokenError:
            pass
        else:
            return f"user:{payload.user_id}"

    return f"unauth:{get_remote_address(request)}"


# Global limiter instance
# Configured with in-memory storage (suitable for single-instance deployment)
# For multi-instance, configure Redis storage via RATELIMIT_STORAGE_URL
limiter = Limiter(
    key_func=_rate_limit_key_func,
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Security: Returns 429 Too Many Requests with standard error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with 429 status and retry-after header.
    """
    # Parse retry-after from exception detail (e.g., "10 per 1 minute")
    # Fallback to 60 seconds if parsing fails
    try:
        retry_after = str(exc.detail.split()[-1])
        int(retry_after.rstrip("s"))
    except (ValueError, AttributeError, IndexError):
        retry_after = "60"

    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            code="RATE_LIMITED",
            message=f"Rate limit exceeded: {exc.detail}",
        ).model_dump(exclude_none=True),
        headers={"Retry-After": retry_after},
    )
