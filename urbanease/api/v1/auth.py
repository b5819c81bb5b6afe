"""Authentication endpoints.

Registration, email verification, login, password reset and session
refresh. The access token is returned in the body; the refresh token lives
only in an HTTP-only cookie scoped to /api/auth.

Security considerations:
- login: constant-time comparison via DUMMY_HASH prevents user enumeration
- request-password-reset, resend-verification: identical response whether
  or not the account exists
- refresh-token: rotation on every use, replay of an old token revokes
- all endpoints here are rate limited per IP
"""

from typing import Annotated

from fastapi import APIRouter, Cookie, Path, Request, Response

from urbanease.api.deps import Accounts
from urbanease.core.config import settings
from urbanease.core.errors import InvalidTokenError
from urbanease.core.rate_limiting import limiter
from urbanease.core.responses import ApiResponse
from urbanease.core.tokens import SessionTokens, refresh_token_ttl
from urbanease.schemas.auth import (
    AccountSummary,
    EmailRequest,
    LoginRequest,
    RegisterBusinessRequest,
    RegisterCustomerRequest,
    ResetPasswordRequest,
    SessionResponse,
)

router = APIRouter()

RefreshCookie = Annotated[
    str | None,
    Cookie(alias=settings.refresh_cookie_name, include_in_schema=False),
]

_RESET_REQUESTED_MSG = (
    "If an account with that email exists, a password reset link has been sent"
)
_RESEND_MSG = (
    "If your account exists and is not verified, a verification email has been sent"
)


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        max_age=int(refresh_token_ttl().total_seconds()),
        path=settings.refresh_cookie_path,
        domain=settings.refresh_cookie_domain or None,
        secure=settings.refresh_cookie_secure,
        httponly=True,
        samesite=settings.refresh_cookie_samesite,
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        domain=settings.refresh_cookie_domain or None,
        secure=settings.refresh_cookie_secure,
        httponly=True,
        samesite=settings.refresh_cookie_samesite,
    )


def _session_response(
    tokens: SessionTokens, user: AccountSummary | None = None
) -> SessionResponse:
    return SessionResponse(
        access_token=tokens.access_token,
        expires_in=tokens.expires_in,
        user=user,
    )


# ===================================================================
# Registration
# ===================================================================


@router.post("/register/customer", status_code=201)
@limiter.limit(lambda: settings.rate_limit_auth)
async def register_customer(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: RegisterCustomerRequest,
    accounts: Accounts,
) -> ApiResponse[AccountSummary]:
    """Register a customer and send the verification email."""
    user = await accounts.register_customer(
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        phone_number=body.phone_number,
    )
    return ApiResponse(
        message="Customer registered successfully. Please verify your email.",
        data=AccountSummary.model_validate(user),
    )


@router.post("/register/business", status_code=201)
@limiter.limit(lambda: settings.rate_limit_auth)
async def register_business(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: RegisterBusinessRequest,
    accounts: Accounts,
) -> ApiResponse[AccountSummary]:
    """Register a business and send the verification email."""
    user = await accounts.register_business(
        email=body.email,
        password=body.password,
        business_name=body.business_name,
        phone_number=body.phone_number,
        owner_name=body.owner_name,
        owner_phone=body.owner_phone,
        building=body.building,
        street=body.street,
        city=body.city,
    )
    return ApiResponse(
        message="Business registered successfully. Please verify your email.",
        data=AccountSummary.model_validate(user),
    )


# ===================================================================
# Login / session
# ===================================================================


@router.post("/login")
@limiter.limit(lambda: settings.rate_limit_auth)
async def login(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: LoginRequest,
    response: Response,
    accounts: Accounts,
) -> ApiResponse[SessionResponse]:
    """Exchange credentials for an access token and a refresh cookie."""
    user, tokens = await accounts.login(body.email, body.password)
    _set_refresh_cookie(response, tokens.refresh_token)
    return ApiResponse(
        message="Login successful",
        data=_session_response(tokens, AccountSummary.model_validate(user)),
    )


@router.post("/refresh-token")
@limiter.limit(lambda: settings.rate_limit_auth)
async def refresh_token(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    response: Response,
    accounts: Accounts,
    refresh_cookie: RefreshCookie = None,
) -> ApiResponse[SessionResponse]:
    """Rotate the refresh cookie and issue a new access token."""
    if not refresh_cookie:
        raise InvalidTokenError("Refresh token is required")
    _user, tokens = await accounts.refresh_tokens(refresh_cookie)
    _set_refresh_cookie(response, tokens.refresh_token)
    return ApiResponse(
        message="Token refreshed successfully",
        data=_session_response(tokens),
    )


@router.post("/logout")
async def logout(
    response: Response,
    accounts: Accounts,
    refresh_cookie: RefreshCookie = None,
) -> ApiResponse[None]:
    """Revoke the refresh token family and clear the cookie."""
    await accounts.logout(refresh_cookie)
    _clear_refresh_cookie(response)
    return ApiResponse(message="Logged out successfully")


# ===================================================================
# Email verification
# ===================================================================


@router.get("/verify-email/{token}")
@limiter.limit(lambda: settings.rate_limit_auth)
async def verify_email(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    token: Annotated[str, Path(max_length=255)],
    accounts: Accounts,
) -> ApiResponse[None]:
    await accounts.verify_email(token)
    return ApiResponse(message="Email verified successfully")


@router.post("/resend-verification")
@limiter.limit(lambda: settings.rate_limit_auth)
async def resend_verification(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: EmailRequest,
    accounts: Accounts,
) -> ApiResponse[None]:
    await accounts.resend_verification_email(body.email)
    return ApiResponse(message=_RESEND_MSG)


# ===================================================================
# Password reset
# ===================================================================


@router.post("/request-password-reset")
@limiter.limit(lambda: settings.rate_limit_auth)
async def request_password_reset(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: EmailRequest,
    accounts: Accounts,
) -> ApiResponse[None]:
    await accounts.initiate_password_reset(body.email)
    return ApiResponse(message=_RESET_REQUESTED_MSG)


@router.post("/reset-password")
@limiter.limit(lambda: settings.rate_limit_auth)
async def reset_password(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: ResetPasswordRequest,
    accounts: Accounts,
) -> ApiResponse[None]:
    """Set a new password; every existing session is signed out."""
    await accounts.reset_password(body.token, body.new_password)
    return ApiResponse(message="Password reset successful")
