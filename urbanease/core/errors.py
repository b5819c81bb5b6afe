"""API error classes.

Every failure the services raise is an APIError subclass carrying a
machine-readable code, a human-readable message and the HTTP status the
boundary should answer with. main.py renders them in the response envelope.

WHY CUSTOM ERROR CLASSES:
- Consistent error response format across all endpoints
- Easy to map to HTTP status codes in exception handlers
- Type-safe error handling in services/repositories
"""


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Field validation failed (400).

    Use for request body validation errors, malformed input, etc.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class UnauthorizedError(APIError):
    """Authentication required (401).

    Use when no valid access token was provided.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class ForbiddenError(APIError):
    """Not allowed to access resource (403).

    Use when the access token is valid but its role is not allowed.
    """

    def __init__(self, message: str = "Forbidden: insufficient permissions") -> None:
        super().__init__(
            code="FORBIDDEN",
            message=message,
            status_code=403,
        )


class NotFoundError(APIError):
    """Resource not found (404).

    Use when requested resource doesn't exist OR doesn't belong to the caller.

    WHY NOT SEPARATE "FORBIDDEN" FOR WRONG OWNERSHIP:
    - Revealing "exists but not yours" leaks information
    - From the caller's perspective, the resource simply doesn't exist
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class ConflictError(APIError):
    """Duplicate or conflicting resource (409).

    Accepts custom code for specific conflict types.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


# =============================================================================
# Account flow errors
# =============================================================================


class DuplicateEmailError(ConflictError):
    """An identity with this email already exists (409)."""

    def __init__(self) -> None:
        super().__init__(
            code="EMAIL_ALREADY_EXISTS",
            message="User with this email already exists",
        )


class InvalidCredentialsError(APIError):
    """Email or password did not match (401).

    Security: the same error covers an unknown email and a wrong password
    so callers cannot discover which accounts exist.
    """

    def __init__(self) -> None:
        super().__init__(
            code="INVALID_CREDENTIALS",
            message="Invalid email or password",
            status_code=401,
        )


class EmailNotVerifiedError(APIError):
    """Credentials matched but the email is not verified yet (403)."""

    def __init__(self) -> None:
        super().__init__(
            code="EMAIL_NOT_VERIFIED",
            message="Email not verified. Please verify your email to login.",
            status_code=403,
        )


class InvalidTokenError(APIError):
    """Token rejected (400 for capability tokens, 401 for session tokens).

    Security: expiry, bad signature and unknown token all surface as this
    one error so the caller learns nothing about why it failed.
    """

    def __init__(
        self,
        message: str = "Invalid or expired token",
        status_code: int = 401,
    ) -> None:
        super().__init__(
            code="INVALID_TOKEN",
            message=message,
            status_code=status_code,
        )


class InvalidOrExpiredTokenError(APIError):
    """Password reset token unknown or past its expiry (400)."""

    def __init__(self) -> None:
        super().__init__(
            code="INVALID_OR_EXPIRED_TOKEN",
            message="Invalid or expired reset token",
            status_code=400,
        )


class AlreadyVerifiedError(ConflictError):
    """Email is already verified (409).

    Internal condition of the resend-verification flow. The public facade
    swallows it so the endpoint never reveals verification state.
    """

    def __init__(self) -> None:
        super().__init__(
            code="ALREADY_VERIFIED",
            message="Email already verified",
        )
