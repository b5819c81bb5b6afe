"""Auth API request/response schemas.

Request bodies accept the camelCase keys the web client sends
(``firstName``, ``newPassword``) as well as snake_case field names.
All request schemas use extra="forbid" to reject unexpected fields.
"""

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from urbanease.models.user import UserRole

# Generous upper bound; the 72-byte bcrypt limit is enforced in
# validate_password_strength with a clearer message.
_MAX_PASSWORD_LENGTH = 128


class CamelRequest(BaseModel):
    """Base for request bodies sent with camelCase keys."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RegisterCustomerRequest(CamelRequest):
    """Request body for POST /auth/register/customer."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=_MAX_PASSWORD_LENGTH)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone_number: str = Field(min_length=1, max_length=20)


class RegisterBusinessRequest(CamelRequest):
    """Request body for POST /auth/register/business."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=_MAX_PASSWORD_LENGTH)
    business_name: str = Field(min_length=1, max_length=255)
    phone_number: str = Field(min_length=1, max_length=20)
    owner_name: str = Field(min_length=1, max_length=255)
    owner_phone: str = Field(min_length=1, max_length=20)
    building: str = Field(min_length=1, max_length=255)
    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)


class LoginRequest(CamelRequest):
    """Request body for POST /auth/login."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=_MAX_PASSWORD_LENGTH)


class EmailRequest(CamelRequest):
    """Request body carrying only an email address.

    Used by POST /auth/request-password-reset and
    POST /auth/resend-verification.
    """

    email: EmailStr


class ResetPasswordRequest(CamelRequest):
    """Request body for POST /auth/reset-password."""

    token: str = Field(min_length=1, max_length=255)
    new_password: str = Field(min_length=1, max_length=_MAX_PASSWORD_LENGTH)


# ===================================================================
# Responses
# ===================================================================


class AccountSummary(BaseModel):
    """Identity fields safe to return to the account owner."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    role: UserRole


class SessionResponse(BaseModel):
    """Access token handed to the client; the refresh token goes in a cookie."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    access_token: str
    expires_in: int
    user: AccountSummary | None = None
