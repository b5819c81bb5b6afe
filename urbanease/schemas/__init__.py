"""Pydantic request/response schemas for API endpoints."""

from urbanease.schemas.admin import (
    AccountOverviewResponse,
    AccountResponse,
    ServiceTypeWrite,
)
from urbanease.schemas.auth import (
    AccountSummary,
    EmailRequest,
    LoginRequest,
    RegisterBusinessRequest,
    RegisterCustomerRequest,
    ResetPasswordRequest,
    SessionResponse,
)
from urbanease.schemas.business import (
    BusinessProfileResponse,
    BusinessProfileUpdate,
    BusinessServiceResponse,
    PhotoCreate,
    PhotoResponse,
    ServiceCreate,
    ServiceTypeResponse,
)
from urbanease.schemas.customer import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    CustomerProfileResponse,
    CustomerProfileUpdate,
)

__all__ = [
    # Auth
    "AccountSummary",
    "EmailRequest",
    "LoginRequest",
    "RegisterBusinessRequest",
    "RegisterCustomerRequest",
    "ResetPasswordRequest",
    "SessionResponse",
    # Customer
    "AddressCreate",
    "AddressResponse",
    "AddressUpdate",
    "CustomerProfileResponse",
    "CustomerProfileUpdate",
    # Business
    "BusinessProfileResponse",
    "BusinessProfileUpdate",
    "BusinessServiceResponse",
    "PhotoCreate",
    "PhotoResponse",
    "ServiceCreate",
    "ServiceTypeResponse",
    # Admin
    "AccountOverviewResponse",
    "AccountResponse",
    "ServiceTypeWrite",
]
