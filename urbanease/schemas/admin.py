"""Account overview and admin schemas.

AccountResponse is the secret-free identity view: password hash, capability
tokens and the refresh token id are never part of it.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from urbanease.models.user import UserRole
from urbanease.schemas.auth import CamelRequest
from urbanease.schemas.business import BusinessProfileResponse
from urbanease.schemas.customer import CustomerProfileResponse


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    role: UserRole
    is_email_verified: bool
    google_id: str | None
    created_at: datetime
    updated_at: datetime
    last_login: datetime | None


class AccountOverviewResponse(AccountResponse):
    """Identity plus whichever profile its role carries."""

    customer_profile: CustomerProfileResponse | None = None
    business_profile: BusinessProfileResponse | None = None


class ServiceTypeWrite(CamelRequest):
    """Request body for creating or renaming a service type."""

    name: str = Field(min_length=1, max_length=100)
