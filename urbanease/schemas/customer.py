"""Customer profile and address schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from urbanease.schemas.auth import CamelRequest


class CustomerProfileUpdate(CamelRequest):
    """Request body for PUT /users/customer/profile. Omitted fields are kept."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone_number: str | None = Field(None, min_length=1, max_length=20)
    whatsapp_number: str | None = Field(None, max_length=20)
    profile_photo_url: str | None = Field(None, max_length=2048)


class AddressCreate(CamelRequest):
    """Request body for POST /users/customer/addresses."""

    house: str = Field(min_length=1, max_length=255)
    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    is_default: bool = False


class AddressUpdate(CamelRequest):
    """Request body for PUT /users/customer/addresses/{address_id}."""

    house: str | None = Field(None, min_length=1, max_length=255)
    street: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    is_default: bool | None = None


class CustomerProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    first_name: str
    last_name: str
    phone_number: str
    whatsapp_number: str | None
    profile_photo_url: str | None
    created_at: datetime
    updated_at: datetime


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: uuid.UUID
    house: str
    street: str
    city: str
    is_default: bool
    created_at: datetime
    updated_at: datetime
