"""Business profile, photo and service schemas.

Coordinates are accepted as numbers and stored as NUMERIC(10, 7).
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from urbanease.schemas.auth import CamelRequest


class BusinessProfileUpdate(CamelRequest):
    """Request body for PUT /business/profile. Omitted fields are kept."""

    business_name: str | None = Field(None, min_length=1, max_length=255)
    phone_number: str | None = Field(None, min_length=1, max_length=20)
    whatsapp_number: str | None = Field(None, max_length=20)
    instagram_id: str | None = Field(None, max_length=100)
    owner_name: str | None = Field(None, min_length=1, max_length=255)
    owner_phone: str | None = Field(None, min_length=1, max_length=20)
    building: str | None = Field(None, min_length=1, max_length=255)
    street: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    latitude: Decimal | None = Field(None, ge=-90, le=90, decimal_places=7)
    longitude: Decimal | None = Field(None, ge=-180, le=180, decimal_places=7)


class PhotoCreate(CamelRequest):
    """Request body for POST /business/photos."""

    photo_url: str = Field(min_length=1, max_length=2048)


class ServiceCreate(CamelRequest):
    """Request body for POST /business/services."""

    service_type_id: uuid.UUID


class BusinessProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    business_name: str
    phone_number: str
    whatsapp_number: str | None
    instagram_id: str | None
    owner_name: str
    owner_phone: str
    building: str
    street: str
    city: str
    latitude: Decimal | None
    longitude: Decimal | None
    created_at: datetime
    updated_at: datetime


class PhotoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    business_id: uuid.UUID
    photo_url: str
    created_at: datetime


class ServiceTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    created_at: datetime


class BusinessServiceResponse(BaseModel):
    """An offered service with its catalog entry embedded."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    business_id: uuid.UUID
    service_type_id: uuid.UUID
    service_type: ServiceTypeResponse | None = None
    created_at: datetime
