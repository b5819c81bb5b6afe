"""Business profile, photo gallery and offered services.

One BusinessProfile per BUSINESS identity. A business offers each
service type at most once (uq_business_services_business_type).
"""

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from urbanease.models.base import Base, CreatedAtMixin, TimestampMixin, uuid_primary_key

if TYPE_CHECKING:
    from urbanease.models.service_type import ServiceType
    from urbanease.models.user import User

_CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"


class BusinessProfile(Base, TimestampMixin):
    """Public listing and owner contact details for a business account.

    Attributes:
        id: UUID primary key.
        user_id: FK to users table (unique, one profile per user).
        business_name: Display name of the business.
        phone_number: Business contact number.
        whatsapp_number: Optional WhatsApp number.
        instagram_id: Optional Instagram handle.
        owner_name: Name of the owner.
        owner_phone: Owner contact number.
        building: Building name or number.
        street: Street address.
        city: City.
        latitude: Optional map latitude (7 decimal places).
        longitude: Optional map longitude (7 decimal places).
    """

    __tablename__ = "business_profiles"

    id: Mapped[uuid.UUID] = uuid_primary_key()
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    whatsapp_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    instagram_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    owner_name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    building: Mapped[str] = mapped_column(String(255), nullable=False)
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    latitude: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 7), nullable=True
    )
    longitude: Mapped[Decimal | None] = mapped_column(
        Numeric(10, 7), nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="business_profile")
    photos: Mapped[list["BusinessPhoto"]] = relationship(
        back_populates="business",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
    )
    services: Mapped[list["BusinessService"]] = relationship(
        back_populates="business",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
    )


class BusinessPhoto(Base, CreatedAtMixin):
    """Gallery photo of a business."""

    __tablename__ = "business_photos"

    id: Mapped[uuid.UUID] = uuid_primary_key()
    business_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    photo_url: Mapped[str] = mapped_column(String(2048), nullable=False)

    business: Mapped[BusinessProfile] = relationship(back_populates="photos")


class BusinessService(Base, CreatedAtMixin):
    """A service type offered by a business.

    Attributes:
        id: UUID primary key.
        business_id: FK to business_profiles.
        service_type_id: FK to service_types.
        created_at: When the business added the service.
    """

    __tablename__ = "business_services"
    __table_args__ = (
        UniqueConstraint(
            "business_id",
            "service_type_id",
            name="uq_business_services_business_type",
        ),
    )

    id: Mapped[uuid.UUID] = uuid_primary_key()
    business_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("business_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    service_type_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("service_types.id", ondelete="CASCADE"),
        nullable=False,
    )

    business: Mapped[BusinessProfile] = relationship(back_populates="services")
    service_type: Mapped["ServiceType"] = relationship(back_populates="business_services")
