"""Customer profile and address models.

One CustomerProfile per CUSTOMER identity; addresses hang off the profile.
At most one address per customer has is_default set; the service layer keeps
that invariant when a new default is chosen.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from urbanease.models.base import Base, TimestampMixin, uuid_primary_key

if TYPE_CHECKING:
    from urbanease.models.user import User


class CustomerProfile(Base, TimestampMixin):
    """Contact details for a customer account.

    Attributes:
        id: UUID primary key.
        user_id: FK to users table (unique, one profile per user).
        first_name: Given name.
        last_name: Family name.
        phone_number: Contact number.
        whatsapp_number: Optional WhatsApp number.
        profile_photo_url: Optional avatar URL.
    """

    __tablename__ = "customer_profiles"

    id: Mapped[uuid.UUID] = uuid_primary_key()
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False)
    whatsapp_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    profile_photo_url: Mapped[str | None] = mapped_column(
        String(2048), nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="customer_profile")
    addresses: Mapped[list["CustomerAddress"]] = relationship(
        back_populates="customer",
        cascade="all, delete-orphan",
    )


class CustomerAddress(Base, TimestampMixin):
    """A saved customer address."""

    __tablename__ = "customer_addresses"

    id: Mapped[uuid.UUID] = uuid_primary_key()
    customer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("customer_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    house: Mapped[str] = mapped_column(String(255), nullable=False)
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    is_default: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
        default=False,
    )

    customer: Mapped[CustomerProfile] = relationship(back_populates="addresses")
