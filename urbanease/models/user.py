"""User model - the identity record.

Unites credentials, role and verification state. Customer and business
profiles are separate aggregates keyed by user_id and deleted with the user.
"""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from urbanease.core.security import ensure_password_hash
from urbanease.models.base import Base, TimestampMixin, uuid_primary_key

if TYPE_CHECKING:
    from urbanease.models.business import BusinessProfile
    from urbanease.models.customer import CustomerProfile

_CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"


class UserRole(enum.StrEnum):
    """Account role, fixed at registration."""

    CUSTOMER = "CUSTOMER"
    BUSINESS = "BUSINESS"
    ADMIN = "ADMIN"


class User(Base, TimestampMixin):
    """Identity record for authentication.

    Attributes:
        id: UUID primary key.
        email: Unique email address, stored as given.
        password_hash: bcrypt hash. Plain values assigned here are hashed
            on assignment, existing hashes are kept as-is.
        role: CUSTOMER, BUSINESS or ADMIN.
        is_email_verified: False until the verification link is used.
        verification_token: Outstanding email verification token.
        reset_password_token: Outstanding password reset token.
        reset_password_expires: Expiry of reset_password_token.
        google_id: Linked external identity, if any.
        refresh_token_id: jti of the only refresh token currently honoured.
            NULL means no refresh token is valid.
        token_invalidated_before: Access tokens issued before this are rejected.
        last_login: Timestamp of the last successful login.
        created_at: Account creation timestamp (from TimestampMixin).
        updated_at: Last modification timestamp (from TimestampMixin).
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = uuid_primary_key()
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.CUSTOMER,
    )
    is_email_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
        default=False,
    )
    verification_token: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
    )
    reset_password_token: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
    )
    reset_password_expires: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )
    google_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    refresh_token_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )
    token_invalidated_before: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )
    last_login: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )

    # Relationships
    customer_profile: Mapped["CustomerProfile | None"] = relationship(
        "CustomerProfile",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
        uselist=False,
    )
    business_profile: Mapped["BusinessProfile | None"] = relationship(
        "BusinessProfile",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
        uselist=False,
    )

    @validates("password_hash")
    def _hash_password(self, _key: str, value: str) -> str:
        """Hash plain secrets written to the password column."""
        return ensure_password_hash(value)

    def __repr__(self) -> str:
        return f"<User {self.id} role={self.role}>"
