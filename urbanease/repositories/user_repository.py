"""Repository for User CRUD operations.

Credential store for the users table. Every method takes the caller's
AsyncSession so that identity and profile writes share one transaction.
"""

import logging
import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.errors import DuplicateEmailError
from urbanease.models.user import User, UserRole

logger = logging.getLogger(__name__)

# Fields that may be updated via UserRepository.update().
# Security: Never add 'id', 'email', 'role', 'created_at', or 'updated_at'.
# - id: primary key, immutable
# - email: unique identity, no change-email flow exists
# - role: fixed at registration, never mass-assignable
# - created_at/updated_at: server-managed timestamps
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "password_hash",
        "is_email_verified",
        "verification_token",
        "reset_password_token",
        "reset_password_expires",
        "google_id",
        "last_login",
        "refresh_token_id",
        "token_invalidated_before",
    }
)


class UserRepository:
    """Stateless repository for User table operations.

    All methods are static - no instance state. Pass an AsyncSession
    for every call so the caller controls transaction boundaries.
    """

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
        """Fetch a user by primary key.

        Args:
            db: Async database session.
            user_id: UUID primary key.

        Returns:
            User if found, None otherwise.
        """
        return await db.get(User, user_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """Fetch a user by email address.

        Emails are matched exactly as stored.

        Args:
            db: Async database session.
            email: Email address to look up.

        Returns:
            User if found, None otherwise.
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_verification_token(db: AsyncSession, token: str) -> User | None:
        """Fetch the user holding an outstanding verification token."""
        result = await db.execute(
            select(User).where(User.verification_token == token)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_reset_token(
        db: AsyncSession,
        token: str,
        *,
        active_at: datetime,
    ) -> User | None:
        """Fetch the user holding a reset token that is still valid.

        Args:
            db: Async database session.
            token: Password reset token from the email link.
            active_at: Reference time; the token must expire strictly after it.

        Returns:
            User if the token exists and has not expired, None otherwise.
        """
        result = await db.execute(
            select(User).where(
                User.reset_password_token == token,
                User.reset_password_expires > active_at,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(db: AsyncSession) -> list[User]:
        """List every user, newest first."""
        result = await db.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password: str,
        role: UserRole,
        verification_token: str | None = None,
        is_email_verified: bool = False,
    ) -> User:
        """Create a new user.

        The password is hashed by the model on assignment.

        Args:
            db: Async database session.
            email: User email address, stored as given.
            password: Plain-text password (or an existing bcrypt hash).
            role: Role fixed for the lifetime of the account.
            verification_token: Outstanding email verification token.
            is_email_verified: Whether the email starts out verified.

        Returns:
            Created User with database-generated fields populated.

        Raises:
            DuplicateEmailError: If the email already exists. The session
                is rolled back before raising.
        """
        user = User(
            email=email,
            password_hash=password,
            role=role,
            verification_token=verification_token,
            is_email_verified=is_email_verified,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as exc:
            # Lost a registration race on the unique email constraint
            await db.rollback()
            logger.info("Duplicate registration rejected by unique constraint")
            raise DuplicateEmailError() from exc
        await db.refresh(user)
        return user

    @staticmethod
    async def update(
        db: AsyncSession,
        user_id: uuid.UUID,
        **kwargs: str | datetime | bool | None,
    ) -> User | None:
        """Update user fields.

        Only fields in _UPDATABLE_FIELDS are allowed. Unknown field names
        raise ValueError.

        Args:
            db: Async database session.
            user_id: UUID of the user to update.
            **kwargs: Field names and values to update.

        Returns:
            Updated User if found, None if user does not exist.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        user = await db.get(User, user_id)
        if user is None:
            return None

        for field, value in kwargs.items():
            setattr(user, field, value)

        await db.flush()
        await db.refresh(user)
        return user
