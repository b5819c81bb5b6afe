"""Account lifecycle: registration, verification, login, reset, sessions.

State machine per identity:

    Registered (unverified) --verify_email--> Verified --login--> LoggedIn
    ResetRequested --reset_password--> ResetCompleted   (orthogonal)

Security properties:
- Unknown email and wrong password raise the same InvalidCredentialsError,
  and both paths run a bcrypt comparison (DUMMY_HASH) so timing matches.
- initiate_password_reset and resend_verification_email always succeed so
  the endpoints cannot be used to enumerate accounts.
- Exactly one refresh token is honoured per identity (refresh_token_id).
  Presenting a rotated-out token revokes the whole family.
"""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.config import settings
from urbanease.core.email import (
    NotificationOutbox,
    build_password_reset_email,
    build_verification_email,
)
from urbanease.core.errors import (
    AlreadyVerifiedError,
    DuplicateEmailError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidTokenError,
)
from urbanease.core.security import (
    hash_password,
    validate_password_strength,
    verify_password,
)
from urbanease.core.tokens import (
    SessionTokens,
    generate_capability_token,
    issue_session_tokens,
    new_refresh_token_id,
    verify_refresh_token,
)
from urbanease.models.user import User, UserRole
from urbanease.repositories.business_repository import BusinessRepository
from urbanease.repositories.customer_repository import CustomerRepository
from urbanease.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AccountService:
    """Account flows for one request.

    Args:
        db: Request-scoped session. Identity and profile writes share it, so
            a failed registration leaves no orphan identity behind.
        outbox: Where outgoing emails are queued. Delivery happens after the
            request completes.
    """

    def __init__(self, db: AsyncSession, outbox: NotificationOutbox) -> None:
        self._db = db
        self._outbox = outbox

    # =========================================================================
    # Registration
    # =========================================================================

    async def _create_identity(self, email: str, password: str, role: UserRole) -> User:
        validate_password_strength(password)
        if await UserRepository.get_by_email(self._db, email) is not None:
            raise DuplicateEmailError()
        # Concurrent registrations that pass the check above still collide on
        # the unique constraint; the repository maps that to DuplicateEmailError.
        return await UserRepository.create(
            self._db,
            email=email,
            # Hashed here: a user password can look like a bcrypt hash, which
            # the model would otherwise store untouched.
            password=hash_password(password),
            role=role,
            verification_token=generate_capability_token(),
        )

    def _queue_verification_email(self, user: User) -> None:
        if user.verification_token is None:
            return
        self._outbox.enqueue(
            build_verification_email(user.email, user.verification_token)
        )

    async def register_customer(
        self,
        *,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone_number: str,
    ) -> User:
        """Register a customer account with its profile.

        Args:
            email: Login email, stored as given.
            password: Plain-text password.
            first_name: Profile given name.
            last_name: Profile family name.
            phone_number: Profile contact number.

        Returns:
            The new, unverified User.

        Raises:
            DuplicateEmailError: If the email is already registered.
            ValidationError: If the password breaks the length rules.
        """
        user = await self._create_identity(email, password, UserRole.CUSTOMER)
        await CustomerRepository.create_profile(
            self._db,
            user_id=user.id,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
        )
        self._queue_verification_email(user)
        logger.info("Registered customer %s", user.id)
        return user

    async def register_business(
        self,
        *,
        email: str,
        password: str,
        business_name: str,
        phone_number: str,
        owner_name: str,
        owner_phone: str,
        building: str,
        street: str,
        city: str,
    ) -> User:
        """Register a business account with its profile.

        Returns:
            The new, unverified User.

        Raises:
            DuplicateEmailError: If the email is already registered.
            ValidationError: If the password breaks the length rules.
        """
        user = await self._create_identity(email, password, UserRole.BUSINESS)
        await BusinessRepository.create_profile(
            self._db,
            user_id=user.id,
            business_name=business_name,
            phone_number=phone_number,
            owner_name=owner_name,
            owner_phone=owner_phone,
            building=building,
            street=street,
            city=city,
        )
        self._queue_verification_email(user)
        logger.info("Registered business %s", user.id)
        return user

    # =========================================================================
    # Email verification
    # =========================================================================

    async def verify_email(self, token: str) -> User:
        """Consume a verification token.

        Raises:
            InvalidTokenError: If no identity holds the token. A used token
                is cleared, so replay fails the same way.
        """
        user = await UserRepository.get_by_verification_token(self._db, token)
        if user is None:
            raise InvalidTokenError("Invalid verification token", status_code=400)

        verified = await UserRepository.update(
            self._db,
            user.id,
            is_email_verified=True,
            verification_token=None,
        )
        logger.info("Email verified for user %s", user.id)
        return verified or user

    async def _issue_new_verification_token(self, user: User) -> None:
        """Replace the user's verification token and queue a new email.

        Raises:
            AlreadyVerifiedError: If the email is already verified.
        """
        if user.is_email_verified:
            raise AlreadyVerifiedError()
        updated = await UserRepository.update(
            self._db,
            user.id,
            verification_token=generate_capability_token(),
        )
        self._queue_verification_email(updated or user)

    async def resend_verification_email(self, email: str) -> None:
        """Send a fresh verification link if the account needs one.

        Always returns normally: unknown and already-verified emails are
        indistinguishable from a successful resend.
        """
        user = await UserRepository.get_by_email(self._db, email)
        if user is None:
            return
        try:
            await self._issue_new_verification_token(user)
        except AlreadyVerifiedError:
            logger.info("Verification resend skipped for verified user %s", user.id)

    # =========================================================================
    # Sessions
    # =========================================================================

    async def _start_session(self, user: User, **changes: datetime | None) -> SessionTokens:
        token_id = new_refresh_token_id()
        await UserRepository.update(
            self._db, user.id, refresh_token_id=token_id, **changes
        )
        return issue_session_tokens(user, refresh_token_id=token_id)

    async def login(self, email: str, password: str) -> tuple[User, SessionTokens]:
        """Authenticate with email and password.

        Args:
            email: Login email.
            password: Plain-text password.

        Returns:
            Tuple of (user, session tokens).

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
            EmailNotVerifiedError: Credentials matched an unverified account.
        """
        user = await UserRepository.get_by_email(self._db, email)
        # Security: verify_password runs bcrypt even when user is None
        stored_hash = user.password_hash if user is not None else None
        if not verify_password(password, stored_hash) or user is None:
            raise InvalidCredentialsError()
        if not user.is_email_verified:
            raise EmailNotVerifiedError()

        tokens = await self._start_session(user, last_login=datetime.now(UTC))
        logger.info("User %s logged in", user.id)
        return user, tokens

    async def refresh_tokens(self, refresh_token: str) -> tuple[User, SessionTokens]:
        """Rotate a refresh token into a fresh session pair.

        Raises:
            InvalidTokenError: Bad or expired token, deleted identity, or a
                token that is not the identity's current refresh token.
        """
        payload = verify_refresh_token(refresh_token)
        user = await UserRepository.get_by_id(self._db, payload.user_id)
        if user is None:
            raise InvalidTokenError()

        if user.refresh_token_id is None or user.refresh_token_id != payload.token_id:
            if user.refresh_token_id is not None:
                # Replay of a rotated-out token: assume theft and revoke the
                # family. Committed here because the raise rolls back the request.
                await UserRepository.update(self._db, user.id, refresh_token_id=None)
                await self._db.commit()
                logger.warning("Refresh token replay detected for user %s", user.id)
            raise InvalidTokenError()

        tokens = await self._start_session(user)
        return user, tokens

    async def logout(self, refresh_token: str | None) -> None:
        """Revoke the refresh token family of the presented token, if any.

        Never fails: a missing, invalid or already-revoked token is ignored.
        """
        if not refresh_token:
            return
        try:
            payload = verify_refresh_token(refresh_token)
        except InvalidTokenError:
            return
        user = await UserRepository.get_by_id(self._db, payload.user_id)
        if user is not None and user.refresh_token_id == payload.token_id:
            await UserRepository.update(self._db, user.id, refresh_token_id=None)
            logger.info("User %s logged out", user.id)

    # =========================================================================
    # Password reset
    # =========================================================================

    async def initiate_password_reset(self, email: str) -> None:
        """Issue a password reset token and email it.

        Always returns normally. A new request overwrites any earlier token,
        so only the most recent link works.
        """
        user = await UserRepository.get_by_email(self._db, email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return

        token = generate_capability_token()
        await UserRepository.update(
            self._db,
            user.id,
            reset_password_token=token,
            reset_password_expires=datetime.now(UTC)
            + timedelta(minutes=settings.password_reset_ttl_minutes),
        )
        self._outbox.enqueue(build_password_reset_email(user.email, token))
        logger.info("Password reset issued for user %s", user.id)

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password using a reset token.

        Also revokes every outstanding session: access tokens issued before
        now are rejected and the refresh token family is cleared.

        Raises:
            ValidationError: If the new password breaks the length rules.
            InvalidOrExpiredTokenError: Unknown token or past its expiry.
        """
        validate_password_strength(new_password)
        now = datetime.now(UTC)
        user = await UserRepository.get_by_reset_token(self._db, token, active_at=now)
        if user is None:
            raise InvalidOrExpiredTokenError()

        await UserRepository.update(
            self._db,
            user.id,
            password_hash=hash_password(new_password),
            reset_password_token=None,
            reset_password_expires=None,
            refresh_token_id=None,
            # PyJWT encodes iat as whole seconds, so tokens issued after the
            # reset must compare >= this value.
            token_invalidated_before=now.replace(microsecond=0),
        )
        logger.info("Password reset completed for user %s", user.id)
