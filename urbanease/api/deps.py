"""Shared dependencies for API endpoints.

Authentication, role gating and service construction.

WHY DEPENDENCY INJECTION:
- Role gating runs before any service code is reached
- Services get a request-scoped session and outbox
- Testable with overridden dependencies (mailer, outbox, database)
"""

import uuid
from collections.abc import Awaitable, Callable
from datetime import UTC
from typing import Annotated

from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.database import get_db
from urbanease.core.email import (
    BackgroundTaskOutbox,
    Mailer,
    NotificationOutbox,
    get_mailer,
)
from urbanease.core.errors import ForbiddenError, InvalidTokenError, UnauthorizedError
from urbanease.core.tokens import TokenPayload, verify_access_token
from urbanease.models import User, UserRole
from urbanease.services.account_service import AccountService

# Function scope: the transaction commits when the endpoint returns, before
# the response is sent and before background email delivery starts.
DbSession = Annotated[AsyncSession, Depends(get_db, scope="function")]


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_principal(request: Request, db: DbSession) -> TokenPayload:
    """Authenticate the request from its bearer access token.

    Validation steps:
    1. Read the token from the Authorization header
    2. Verify signature, exp, aud, iss and token type
    3. Check the identity still exists
    4. Check token_invalidated_before (revocation)

    Args:
        request: HTTP request (injected by FastAPI).
        db: Database session for the revocation check (injected).

    Returns:
        Claims of the verified access token.

    Raises:
        UnauthorizedError: 401 for any authentication failure.
    """
    token = _bearer_token(request)
    if token is None:
        raise UnauthorizedError()

    try:
        payload = verify_access_token(token)
    except InvalidTokenError as exc:
        # Security: never say why the token was rejected
        raise UnauthorizedError() from exc

    result = await db.execute(
        select(User.id, User.token_invalidated_before).where(
            User.id == payload.user_id
        )
    )
    row = result.one_or_none()
    if row is None:
        raise UnauthorizedError()

    invalidated_before = row.token_invalidated_before
    if invalidated_before is not None:
        if invalidated_before.tzinfo is None:
            invalidated_before = invalidated_before.replace(tzinfo=UTC)
        if payload.issued_at < invalidated_before:
            raise UnauthorizedError()

    return payload


CurrentPrincipal = Annotated[TokenPayload, Depends(get_current_principal)]


def get_current_user_id(principal: CurrentPrincipal) -> uuid.UUID:
    return principal.user_id


CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]


def require_role(*roles: UserRole) -> Callable[..., Awaitable[TokenPayload]]:
    """Build a dependency that admits only the given roles.

    Args:
        roles: Roles allowed through.

    Returns:
        Dependency returning the principal, or raising ForbiddenError (403).
    """
    allowed = frozenset(role.value for role in roles)

    async def _check_role(principal: CurrentPrincipal) -> TokenPayload:
        if principal.role not in allowed:
            raise ForbiddenError()
        return principal

    return _check_role


CustomerPrincipal = Annotated[TokenPayload, Depends(require_role(UserRole.CUSTOMER))]
BusinessPrincipal = Annotated[TokenPayload, Depends(require_role(UserRole.BUSINESS))]
AdminPrincipal = Annotated[TokenPayload, Depends(require_role(UserRole.ADMIN))]


# =============================================================================
# Services
# =============================================================================


def get_outbox(
    background_tasks: BackgroundTasks,
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> NotificationOutbox:
    """Outbox whose messages are delivered after the response is sent."""
    return BackgroundTaskOutbox(background_tasks, mailer)


Outbox = Annotated[NotificationOutbox, Depends(get_outbox)]


def get_account_service(db: DbSession, outbox: Outbox) -> AccountService:
    return AccountService(db, outbox)


Accounts = Annotated[AccountService, Depends(get_account_service)]
