"""Shared test fixtures.

Tests run against an in-memory SQLite database (aiosqlite) created from
Base.metadata for every test function. Outgoing email is captured by a
RecordingOutbox instead of being delivered.
"""

import os

# Must be set before urbanease.core.config is imported anywhere.
# Security: test-only secrets. Production secrets come from the environment.
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-that-is-at-least-32-chars"  # nosec B105
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-that-is-at-least-32-chars"  # nosec B105
os.environ["REFRESH_COOKIE_SECURE"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import AsyncGenerator, Iterator  # noqa: E402
from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from urbanease.core.email import EmailMessage  # noqa: E402
from urbanease.core.rate_limiting import limiter  # noqa: E402
from urbanease.core.tokens import issue_session_tokens, new_refresh_token_id  # noqa: E402
from urbanease.models import Base, User, UserRole  # noqa: E402

TEST_PASSWORD = "pw12345678"  # nosec B105
CUSTOMER_EMAIL = "a@x.com"
BUSINESS_EMAIL = "salon@x.com"
ADMIN_EMAIL = "admin@x.com"


class RecordingOutbox:
    """NotificationOutbox that keeps messages instead of sending them."""

    def __init__(self) -> None:
        self.messages: list[EmailMessage] = []

    def enqueue(self, message: EmailMessage) -> None:
        self.messages.append(message)

    def to(self, email: str) -> list[EmailMessage]:
        return [m for m in self.messages if m.to == email]


async def make_user(
    db: AsyncSession,
    *,
    email: str = CUSTOMER_EMAIL,
    role: UserRole = UserRole.CUSTOMER,
    verified: bool = True,
    password: str = TEST_PASSWORD,
) -> User:
    """Insert an identity without a profile and commit it."""
    user = User(
        email=email,
        password_hash=password,
        role=role,
        is_email_verified=verified,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def bearer_headers(user: User, *, now: datetime | None = None) -> dict[str, str]:
    """Authorization header carrying a fresh access token for user."""
    tokens = issue_session_tokens(user, refresh_token_id=new_refresh_token_id(), now=now)
    return {"Authorization": f"Bearer {tokens.access_token}"}


@pytest.fixture(autouse=True)
def disable_rate_limiting() -> Iterator[None]:
    """Keep the in-memory limiter from leaking counts between tests."""
    original = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = original


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory database shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def outbox() -> RecordingOutbox:
    return RecordingOutbox()


@pytest_asyncio.fixture
async def client(
    db_engine: AsyncEngine,
    outbox: RecordingOutbox,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test database and outbox.

    Each request gets its own session that commits on success and rolls
    back on error, like get_db in production.
    """
    from urbanease.api.deps import get_outbox
    from urbanease.core.database import get_db
    from urbanease.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_outbox] = lambda: outbox

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
