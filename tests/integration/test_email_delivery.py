"""HTTP tests for email hand-off through the real outbox.

The shared ``client`` fixture replaces the outbox with a recorder. These
tests keep the BackgroundTaskOutbox and swap only the mail relay, so they
see when delivery runs relative to the request transaction.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from urbanease.core.database import get_db
from urbanease.core.email import EmailMessage, get_mailer
from urbanease.main import app
from tests.conftest import CUSTOMER_EMAIL, TEST_PASSWORD


class _EventLog:
    def __init__(self) -> None:
        self.events: list[str] = []


class _StubMailer:
    """Mailer that records each attempt in the shared event log."""

    def __init__(self, log: _EventLog) -> None:
        self._log = log
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> bool:
        self._log.events.append("send")
        self.sent.append(message)
        return True


@pytest.fixture
def event_log() -> _EventLog:
    return _EventLog()


@pytest.fixture
def mailer(event_log: _EventLog) -> _StubMailer:
    return _StubMailer(event_log)


@pytest_asyncio.fixture
async def delivery_client(
    db_engine: AsyncEngine,
    event_log: _EventLog,
    mailer: _StubMailer,
) -> AsyncGenerator[AsyncClient, None]:
    """Client using the production outbox with a stub relay."""
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def logging_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            try:
                yield session
                await session.commit()
                event_log.events.append("commit")
            except Exception:
                await session.rollback()
                event_log.events.append("rollback")
                raise

    app.dependency_overrides[get_db] = logging_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


class TestEmailAfterCommit:
    async def test_registration_commits_before_sending(
        self, delivery_client: AsyncClient, event_log: _EventLog, mailer: _StubMailer
    ):
        response = await delivery_client.post(
            "/api/auth/register/customer",
            json={
                "email": CUSTOMER_EMAIL,
                "password": TEST_PASSWORD,
                "firstName": "Ada",
                "lastName": "Lovelace",
                "phoneNumber": "555-0100",
            },
        )

        assert response.status_code == 201
        assert event_log.events == ["commit", "send"]
        assert mailer.sent[0].to == CUSTOMER_EMAIL

    async def test_emailed_verification_link_works(
        self, delivery_client: AsyncClient, mailer: _StubMailer
    ):
        await delivery_client.post(
            "/api/auth/register/customer",
            json={
                "email": CUSTOMER_EMAIL,
                "password": TEST_PASSWORD,
                "firstName": "Ada",
                "lastName": "Lovelace",
                "phoneNumber": "555-0100",
            },
        )
        token = mailer.sent[0].html.split("token=")[1][:64]

        response = await delivery_client.get(f"/api/auth/verify-email/{token}")

        assert response.status_code == 200

    async def test_failed_request_sends_nothing(
        self, delivery_client: AsyncClient, event_log: _EventLog
    ):
        body = {
            "email": CUSTOMER_EMAIL,
            "password": TEST_PASSWORD,
            "firstName": "Ada",
            "lastName": "Lovelace",
            "phoneNumber": "555-0100",
        }
        await delivery_client.post("/api/auth/register/customer", json=body)
        event_log.events.clear()

        response = await delivery_client.post("/api/auth/register/customer", json=body)

        assert response.status_code == 409
        assert "send" not in event_log.events
