"""Transactional email: message templates, Resend delivery and the outbox.

Services never talk to the mail relay directly. They enqueue EmailMessage
objects on a NotificationOutbox; the HTTP layer's outbox hands each message
to a background task, and deliver_email() retries with exponential backoff
there. A slow or failing relay therefore never delays or fails the request
that produced the message.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlencode

import httpx
import structlog
from fastapi import BackgroundTasks

from urbanease.core.config import settings

logger = structlog.get_logger()

_RESEND_API_URL = "https://api.resend.com/emails"
_RESEND_TIMEOUT = 10.0
_RETRY_MAX_DELAY_MS = 10_000


@dataclass(frozen=True)
class EmailMessage:
    """One outbound email.

    Attributes:
        to: Recipient address.
        subject: Subject line.
        html: HTML body.
    """

    to: str
    subject: str
    html: str


class Mailer(Protocol):
    """Mail relay client. Returns True when the relay accepted the message."""

    async def send(self, message: EmailMessage) -> bool: ...


class NotificationOutbox(Protocol):
    """Hand-off point between services and email delivery."""

    def enqueue(self, message: EmailMessage) -> None: ...


class ResendMailer:
    """Mailer that posts messages to the Resend HTTP API."""

    def __init__(self, api_key: str, sender: str) -> None:
        self._api_key = api_key
        self._sender = sender

    async def send(self, message: EmailMessage) -> bool:
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    _RESEND_API_URL,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    json={
                        "from": self._sender,
                        "to": message.to,
                        "subject": message.subject,
                        "html": message.html,
                    },
                    timeout=_RESEND_TIMEOUT,
                )
                resp.raise_for_status()
        except httpx.HTTPError:
            logger.warning("Email relay request failed", subject=message.subject)
            return False
        logger.info("Email sent", subject=message.subject)
        return True


def get_mailer() -> Mailer:
    """Dependency returning the configured mail relay client."""
    return ResendMailer(
        api_key=settings.resend_api_key.get_secret_value(),
        sender=settings.email_from,
    )


async def deliver_email(
    mailer: Mailer,
    message: EmailMessage,
    *,
    max_retries: int | None = None,
    base_delay_ms: int | None = None,
) -> bool:
    """Deliver a message, retrying with exponential backoff and jitter.

    Runs as the outbox consumer (background task), never on the request path.

    Args:
        mailer: Relay client.
        message: Message to deliver.
        max_retries: Retries after the first attempt. Defaults to settings.
        base_delay_ms: First backoff delay. Defaults to settings.

    Returns:
        True if any attempt succeeded, False once retries are exhausted.
    """
    retries = settings.email_max_retries if max_retries is None else max_retries
    base = settings.email_retry_base_delay_ms if base_delay_ms is None else base_delay_ms

    for attempt in range(retries + 1):
        if await mailer.send(message):
            return True
        if attempt == retries:
            break
        base_delay = base * (2**attempt)
        jitter = random.uniform(0, base_delay * 0.1)  # nosec B311
        delay = min(base_delay + jitter, _RETRY_MAX_DELAY_MS) / 1000
        logger.warning(
            "Email delivery failed, retrying",
            attempt=attempt + 1,
            max_attempts=retries + 1,
            delay_seconds=round(delay, 2),
        )
        await asyncio.sleep(delay)

    logger.error("Email delivery gave up", subject=message.subject)
    return False


class BackgroundTaskOutbox:
    """Outbox backed by FastAPI background tasks.

    Messages are delivered after the response has been sent.
    """

    def __init__(self, background_tasks: BackgroundTasks, mailer: Mailer) -> None:
        self._background_tasks = background_tasks
        self._mailer = mailer

    def enqueue(self, message: EmailMessage) -> None:
        self._background_tasks.add_task(deliver_email, self._mailer, message)


# =============================================================================
# Templates
# =============================================================================

_LAYOUT = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="text-align: center; margin-bottom: 30px;">
    <h1 style="color: #4CAF50;">Urban Ease</h1>
  </div>
  <h2>{heading}</h2>
  {intro}
  <div style="text-align: center; margin: 30px 0;">
    <a href="{url}" style="background-color: #4CAF50; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; font-weight: bold; display: inline-block;">{button}</a>
  </div>
  <p>Or copy and paste this link in your browser:</p>
  <p style="word-break: break-all; color: #666;">{url}</p>
  <p><strong>{expiry}</strong></p>
  <hr style="margin: 30px 0; border: none; border-top: 1px solid #eee;">
  <p style="color: #666; font-size: 12px;">{footer}</p>
</div>
"""


def _frontend_link(path: str, token: str) -> str:
    return f"{settings.frontend_url}{path}?{urlencode({'token': token})}"


def build_verification_email(email: str, token: str) -> EmailMessage:
    """Build the account verification email."""
    url = _frontend_link("/verify-email", token)
    html = _LAYOUT.format(
        heading="Welcome to Urban Ease!",
        intro=(
            "<p>Thank you for signing up for Urban Ease - your beauty and "
            "wellness service platform.</p>"
            "<p>Please verify your email address by clicking the button below:</p>"
        ),
        url=url,
        button="Verify Email Address",
        expiry="This link can be used once.",
        footer="If you did not sign up for Urban Ease, please ignore this email.",
    )
    return EmailMessage(to=email, subject="Verify Your Urban Ease Account", html=html)


def build_password_reset_email(email: str, token: str) -> EmailMessage:
    """Build the password reset email."""
    url = _frontend_link("/reset-password", token)
    minutes = settings.password_reset_ttl_minutes
    expiry = (
        "This link will expire in 1 hour."
        if minutes == 60
        else f"This link will expire in {minutes} minutes."
    )
    html = _LAYOUT.format(
        heading="Password Reset Request",
        intro=(
            "<p>You requested to reset your password for your Urban Ease account.</p>"
            "<p>Click the button below to set a new password:</p>"
        ),
        url=url,
        button="Reset Password",
        expiry=expiry,
        footer=(
            "If you did not request a password reset, please ignore this email "
            "and your password will remain unchanged."
        ),
    )
    return EmailMessage(to=email, subject="Reset Your Urban Ease Password", html=html)
