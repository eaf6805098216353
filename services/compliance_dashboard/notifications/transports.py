"""
Email Transports
================

Three ways to send a message, chosen per call from the credentials
currently in the environment:

- GMAIL_SMTP: Gmail over SMTP with STARTTLS (primary)
- SENDGRID: SendGrid v3 HTTP API (fallback)
- DEMO: nothing is sent; the message is written to the console log

Version: 0.1.0
"""

import asyncio
import re
import smtplib
import socket
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.header import Header
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Any

import httpx

from services.compliance_dashboard.exceptions import TransportFailure
from services.compliance_dashboard.notifications.templates import html_to_text
from shared.config import EmailSettings, GmailSettings, SendGridSettings, TransportKind
from shared.logging import get_logger


logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SENDGRID_KEY_PREFIX = "SG."
MIN_SECRET_LENGTH = 8
SENDGRID_OK_STATUSES = (200, 201, 202)


@dataclass
class EmailMessage:
    """An outgoing email."""

    to: str
    subject: str
    html: str | None = None
    text: str | None = None
    from_address: str = ""

    @property
    def plain_text(self) -> str:
        """Text body, derived from the HTML when no text was given."""
        if self.text:
            return self.text
        if self.html:
            return html_to_text(self.html)
        return ""


# =============================================================================
# Credential validation
# =============================================================================


def is_email(value: str) -> bool:
    """Loose address shape check: something@something.tld, no spaces."""
    return bool(EMAIL_PATTERN.match(value or ""))


def valid_gmail_credentials(gmail: GmailSettings) -> bool:
    """Account looks like an address and the app password has at least 8 characters."""
    account = gmail.account
    secret = gmail.secret
    if not account or not secret:
        return False
    if not is_email(account):
        return False
    return len(secret) >= MIN_SECRET_LENGTH


def valid_sendgrid_credentials(sendgrid: SendGridSettings) -> bool:
    """API key carries the SendGrid prefix and the sender looks like an address."""
    api_key = sendgrid.api_key.get_secret_value().strip()
    if not api_key.startswith(SENDGRID_KEY_PREFIX):
        return False
    return is_email(sendgrid.from_email.strip())


def select_transport(email: EmailSettings) -> TransportKind:
    """Pick the first transport whose credentials validate."""
    if valid_gmail_credentials(email.gmail):
        return TransportKind.GMAIL_SMTP
    if valid_sendgrid_credentials(email.sendgrid):
        return TransportKind.SENDGRID
    return TransportKind.DEMO


# =============================================================================
# Transports
# =============================================================================


class EmailTransport(ABC):
    """Base class for email transports."""

    @property
    @abstractmethod
    def kind(self) -> TransportKind:
        """Transport identifier written to the email log."""
        ...

    @abstractmethod
    def sender(self, message: EmailMessage) -> str:
        """Sender address for `message`; the configured account when the message has none."""
        ...

    @abstractmethod
    async def verify(self) -> None:
        """
        Check that the transport can be reached and accepts the credentials.

        Raises:
            TransportFailure: If the check fails
        """
        ...

    @abstractmethod
    async def deliver(self, message: EmailMessage) -> str | None:
        """
        Send one message.

        Returns:
            Provider message id, when one is available

        Raises:
            TransportFailure: If delivery fails
        """
        ...


class GmailSmtpTransport(EmailTransport):
    """Gmail SMTP with STARTTLS; blocking smtplib calls run in a worker thread."""

    def __init__(self, settings: GmailSettings, sender_name: str = "ComplianceGuard") -> None:
        self.settings = settings
        self.sender_name = sender_name

    @property
    def kind(self) -> TransportKind:
        return TransportKind.GMAIL_SMTP

    def sender(self, message: EmailMessage) -> str:
        return message.from_address.strip() or self.settings.account

    def _open(self) -> smtplib.SMTP:
        server = smtplib.SMTP(
            self.settings.smtp_host,
            self.settings.smtp_port,
            timeout=self.settings.timeout_seconds,
        )
        try:
            server.starttls()
            server.login(self.settings.account, self.settings.secret)
        except BaseException:
            server.close()
            raise
        return server

    def _verify_sync(self) -> None:
        with self._open():
            pass

    def _send_sync(self, mime: MIMEMultipart) -> None:
        with self._open() as server:
            server.send_message(mime)

    def build_mime(self, message: EmailMessage) -> MIMEMultipart:
        """Assemble a multipart/alternative message with text and HTML parts."""
        sender = self.sender(message)
        mime = MIMEMultipart("alternative")
        mime["Subject"] = Header(message.subject, "utf-8")
        mime["From"] = formataddr((self.sender_name, sender), charset="utf-8")
        mime["To"] = message.to
        mime["Message-ID"] = make_msgid(domain=sender.rpartition("@")[2] or None)

        mime.attach(MIMEText(message.plain_text, "plain", "utf-8"))
        if message.html:
            mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    async def verify(self) -> None:
        logger.debug("smtp_verify", host=self.settings.smtp_host, user=self.settings.account)
        try:
            await asyncio.to_thread(self._verify_sync)
        except Exception as e:
            raise _smtp_failure(e) from e

    async def deliver(self, message: EmailMessage) -> str | None:
        mime = self.build_mime(message)
        try:
            await asyncio.to_thread(self._send_sync, mime)
        except Exception as e:
            raise _smtp_failure(e, sending=True) from e
        return str(mime["Message-ID"])


def _smtp_failure(error: Exception, sending: bool = False) -> TransportFailure:
    """Map smtplib and socket errors to failure codes."""
    if isinstance(error, smtplib.SMTPAuthenticationError):
        return TransportFailure("EAUTH", str(error))
    if isinstance(error, socket.gaierror):
        return TransportFailure("ENOTFOUND", str(error))
    if isinstance(error, (TimeoutError, socket.timeout)):
        return TransportFailure("ETIMEDOUT", str(error))
    if isinstance(error, (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected, ConnectionError)):
        return TransportFailure("ECONNECTION", str(error))
    if isinstance(error, smtplib.SMTPException):
        return TransportFailure("EMESSAGE" if sending else "EPROTOCOL", str(error))
    if isinstance(error, OSError):
        return TransportFailure("ECONNECTION", str(error))
    return TransportFailure("UNKNOWN", str(error))


class SendGridTransport(EmailTransport):
    """SendGrid v3 Mail Send API over httpx."""

    def __init__(
        self,
        settings: SendGridSettings,
        sender_name: str = "ComplianceGuard",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            settings: SendGrid credentials and endpoint
            sender_name: Display name on the From header
            client: Shared client; a short-lived one is created per request when omitted
        """
        self.settings = settings
        self.sender_name = sender_name
        self._client = client

    @property
    def kind(self) -> TransportKind:
        return TransportKind.SENDGRID

    def sender(self, message: EmailMessage) -> str:
        return message.from_address.strip() or self.settings.from_email.strip()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.settings.api_url.rstrip('/')}{path}"
        headers = {
            "Authorization": f"Bearer {self.settings.api_key.get_secret_value().strip()}",
            "Content-Type": "application/json",
        }
        try:
            if self._client is not None:
                return await self._client.request(method, url, headers=headers, **kwargs)

            async with httpx.AsyncClient(timeout=httpx.Timeout(self.settings.timeout_seconds)) as client:
                return await client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportFailure("ETIMEDOUT", str(e)) from e
        except httpx.HTTPError as e:
            raise TransportFailure("ECONNECTION", str(e)) from e

    async def verify(self) -> None:
        response = await self._request("GET", "/scopes")
        if response.status_code == 401:
            raise TransportFailure("EAUTH", "SendGrid rejected the API key")
        if response.status_code != 200:
            raise TransportFailure(f"HTTP_{response.status_code}", response.text[:500])

    async def deliver(self, message: EmailMessage) -> str | None:
        content = [{"type": "text/plain", "value": message.plain_text or " "}]
        if message.html:
            content.append({"type": "text/html", "value": message.html})

        payload = {
            "personalizations": [
                {
                    "to": [{"email": message.to}],
                    "subject": message.subject,
                }
            ],
            "from": {"email": self.sender(message), "name": self.sender_name},
            "content": content,
        }

        response = await self._request("POST", "/mail/send", json=payload)
        if response.status_code not in SENDGRID_OK_STATUSES:
            code = "EAUTH" if response.status_code in (401, 403) else f"HTTP_{response.status_code}"
            raise TransportFailure(code, response.text[:500])

        return response.headers.get("X-Message-Id")


class DemoTransport(EmailTransport):
    """Writes the message to the console log instead of sending it."""

    def __init__(self, default_sender: str = "") -> None:
        self.default_sender = default_sender

    @property
    def kind(self) -> TransportKind:
        return TransportKind.DEMO

    def sender(self, message: EmailMessage) -> str:
        return message.from_address.strip() or self.default_sender

    async def verify(self) -> None:
        raise TransportFailure("EDEMO", "No valid email credentials configured")

    async def deliver(self, message: EmailMessage) -> str | None:
        logger.info(
            "demo_email",
            sender=self.sender(message) or "N/A",
            to=message.to,
            subject=message.subject,
            body=message.plain_text or "내용 없음",
        )
        return None


def build_transport(
    kind: TransportKind,
    email: EmailSettings,
    http_client: httpx.AsyncClient | None = None,
) -> EmailTransport:
    """Instantiate the transport for `kind`."""
    if kind == TransportKind.GMAIL_SMTP:
        return GmailSmtpTransport(email.gmail, sender_name=email.sender_name)
    if kind == TransportKind.SENDGRID:
        return SendGridTransport(email.sendgrid, sender_name=email.sender_name, client=http_client)
    return DemoTransport(default_sender=email.gmail.account or email.sendgrid.from_email)
