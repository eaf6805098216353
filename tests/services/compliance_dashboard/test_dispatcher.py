"""
Notification Dispatcher Tests
=============================

Tests for transport selection per send, the delivery contract and
email log entries.

Version: 0.1.0
"""

from pathlib import Path

import pytest
from pydantic import SecretStr

from services.compliance_dashboard.exceptions import TransportFailure
from services.compliance_dashboard.notifications import (
    EmailLog,
    EmailMessage,
    NotificationDispatcher,
)
from services.compliance_dashboard.notifications.transports import DemoTransport, EmailTransport
from shared.config import EmailSettings, GmailSettings, SendGridSettings, TransportKind


GMAIL = GmailSettings(user="sender@example.com", password=SecretStr("abcdefghijklmnop"))
SENDGRID = SendGridSettings(api_key=SecretStr("SG.key"), from_email="noreply@example.com")


class FakeTransport(EmailTransport):
    """Records calls and optionally fails."""

    def __init__(self, kind: TransportKind, failure: TransportFailure | None = None) -> None:
        self._kind = kind
        self.failure = failure
        self.verified = 0
        self.delivered: list[EmailMessage] = []

    @property
    def kind(self) -> TransportKind:
        return self._kind

    def sender(self, message: EmailMessage) -> str:
        return "sender@example.com"

    async def verify(self) -> None:
        self.verified += 1

    async def deliver(self, message: EmailMessage) -> str | None:
        if self.failure is not None:
            raise self.failure
        self.delivered.append(message)
        return "<fake-id@example.com>"


class TransportFactory:
    """Hands out one fake transport per kind and remembers what was built."""

    def __init__(self, failure: TransportFailure | None = None) -> None:
        self.failure = failure
        self.built: list[TransportKind] = []
        self.transports: dict[TransportKind, EmailTransport] = {}

    def __call__(self, kind: TransportKind, settings: EmailSettings) -> EmailTransport:
        self.built.append(kind)
        if kind == TransportKind.DEMO:
            transport: EmailTransport = DemoTransport()
        else:
            transport = FakeTransport(kind, self.failure)
        self.transports[kind] = transport
        return transport


@pytest.fixture
def email_log(tmp_path: Path) -> EmailLog:
    return EmailLog(tmp_path / "logging.txt")


@pytest.fixture
def message() -> EmailMessage:
    return EmailMessage(to="dept@example.com", subject="테스트 제목", html="<p>본문</p>")


class TestDispatch:
    """Tests for the delivery contract."""

    @pytest.mark.asyncio
    async def test_gmail_success(self, email_log: EmailLog, message: EmailMessage) -> None:
        factory = TransportFactory()
        dispatcher = NotificationDispatcher(
            email_log,
            settings_factory=lambda: EmailSettings(gmail=GMAIL, sendgrid=SENDGRID),
            transport_factory=factory,
        )

        receipt = await dispatcher.dispatch(message)

        assert receipt.success is True
        assert receipt.transport == TransportKind.GMAIL_SMTP
        assert receipt.message_id == "<fake-id@example.com>"
        transport = factory.transports[TransportKind.GMAIL_SMTP]
        assert transport.verified == 1
        assert transport.delivered == [message]

        log = "\n".join(await email_log.tail())
        assert "EMAIL SUCCESS LOG" in log
        assert "Email To: dept@example.com" in log
        assert "Transport: gmail_smtp" in log

    @pytest.mark.asyncio
    async def test_failure_returns_false_without_failover(
        self, email_log: EmailLog, message: EmailMessage
    ) -> None:
        """A failed Gmail send is not retried on SendGrid in the same call."""
        factory = TransportFactory(failure=TransportFailure("EAUTH", "Invalid login"))
        dispatcher = NotificationDispatcher(
            email_log,
            settings_factory=lambda: EmailSettings(gmail=GMAIL, sendgrid=SENDGRID),
            transport_factory=factory,
        )

        receipt = await dispatcher.dispatch(message)

        assert receipt.success is False
        assert receipt.error == "EAUTH: Invalid login"
        assert factory.built == [TransportKind.GMAIL_SMTP]

        log = "\n".join(await email_log.tail(200))
        assert "EMAIL ERROR LOG" in log
        assert "Error Code: EAUTH" in log
        assert "Error Message: Invalid login" in log
        assert "abcdefghijklmnop" not in log

    @pytest.mark.asyncio
    async def test_sendgrid_used_when_gmail_invalid(
        self, email_log: EmailLog, message: EmailMessage
    ) -> None:
        factory = TransportFactory()
        dispatcher = NotificationDispatcher(
            email_log,
            settings_factory=lambda: EmailSettings(sendgrid=SENDGRID),
            transport_factory=factory,
        )

        assert await dispatcher.send(message) is True
        assert factory.built == [TransportKind.SENDGRID]

    @pytest.mark.asyncio
    async def test_demo_mode_reports_success_and_logs(
        self, email_log: EmailLog, message: EmailMessage
    ) -> None:
        dispatcher = NotificationDispatcher(
            email_log,
            settings_factory=EmailSettings,
            transport_factory=TransportFactory(),
        )

        receipt = await dispatcher.dispatch(message)

        assert receipt.success is True
        assert receipt.transport == TransportKind.DEMO
        log = "\n".join(await email_log.tail())
        assert "Context: credentials validation" in log
        assert "Gmail User: NOT_SET" in log

    @pytest.mark.asyncio
    async def test_selection_is_fresh_per_call(
        self, email_log: EmailLog, message: EmailMessage, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Credentials added between calls take effect on the next call."""
        factory = TransportFactory()
        dispatcher = NotificationDispatcher(email_log, transport_factory=factory)

        await dispatcher.send(message)
        monkeypatch.setenv("GMAIL_USER", "sender@example.com")
        monkeypatch.setenv("GMAIL_PASS", "abcd efgh ijkl mnop")
        await dispatcher.send(message)

        assert factory.built == [TransportKind.DEMO, TransportKind.GMAIL_SMTP]

    @pytest.mark.asyncio
    async def test_log_write_failure_does_not_fail_send(
        self, tmp_path: Path, message: EmailMessage
    ) -> None:
        dispatcher = NotificationDispatcher(
            EmailLog(tmp_path / "missing-dir" / "logging.txt"),
            settings_factory=lambda: EmailSettings(gmail=GMAIL),
            transport_factory=TransportFactory(),
        )

        assert await dispatcher.send(message) is True


class TestConnectionCheck:
    @pytest.mark.asyncio
    async def test_demo_is_not_connected(self, email_log: EmailLog) -> None:
        dispatcher = NotificationDispatcher(email_log, transport_factory=TransportFactory())

        assert await dispatcher.test_connection() is False

    @pytest.mark.asyncio
    async def test_verifies_selected_transport(self, email_log: EmailLog) -> None:
        factory = TransportFactory()
        dispatcher = NotificationDispatcher(
            email_log,
            settings_factory=lambda: EmailSettings(gmail=GMAIL),
            transport_factory=factory,
        )

        assert await dispatcher.test_connection() is True
        assert factory.transports[TransportKind.GMAIL_SMTP].verified == 1
        assert dispatcher.current_transport() == TransportKind.GMAIL_SMTP
