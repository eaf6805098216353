"""
Notification Dispatcher
=======================

Sends one email through whichever transport the current credentials
allow and records the outcome in the email log.

Transport selection happens on every call, so credentials added to the
environment take effect without a restart. Each call makes exactly one
delivery attempt on the selected transport; there is no retry and no
failover to the next transport within a call.

Version: 0.1.0
"""

import traceback
from collections.abc import Callable

from services.compliance_dashboard.exceptions import TransportFailure
from services.compliance_dashboard.notifications.email_log import EmailLog
from services.compliance_dashboard.notifications.transports import (
    EmailMessage,
    EmailTransport,
    build_transport,
    select_transport,
)
from shared.config import EmailSettings, TransportKind
from shared.logging import get_logger
from shared.models.notification import DeliveryReceipt


logger = get_logger(__name__)

DEMO_CONTEXT = "credentials validation"
SEND_CONTEXT = "email delivery"


def credential_summary(settings: EmailSettings) -> dict[str, str]:
    """Presence of credentials for the log, never their values."""
    return {
        "Gmail User": "SET" if settings.gmail.account else "NOT_SET",
        "Gmail Pass Length": str(len(settings.gmail.secret)),
        "SendGrid Key": "SET" if settings.sendgrid.api_key.get_secret_value() else "NOT_SET",
    }


class NotificationDispatcher:
    """Transport selection, delivery and logging for outgoing email."""

    def __init__(
        self,
        email_log: EmailLog,
        settings_factory: Callable[[], EmailSettings] = EmailSettings,
        transport_factory: Callable[[TransportKind, EmailSettings], EmailTransport] = build_transport,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            email_log: Shared email log
            settings_factory: Returns fresh email settings; called once per send
            transport_factory: Builds the transport for a selected kind
        """
        self.email_log = email_log
        self._settings_factory = settings_factory
        self._transport_factory = transport_factory

    def current_transport(self) -> TransportKind:
        """Transport that the next send would use."""
        return select_transport(self._settings_factory())

    async def dispatch(self, message: EmailMessage) -> DeliveryReceipt:
        """
        Send a message and report what happened.

        Demo mode writes the message to the console, records a credential
        validation entry in the email log and reports success. For real
        transports the receipt reflects actual delivery.

        Args:
            message: Message to send

        Returns:
            DeliveryReceipt for the attempt
        """
        settings = self._settings_factory()
        kind = select_transport(settings)
        transport = self._transport_factory(kind, settings)

        if kind == TransportKind.DEMO:
            await transport.deliver(message)
            await self.email_log.append_error(
                context=DEMO_CONTEXT,
                to=message.to,
                subject=message.subject,
                transport=kind.value,
                code="EDEMO",
                message="No valid email credentials configured; message written to console",
                credentials=credential_summary(settings),
            )
            logger.warning("email_demo_mode", to=message.to, subject=message.subject)
            return DeliveryReceipt(transport=kind, success=True)

        try:
            await transport.verify()
            message_id = await transport.deliver(message)
        except TransportFailure as e:
            logger.error(
                "email_delivery_failed",
                transport=kind.value,
                to=message.to,
                code=e.code,
                error=e.message,
            )
            await self.email_log.append_error(
                context=SEND_CONTEXT,
                to=message.to,
                subject=message.subject,
                transport=kind.value,
                code=e.code,
                message=e.message,
                stack=traceback.format_exc(),
                credentials=credential_summary(settings),
            )
            return DeliveryReceipt(transport=kind, success=False, error=f"{e.code}: {e.message}")

        await self.email_log.append_success(
            to=message.to,
            subject=message.subject,
            transport=kind.value,
            message_id=message_id,
        )
        logger.info(
            "email_sent",
            transport=kind.value,
            to=message.to,
            message_id=message_id,
        )
        return DeliveryReceipt(transport=kind, success=True, message_id=message_id)

    async def send(self, message: EmailMessage) -> bool:
        """Send a message; True when it was delivered (or accepted in demo mode)."""
        receipt = await self.dispatch(message)
        return receipt.success

    async def test_connection(self) -> bool:
        """
        Verify the currently selected transport without sending anything.

        Returns:
            False in demo mode or when verification fails
        """
        settings = self._settings_factory()
        kind = select_transport(settings)
        if kind == TransportKind.DEMO:
            logger.warning("email_connection_test_skipped", reason="no valid credentials")
            return False

        transport = self._transport_factory(kind, settings)
        try:
            await transport.verify()
        except TransportFailure as e:
            logger.error("email_connection_test_failed", transport=kind.value, code=e.code, error=e.message)
            return False

        logger.info("email_connection_test_passed", transport=kind.value)
        return True
