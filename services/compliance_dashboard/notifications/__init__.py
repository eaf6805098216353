"""
Notifications
=============

Email transports, dispatch, templates, the email log and the in-app
notification feed.
"""

from services.compliance_dashboard.notifications.dispatcher import NotificationDispatcher
from services.compliance_dashboard.notifications.email_log import EmailLog
from services.compliance_dashboard.notifications.feed import NotificationFeed
from services.compliance_dashboard.notifications.transports import (
    DemoTransport,
    EmailMessage,
    EmailTransport,
    GmailSmtpTransport,
    SendGridTransport,
    build_transport,
    select_transport,
    valid_gmail_credentials,
    valid_sendgrid_credentials,
)

__all__ = [
    "NotificationDispatcher",
    "EmailLog",
    "NotificationFeed",
    "DemoTransport",
    "EmailMessage",
    "EmailTransport",
    "GmailSmtpTransport",
    "SendGridTransport",
    "build_transport",
    "select_transport",
    "valid_gmail_credentials",
    "valid_sendgrid_credentials",
]
