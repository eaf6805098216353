"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from shared.config import settings

    print(settings.environment)
    print(settings.spreadsheet.path)
"""

from shared.config.settings import (
    CORSSettings,
    EmailSettings,
    Environment,
    GmailSettings,
    LogLevel,
    NotificationSettings,
    SchedulerSettings,
    SendGridSettings,
    Settings,
    SpreadsheetSettings,
    TransportKind,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "TransportKind",
    "SpreadsheetSettings",
    "GmailSettings",
    "SendGridSettings",
    "EmailSettings",
    "NotificationSettings",
    "SchedulerSettings",
    "CORSSettings",
]
