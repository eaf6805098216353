"""
Settings Module
===============

Pydantic-based configuration with environment variable loading.

Version: 0.1.0
"""

import re
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class TransportKind(str, Enum):
    """Outbound email transports, in order of preference."""

    GMAIL_SMTP = "gmail_smtp"
    SENDGRID = "sendgrid"
    DEMO = "demo"


DEFAULT_PRIORITY_DEPARTMENTS = [
    "환경기획그룹",
    "안전보건기획그룹",
    "정보보호사무국",
    "인사문화그룹",
]


class SpreadsheetSettings(BaseSettings):
    """Regulation spreadsheet source configuration."""

    model_config = SettingsConfigDict(env_prefix="SPREADSHEET_")

    path: Path = Path("data/law_list2ai.xlsx")
    sheet_name: str | None = None
    cache_ttl_seconds: float = 300.0


class GmailSettings(BaseSettings):
    """Gmail SMTP (primary transport) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GMAIL_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    user: str = ""
    password: SecretStr = Field(default=SecretStr(""), alias="GMAIL_PASS")
    app_password: SecretStr = Field(default=SecretStr(""), alias="GMAIL_APP_PASSWORD")
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    timeout_seconds: float = 20.0

    @property
    def account(self) -> str:
        """Account name with surrounding whitespace removed."""
        return self.user.strip()

    @property
    def secret(self) -> str:
        """App password with every whitespace character removed."""
        raw = self.password.get_secret_value() or self.app_password.get_secret_value()
        return re.sub(r"\s+", "", raw)


class SendGridSettings(BaseSettings):
    """SendGrid HTTP API (fallback transport) configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SENDGRID_",
        env_file=".env",
        extra="ignore",
    )

    api_key: SecretStr = SecretStr("")
    from_email: str = ""
    api_url: str = "https://api.sendgrid.com/v3"
    timeout_seconds: float = 20.0


class EmailSettings(BaseSettings):
    """
    Outbound email configuration.

    Re-instantiated on every send so credential changes in the
    environment are picked up without a restart.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sender_name: str = "ComplianceGuard"
    log_path: Path = Path("logging.txt")
    log_tail_lines: int = 50

    gmail: GmailSettings = Field(default_factory=GmailSettings)
    sendgrid: SendGridSettings = Field(default_factory=SendGridSettings)


class NotificationSettings(BaseSettings):
    """Department contact and notification feed configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    department_contacts: dict[str, str] = Field(default_factory=dict)
    default_recipient: str = ""
    priority_departments: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRIORITY_DEPARTMENTS)
    )
    feed_size: int = 100


class SchedulerSettings(BaseSettings):
    """Background job configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    enabled: bool = True
    monthly_day: int = Field(default=1, ge=1, le=28)
    monthly_hour: int = Field(default=9, ge=0, le=23)
    check_interval_seconds: float = 60.0
    reminder_interval_seconds: float = 300.0
    reminder_days: list[int] = Field(default_factory=lambda: [7, 1, 0])


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into list."""
        return [o.strip() for o in self.origins.split(",") if o.strip()]


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    port: int = 3000

    # Project paths
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)

    spreadsheet: SpreadsheetSettings = Field(default_factory=SpreadsheetSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
