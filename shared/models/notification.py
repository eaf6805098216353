"""
Notification Models
===================

Delivery receipts, per-department dispatch results and the in-app
notification feed.

Version: 0.1.0
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from shared.config import TransportKind
from shared.models.common import ActionResponse


class DispatchStatus(str, Enum):
    """Outcome of one department in a monthly run."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


class FeedType(str, Enum):
    """Kinds of in-app notifications."""

    SYSTEM = "시스템"
    ERROR = "오류"
    REGULATION_CHANGE = "법규변경"


class DeliveryReceipt(BaseModel):
    """Result of a single send attempt."""

    transport: TransportKind
    success: bool
    message_id: str | None = None
    error: str | None = None


class DepartmentDispatchResult(BaseModel):
    """Tagged result for one department in a multi-department run."""

    model_config = ConfigDict(populate_by_name=True)

    department: str
    status: DispatchStatus
    success: bool
    recipient: str | None = None
    regulation_count: int = Field(default=0, alias="regulationCount")
    transport: TransportKind | None = None
    error: str | None = None


class AnalysisResponse(ActionResponse):
    """Monthly analysis trigger result with the per-department breakdown."""

    sent: int = 0
    failed: int = 0
    skipped: int = 0
    results: list[DepartmentDispatchResult] = Field(default_factory=list)


class EmailLogResponse(BaseModel):
    """Tail of the shared email log."""

    success: bool = True
    lines: list[str] = Field(default_factory=list)
    count: int = 0


class FeedNotification(BaseModel):
    """An in-app notice raised by a background or admin action."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    type: FeedType
    title: str
    message: str
    read: bool = False
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        alias="createdAt",
    )
