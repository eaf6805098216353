"""
Shared Models
=============

Pydantic models shared across ComplianceGuard services.

Models:
- Regulation models (Regulation, Amendment, YearlyAmendments, DashboardStats)
- Department models (DepartmentStat, DepartmentRef)
- Notification models (DeliveryReceipt, DepartmentDispatchResult, FeedNotification)
- Common response models (ActionResponse, ErrorResponse, HealthResponse)
"""

from shared.models.common import ActionResponse, ErrorResponse, HealthResponse
from shared.models.department import DepartmentRef, DepartmentStat
from shared.models.notification import (
    AnalysisResponse,
    DeliveryReceipt,
    DepartmentDispatchResult,
    DispatchStatus,
    EmailLogResponse,
    FeedNotification,
    FeedType,
)
from shared.models.regulation import (
    Amendment,
    DashboardStats,
    Regulation,
    YearlyAmendments,
)

__all__ = [
    "ActionResponse",
    "ErrorResponse",
    "HealthResponse",
    "DepartmentRef",
    "DepartmentStat",
    "AnalysisResponse",
    "DeliveryReceipt",
    "DepartmentDispatchResult",
    "DispatchStatus",
    "EmailLogResponse",
    "FeedNotification",
    "FeedType",
    "Amendment",
    "DashboardStats",
    "Regulation",
    "YearlyAmendments",
]
