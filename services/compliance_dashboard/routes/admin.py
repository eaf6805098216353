"""
Admin Routes
============

Operator triggers: cache reload, monthly analysis, test email,
transport check and the email log.

Trigger endpoints respond only after the work has finished.

Version: 0.1.0
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from services.compliance_dashboard.analysis import MonthlyAnalysis, summarize
from services.compliance_dashboard.dependencies import (
    get_analysis,
    get_dispatcher,
    get_email_log,
    get_feed,
    get_loader,
)
from services.compliance_dashboard.exceptions import ValidationFailure
from services.compliance_dashboard.loader import SpreadsheetLoader
from services.compliance_dashboard.notifications import (
    EmailLog,
    EmailMessage,
    NotificationDispatcher,
    NotificationFeed,
)
from services.compliance_dashboard.notifications.templates import render_test_email
from services.compliance_dashboard.notifications.transports import is_email
from shared.logging import get_logger
from shared.models.common import ActionResponse
from shared.models.notification import AnalysisResponse, EmailLogResponse, FeedType

logger = get_logger(__name__)

router = APIRouter()

TEST_EMAIL_SUBJECT = "🧪 ComplianceGuard 이메일 테스트"


# =============================================================================
# Request Models
# =============================================================================


class MonthlyAnalysisRequest(BaseModel):
    """Optional per-request department -> recipient overrides."""

    model_config = ConfigDict(populate_by_name=True)

    department_emails: dict[str, str] = Field(default_factory=dict, alias="departmentEmails")


class EmailTestRequest(BaseModel):
    email: str = ""


# =============================================================================
# Data
# =============================================================================


@router.post("/sync", response_model=ActionResponse)
async def sync_spreadsheet(
    loader: SpreadsheetLoader = Depends(get_loader),
    feed: NotificationFeed = Depends(get_feed),
) -> ActionResponse:
    """Drop the cached records and read the spreadsheet again."""
    records = await loader.reload()
    logger.info("admin_sync_completed", records=len(records))

    message = f"Excel 데이터 동기화가 완료되었습니다. ({len(records)}건)"
    feed.push(FeedType.SYSTEM, "데이터 동기화", message)
    return ActionResponse(message=message)


@router.post("/monthly-analysis", response_model=AnalysisResponse)
async def run_monthly_analysis(
    request: MonthlyAnalysisRequest | None = None,
    analysis: MonthlyAnalysis = Depends(get_analysis),
) -> AnalysisResponse:
    """
    Send every department its monthly status email.

    Succeeds only when no department failed; skipped departments do not
    count as failures.
    """
    overrides = request.department_emails if request else None
    results = await analysis.run(datetime.now(), department_emails=overrides)
    counts = summarize(results)

    success = counts["failed"] == 0
    message = (
        "월간 분석이 완료되었습니다."
        if success
        else f"월간 분석이 완료되었으나 {counts['failed']}개 부서에 이메일 발송을 실패했습니다."
    )
    return AnalysisResponse(
        success=success,
        message=message,
        results=results,
        **counts,
    )


# =============================================================================
# Email
# =============================================================================


@router.post("/test-email", response_model=ActionResponse)
async def send_test_email(
    request: EmailTestRequest,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ActionResponse:
    address = request.email.strip()
    if not is_email(address):
        raise ValidationFailure("올바른 이메일 주소를 입력해주세요.")

    logger.info("test_email_requested", to=address)
    success = await dispatcher.send(
        EmailMessage(
            to=address,
            subject=TEST_EMAIL_SUBJECT,
            html=render_test_email(datetime.now()),
        )
    )
    return ActionResponse(
        success=success,
        message="테스트 이메일이 성공적으로 전송되었습니다." if success else "이메일 전송에 실패했습니다.",
    )


@router.post("/test-connection", response_model=ActionResponse)
async def test_connection(
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ActionResponse:
    """Verify the selected transport without sending anything."""
    transport = dispatcher.current_transport()
    success = await dispatcher.test_connection()
    return ActionResponse(
        success=success,
        message=(
            f"이메일 서버 연결에 성공했습니다. ({transport.value})"
            if success
            else f"이메일 서버 연결에 실패했습니다. ({transport.value})"
        ),
    )


@router.get("/email-log", response_model=EmailLogResponse)
async def read_email_log(email_log: EmailLog = Depends(get_email_log)) -> EmailLogResponse:
    lines = await email_log.tail()
    return EmailLogResponse(lines=lines, count=len(lines))


@router.delete("/email-log", response_model=ActionResponse)
async def clear_email_log(email_log: EmailLog = Depends(get_email_log)) -> ActionResponse:
    removed = await email_log.clear()
    return ActionResponse(
        message="이메일 로그를 삭제했습니다." if removed else "삭제할 이메일 로그가 없습니다.",
    )
