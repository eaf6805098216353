"""
Monthly Analysis
================

Sends each department its monthly status email: the department's
progress figures plus every regulation taking effect this month.

Departments are processed one at a time. A failed send is recorded and
the run moves on to the next department.

Version: 0.1.0
"""

from collections.abc import Mapping, Sequence
from datetime import datetime

from services.compliance_dashboard.aggregation import (
    compute_department_stats,
    current_month_regulations,
)
from services.compliance_dashboard.exceptions import DataSourceUnavailable
from services.compliance_dashboard.loader import SpreadsheetLoader
from services.compliance_dashboard.notifications.dispatcher import NotificationDispatcher
from services.compliance_dashboard.notifications.feed import NotificationFeed
from services.compliance_dashboard.notifications.templates import (
    monthly_subject,
    render_monthly_department_email,
)
from services.compliance_dashboard.notifications.transports import EmailMessage
from shared.config.settings import DEFAULT_PRIORITY_DEPARTMENTS
from shared.logging import get_logger
from shared.models.department import DepartmentStat
from shared.models.notification import DepartmentDispatchResult, DispatchStatus, FeedType
from shared.models.regulation import Regulation


logger = get_logger(__name__)


def summarize(results: Sequence[DepartmentDispatchResult]) -> dict[str, int]:
    """Count results per status."""
    counts = {status.value: 0 for status in DispatchStatus}
    for result in results:
        counts[result.status.value] += 1
    return counts


class MonthlyAnalysis:
    """Per-department monthly email run."""

    def __init__(
        self,
        loader: SpreadsheetLoader,
        dispatcher: NotificationDispatcher,
        feed: NotificationFeed,
        contacts: Mapping[str, str] | None = None,
        default_recipient: str = "",
        priority: Sequence[str] = DEFAULT_PRIORITY_DEPARTMENTS,
    ) -> None:
        """
        Initialize the run.

        Args:
            loader: Shared spreadsheet loader
            dispatcher: Email dispatcher
            feed: Feed that receives the completion notice
            contacts: Configured department -> address mapping
            default_recipient: Address used when a department has no contact
            priority: Departments processed first
        """
        self.loader = loader
        self.dispatcher = dispatcher
        self.feed = feed
        self.contacts = dict(contacts or {})
        self.default_recipient = default_recipient
        self.priority = list(priority)

    def resolve_recipient(
        self,
        department: str,
        department_emails: Mapping[str, str] | None = None,
    ) -> str | None:
        """Request mapping first, then configured contacts, then the default address."""
        for source in (department_emails or {}, self.contacts):
            address = (source.get(department) or "").strip()
            if address:
                return address
        return self.default_recipient.strip() or None

    async def run(
        self,
        now: datetime,
        department_emails: Mapping[str, str] | None = None,
    ) -> list[DepartmentDispatchResult]:
        """
        Email every department its monthly status.

        Args:
            now: Reference time; selects the year and month
            department_emails: Per-request recipient overrides

        Returns:
            One result per department, in department order

        Raises:
            DataSourceUnavailable: If the spreadsheet cannot be read; nothing is sent
        """
        logger.info("monthly_analysis_started", year=now.year, month=now.month)

        try:
            records = await self.loader.load_all()
        except DataSourceUnavailable:
            self.feed.push(FeedType.ERROR, "월간 분석 실패", "월간 법규 분석 중 오류가 발생했습니다.")
            raise

        stats = compute_department_stats(records, now.date(), self.priority)
        results: list[DepartmentDispatchResult] = []

        for stat in stats:
            regulations = current_month_regulations(records, stat.name, now.date())
            recipient = self.resolve_recipient(stat.name, department_emails)
            result = await self._process_department(stat, regulations, recipient, now)
            results.append(result)

        counts = summarize(results)
        self.feed.push(
            FeedType.SYSTEM,
            "월간 분석 완료",
            f"{now.month}월 전체 부서 법규 분석이 완료되었습니다. "
            f"(발송 {counts['sent']}건, 실패 {counts['failed']}건, 제외 {counts['skipped']}건)",
        )
        logger.info("monthly_analysis_completed", **counts)
        return results

    async def _process_department(
        self,
        stat: DepartmentStat,
        regulations: list[Regulation],
        recipient: str | None,
        now: datetime,
    ) -> DepartmentDispatchResult:
        if not recipient:
            logger.info("monthly_analysis_skipped", department=stat.name, reason="no recipient")
            return DepartmentDispatchResult(
                department=stat.name,
                status=DispatchStatus.SKIPPED,
                success=False,
                regulation_count=len(regulations),
                error="수신자 이메일이 설정되지 않았습니다",
            )

        if not regulations:
            logger.info("monthly_analysis_skipped", department=stat.name, reason="nothing due")
            return DepartmentDispatchResult(
                department=stat.name,
                status=DispatchStatus.SKIPPED,
                success=True,
                recipient=recipient,
                regulation_count=0,
            )

        message = EmailMessage(
            to=recipient,
            subject=monthly_subject(stat.name, now.month),
            html=render_monthly_department_email(
                stat.name,
                stat,
                regulations,
                now,
                contact_address=self.default_recipient,
            ),
        )

        try:
            receipt = await self.dispatcher.dispatch(message)
        except Exception as e:
            logger.exception("monthly_analysis_department_error", department=stat.name)
            return DepartmentDispatchResult(
                department=stat.name,
                status=DispatchStatus.FAILED,
                success=False,
                recipient=recipient,
                regulation_count=len(regulations),
                error=str(e),
            )

        status = DispatchStatus.SENT if receipt.success else DispatchStatus.FAILED
        logger.info(
            "monthly_analysis_department_done",
            department=stat.name,
            status=status.value,
            regulations=len(regulations),
        )
        return DepartmentDispatchResult(
            department=stat.name,
            status=status,
            success=receipt.success,
            recipient=recipient,
            regulation_count=len(regulations),
            transport=receipt.transport,
            error=receipt.error,
        )
