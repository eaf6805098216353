"""
Compliance Scheduler
====================

Background loop for recurring work:

- the monthly analysis, once per month on the configured day and hour;
- effective-date reminders, every few minutes, for regulations that
  take effect in 7, 1 or 0 days.

The loop wakes on a fixed interval and decides what is due; errors are
logged and the loop keeps running.

Version: 0.1.0
"""

import asyncio
from collections.abc import Callable
from datetime import date, datetime

from services.compliance_dashboard.aggregation import upcoming_reminders
from services.compliance_dashboard.analysis import MonthlyAnalysis
from services.compliance_dashboard.loader import SpreadsheetLoader
from services.compliance_dashboard.notifications.templates import render_regulation_reminder
from services.compliance_dashboard.notifications.transports import EmailMessage
from shared.config import SchedulerSettings
from shared.logging import get_logger
from shared.models.notification import FeedType


logger = get_logger(__name__)

REMINDER_TITLES = {
    7: "7일 전 알림",
    1: "1일 전 긴급 알림",
    0: "시행일 당일 알림",
}


class ComplianceScheduler:
    """Runs the monthly analysis and effective-date reminders."""

    def __init__(
        self,
        analysis: MonthlyAnalysis,
        loader: SpreadsheetLoader,
        settings: SchedulerSettings,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            analysis: Monthly analysis run; its dispatcher, feed and contacts
                are reused for reminders
            loader: Shared spreadsheet loader
            settings: Timing configuration
            clock: Returns the current local time
        """
        self.analysis = analysis
        self.loader = loader
        self.settings = settings
        self.clock = clock

        self._running = False
        self._task: asyncio.Task | None = None
        self._last_monthly_run: tuple[int, int] | None = None
        self._last_reminder_check: datetime | None = None
        self._reminded: set[tuple[str, int, date]] = set()

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Spawn the scheduler loop on the running event loop."""
        if self._task is not None and not self._task.done():
            return
        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(
            "scheduler_started",
            monthly_day=self.settings.monthly_day,
            monthly_hour=self.settings.monthly_hour,
            reminder_interval_seconds=self.settings.reminder_interval_seconds,
        )

    async def stop(self) -> None:
        """Stop the loop and wait for it to exit."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("scheduler_stopped")

    async def _run(self) -> None:
        while self._running:
            try:
                await self.tick(self.clock())
            except Exception as e:
                logger.error("scheduler_loop_error", error=str(e))

            await asyncio.sleep(self.settings.check_interval_seconds)

    async def tick(self, now: datetime) -> None:
        """Run whatever is due at `now`."""
        if self.monthly_due(now):
            self._last_monthly_run = (now.year, now.month)
            await self.run_monthly(now)

        if self.reminders_due(now):
            self._last_reminder_check = now
            await self.check_reminders(now)

    def monthly_due(self, now: datetime) -> bool:
        """True on the configured day and hour, once per month."""
        if self._last_monthly_run == (now.year, now.month):
            return False
        return now.day == self.settings.monthly_day and now.hour == self.settings.monthly_hour

    def reminders_due(self, now: datetime) -> bool:
        if self._last_reminder_check is None:
            return True
        elapsed = (now - self._last_reminder_check).total_seconds()
        return elapsed >= self.settings.reminder_interval_seconds

    async def run_monthly(self, now: datetime) -> None:
        logger.info("scheduled_monthly_analysis", year=now.year, month=now.month)
        try:
            await self.analysis.run(now)
        except Exception as e:
            logger.error("scheduled_monthly_analysis_failed", error=str(e))

    async def check_reminders(self, now: datetime) -> int:
        """
        Announce regulations whose effective date is 7, 1 or 0 days away.

        Each (regulation, days) pair is announced at most once per day. A
        feed notice is always raised; an email goes out when the
        department has a configured contact.

        Returns:
            Number of new reminders raised
        """
        records = await self.loader.load_all()
        today = now.date()
        raised = 0

        for days_remaining, regulation in upcoming_reminders(records, today, self.settings.reminder_days):
            key = (regulation.seq_no, days_remaining, today)
            if key in self._reminded:
                continue
            self._reminded.add(key)
            raised += 1

            title = REMINDER_TITLES.get(days_remaining, f"{days_remaining}일 전 알림")
            logger.info(
                "regulation_reminder",
                regulation=regulation.name,
                department=regulation.department,
                days_remaining=days_remaining,
            )
            self.analysis.feed.push(
                FeedType.REGULATION_CHANGE,
                title,
                f"{regulation.name} 시행일: {regulation.effective_date} ({regulation.department})",
            )

            contact = (self.analysis.contacts.get(regulation.department) or "").strip()
            if contact:
                await self.analysis.dispatcher.send(
                    EmailMessage(
                        to=contact,
                        subject=f"[법규 시행 알림] {regulation.name} - {title}",
                        html=render_regulation_reminder(regulation, days_remaining),
                    )
                )

        self._reminded = {key for key in self._reminded if key[2] == today}
        return raised
