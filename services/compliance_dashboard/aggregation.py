"""
Department Aggregation
======================

Derives per-department progress from regulation effective dates.

Effective dates are free text (``YYYY-MM-DD``, ``YYYY.MM`` or ``None``),
so classification is done by substring and pattern matching rather than
date parsing:

- a record is *due this year* when its effective date contains the
  current year;
- its month is the two digits following ``<year>-``;
- it is *due this month* when that month is the current month, and
  *completed* when that month lies before the current month.

A record whose date fails these checks still counts towards the
department total but towards none of the date-based counts.

Version: 0.1.0
"""

import math
import re
from collections.abc import Iterable, Sequence
from datetime import date

from shared.config.settings import DEFAULT_PRIORITY_DEPARTMENTS
from shared.logging import get_logger
from shared.models.department import DepartmentStat
from shared.models.regulation import (
    Amendment,
    DashboardStats,
    Regulation,
    YearlyAmendments,
    is_blank,
)


logger = get_logger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def in_year(effective_date: str, year: int) -> bool:
    """Check whether a free-text effective date mentions `year`."""
    return not is_blank(effective_date) and str(year) in effective_date


def extract_month(effective_date: str, year: int) -> int | None:
    """
    Month of a ``<year>-MM`` effective date.

    Returns None for blank dates, dates outside `year`, and dates that
    mention `year` without the ``-MM`` suffix (e.g. ``2025.06``).
    """
    if not in_year(effective_date, year):
        return None
    match = re.search(rf"{year}-(\d{{2}})", effective_date)
    if not match:
        return None
    return int(match.group(1))


def year_partition(records: Iterable[Regulation], year: int) -> list[Regulation]:
    """Records whose effective date falls in `year`."""
    return [r for r in records if in_year(r.effective_date, year)]


def progress_percentage(completed: int, due: int) -> int:
    """Completed share of due regulations as a whole percent; 0 when nothing is due."""
    if due <= 0:
        return 0
    return _round_half_up(100 * completed / due)


def _department_stat(name: str, records: Sequence[Regulation], now: date) -> DepartmentStat:
    yearly = year_partition(records, now.year)
    months = [extract_month(r.effective_date, now.year) for r in yearly]

    current_month_due = sum(1 for m in months if m == now.month)
    completed_to_date = sum(1 for m in months if m is not None and 1 <= m < now.month)

    analyzed = [r for r in records if r.has_ai_summary]

    return DepartmentStat(
        name=name,
        total=len(records),
        yearly_due=len(yearly),
        current_month_due=current_month_due,
        completed_to_date=completed_to_date,
        progress_percentage=progress_percentage(completed_to_date, len(yearly)),
        analyzed=len(analyzed),
        follow_up_required=sum(1 for r in analyzed if r.has_follow_up),
    )


def order_departments(
    stats: Sequence[DepartmentStat],
    priority: Sequence[str] = DEFAULT_PRIORITY_DEPARTMENTS,
) -> list[DepartmentStat]:
    """
    Sort by total descending, then move priority departments to the front.

    Priority departments appear in `priority` order; the remaining
    departments keep their total-descending order.
    """
    by_total = sorted(stats, key=lambda s: s.total, reverse=True)
    by_name = {s.name: s for s in by_total}

    front = [by_name[name] for name in priority if name in by_name]
    front_names = {s.name for s in front}
    return front + [s for s in by_total if s.name not in front_names]


def compute_department_stats(
    records: Sequence[Regulation],
    now: date,
    priority: Sequence[str] = DEFAULT_PRIORITY_DEPARTMENTS,
) -> list[DepartmentStat]:
    """
    Compute progress statistics for every department named in `records`.

    Args:
        records: Loaded regulation records
        now: Reference date; its year and month drive the classification
        priority: Department names pinned to the front of the result

    Returns:
        One DepartmentStat per distinct, non-blank department name

    Raises:
        TypeError: If `records` is None
    """
    if records is None:
        raise TypeError("records must be a sequence of Regulation, not None")

    grouped: dict[str, list[Regulation]] = {}
    for record in records:
        if is_blank(record.department):
            continue
        grouped.setdefault(record.department, []).append(record)

    stats = [_department_stat(name, group, now) for name, group in grouped.items()]

    logger.debug(
        "department_stats_computed",
        departments=len(stats),
        year=now.year,
        month=now.month,
    )
    return order_departments(stats, priority)


def department_stat(records: Sequence[Regulation], department: str, now: date) -> DepartmentStat:
    """Statistics for a single department (exact name match)."""
    return _department_stat(department, [r for r in records if r.department == department], now)


def current_month_regulations(
    records: Sequence[Regulation],
    department: str,
    now: date,
) -> list[Regulation]:
    """A department's records that take effect in the current month."""
    return [
        r
        for r in records
        if r.department == department and extract_month(r.effective_date, now.year) == now.month
    ]


# =============================================================================
# Dashboard views
# =============================================================================


def dashboard_stats(records: Sequence[Regulation], now: date) -> DashboardStats:
    """Headline counts for the dashboard."""
    departments = {r.department for r in records if not is_blank(r.department)}
    return DashboardStats(
        total_regulations=len(records),
        total_departments=len(departments),
        risk_items=sum(1 for r in records if r.has_follow_up),
        yearly_amendments=len(year_partition(records, now.year)),
    )


def monthly_amendments(records: Sequence[Regulation], now: date) -> list[Amendment]:
    """Regulations taking effect in the current month."""
    return [
        Amendment.from_regulation(r)
        for r in records
        if extract_month(r.effective_date, now.year) == now.month
    ]


def yearly_amendments(records: Sequence[Regulation], now: date) -> YearlyAmendments:
    """Regulations taking effect in the current year."""
    amendments = [Amendment.from_regulation(r) for r in year_partition(records, now.year)]
    return YearlyAmendments(year=now.year, total_count=len(amendments), amendments=amendments)


def _parse_iso_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def upcoming_reminders(
    records: Iterable[Regulation],
    today: date,
    days: Iterable[int] = (7, 1, 0),
) -> list[tuple[int, Regulation]]:
    """
    Regulations whose effective date is exactly `d` days away, for each `d`.

    Only full ``YYYY-MM-DD`` dates are considered.

    Returns:
        (days_remaining, regulation) pairs in sheet order
    """
    wanted = set(days)
    reminders: list[tuple[int, Regulation]] = []

    for record in records:
        if is_blank(record.effective_date):
            continue
        effective = _parse_iso_date(record.effective_date)
        if effective is None:
            continue
        remaining = (effective - today).days
        if remaining in wanted:
            reminders.append((remaining, record))

    return reminders
