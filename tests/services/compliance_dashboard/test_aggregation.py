"""
Aggregation Tests
=================

Tests for department progress statistics and the dashboard views.

Version: 0.1.0
"""

from datetime import date

import pytest

from services.compliance_dashboard.aggregation import (
    compute_department_stats,
    current_month_regulations,
    dashboard_stats,
    department_stat,
    extract_month,
    in_year,
    monthly_amendments,
    order_departments,
    progress_percentage,
    upcoming_reminders,
    yearly_amendments,
)
from services.compliance_dashboard.loader import SpreadsheetLoader
from services.compliance_dashboard.queries import by_department
from shared.models.department import DepartmentStat


NOW = date(2025, 6, 15)


# =============================================================================
# Date classification
# =============================================================================


class TestDateClassification:
    """Tests for the substring and pattern based date checks."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2025-06-15", True),
            ("2025.06", True),
            ("2024-12-31", False),
            ("None", False),
            ("", False),
        ],
    )
    def test_in_year(self, value: str, expected: bool) -> None:
        assert in_year(value, 2025) is expected

    def test_extract_month(self) -> None:
        assert extract_month("2025-06-15", 2025) == 6
        assert extract_month("2025-11", 2025) == 11

    def test_dotted_date_has_no_month(self) -> None:
        """In the year, but not in YYYY-MM form."""
        assert extract_month("2025.06", 2025) is None

    def test_other_year_has_no_month(self) -> None:
        assert extract_month("2024-06-01", 2025) is None


class TestProgressPercentage:
    def test_rounds_half_up(self) -> None:
        assert progress_percentage(1, 8) == 13
        assert progress_percentage(1, 3) == 33
        assert progress_percentage(2, 3) == 67

    def test_zero_guard(self) -> None:
        assert progress_percentage(0, 0) == 0


# =============================================================================
# Department statistics
# =============================================================================


class TestDepartmentStats:
    """Tests for per-department progress."""

    def test_full_year_of_records(self, make_regulation) -> None:
        """Twelve monthly records with now in June."""
        records = [
            make_regulation(seq_no=str(m), effective_date=f"2025-{m:02d}-01")
            for m in range(1, 13)
        ]

        stat = department_stat(records, "환경기획그룹", NOW)

        assert stat.total == 12
        assert stat.yearly_due == 12
        assert stat.current_month_due == 1
        assert stat.completed_to_date == 5
        assert stat.progress_percentage == 42

    def test_zero_year_partition(self, make_regulation) -> None:
        """Records only outside the year still count towards the total."""
        records = [
            make_regulation(seq_no="1", effective_date="2024-03-01"),
            make_regulation(seq_no="2", effective_date="None"),
        ]

        stat = department_stat(records, "환경기획그룹", NOW)

        assert stat.total == 2
        assert stat.yearly_due == 0
        assert stat.progress_percentage == 0

    def test_in_year_without_month_counts_only_yearly(self, make_regulation) -> None:
        stat = department_stat([make_regulation(effective_date="2025.03")], "환경기획그룹", NOW)

        assert stat.yearly_due == 1
        assert stat.completed_to_date == 0
        assert stat.current_month_due == 0

    def test_analysis_counts(self, make_regulation) -> None:
        records = [
            make_regulation(seq_no="1", ai_summary="요약", ai_follow_up="조치 필요"),
            make_regulation(seq_no="2", ai_summary="요약", ai_follow_up="내용/조치사항 없음"),
            make_regulation(seq_no="3"),
        ]

        stat = department_stat(records, "환경기획그룹", NOW)

        assert stat.analyzed == 2
        assert stat.follow_up_required == 1

    def test_groups_by_name_and_skips_blank(self, make_regulation) -> None:
        records = [
            make_regulation(seq_no="1", department="재무그룹"),
            make_regulation(seq_no="2", department="재무그룹 "),
            make_regulation(seq_no="3", department="None"),
            make_regulation(seq_no="4", department=""),
        ]

        stats = compute_department_stats(records, NOW)

        assert [s.name for s in stats] == ["재무그룹"]
        assert stats[0].total == 2

    def test_none_input_rejected(self) -> None:
        with pytest.raises(TypeError):
            compute_department_stats(None, NOW)

    def test_empty_input(self) -> None:
        assert compute_department_stats([], NOW) == []


class TestOrdering:
    """Tests for department ordering."""

    def test_priority_departments_first(self) -> None:
        stats = [
            DepartmentStat(name="재무그룹", total=10),
            DepartmentStat(name="인사문화그룹", total=1),
            DepartmentStat(name="구매그룹", total=5),
            DepartmentStat(name="환경기획그룹", total=2),
        ]

        ordered = order_departments(stats)

        assert [s.name for s in ordered] == ["환경기획그룹", "인사문화그룹", "재무그룹", "구매그룹"]

    def test_ties_keep_first_seen_order(self) -> None:
        stats = [
            DepartmentStat(name="B", total=3),
            DepartmentStat(name="A", total=3),
        ]

        assert [s.name for s in order_departments(stats, priority=[])] == ["B", "A"]


# =============================================================================
# Dashboard views
# =============================================================================


class TestDashboardViews:
    """Tests for the headline counts and amendment lists."""

    @pytest.fixture
    def records(self, make_regulation):
        return [
            make_regulation(seq_no="1", effective_date="2025-06-01", ai_follow_up="조치 필요"),
            make_regulation(seq_no="2", effective_date="2025-02-01", department="재무그룹"),
            make_regulation(seq_no="3", effective_date="2026-06-01", department="None"),
        ]

    def test_dashboard_stats(self, records) -> None:
        stats = dashboard_stats(records, NOW)

        assert stats.total_regulations == 3
        assert stats.total_departments == 2
        assert stats.risk_items == 1
        assert stats.yearly_amendments == 2

    def test_monthly_amendments(self, records) -> None:
        assert [a.effective_date for a in monthly_amendments(records, NOW)] == ["2025-06-01"]

    def test_yearly_amendments(self, records) -> None:
        result = yearly_amendments(records, NOW)

        assert result.year == 2025
        assert result.total_count == 2
        assert result.model_dump(by_alias=True)["totalCount"] == 2

    def test_current_month_regulations(self, records) -> None:
        assert [r.seq_no for r in current_month_regulations(records, "환경기획그룹", NOW)] == ["1"]
        assert current_month_regulations(records, "재무그룹", NOW) == []


class TestUpcomingReminders:
    def test_matches_configured_offsets(self, make_regulation) -> None:
        records = [
            make_regulation(seq_no="1", effective_date="2025-06-22"),
            make_regulation(seq_no="2", effective_date="2025-06-16"),
            make_regulation(seq_no="3", effective_date="2025-06-15"),
            make_regulation(seq_no="4", effective_date="2025-06-20"),
            make_regulation(seq_no="5", effective_date="2025.06"),
            make_regulation(seq_no="6", effective_date="None"),
        ]

        reminders = upcoming_reminders(records, NOW)

        assert [(days, r.seq_no) for days, r in reminders] == [(7, "1"), (1, "2"), (0, "3")]


# =============================================================================
# End to end
# =============================================================================


@pytest.mark.asyncio
async def test_spreadsheet_to_department_stats(workbook_writer) -> None:
    """Load, filter by department, aggregate."""
    path = workbook_writer(
        [
            {"번호": 1, "법률명": "산업안전보건법", "담당부서": "안전보건기획그룹", "시행일자": "2025-06-10"},
            {"번호": "번호", "법률명": "법률명", "담당부서": "담당부서"},
            {"번호": 2, "법률명": "대기환경보전법", "담당부서": "환경기획그룹", "시행일자": "2025-03-01"},
        ]
    )

    records = await SpreadsheetLoader(path).load_all()
    assert len(records) == 2

    safety = by_department(records, "안전")
    stats = compute_department_stats(safety, date(2025, 6, 1))

    assert len(stats) == 1
    assert stats[0].model_dump(
        include={"total", "yearly_due", "current_month_due", "completed_to_date", "progress_percentage"}
    ) == {
        "total": 1,
        "yearly_due": 1,
        "current_month_due": 1,
        "completed_to_date": 0,
        "progress_percentage": 0,
    }
