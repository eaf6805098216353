"""
Unit tests for the shared regulation and department models.
"""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from shared.models.department import DepartmentStat
from shared.models.regulation import (
    Amendment,
    Regulation,
    coerce_cell,
    is_blank,
)


class TestCoerceCell:
    """Tests for raw cell normalisation."""

    def test_none_becomes_empty(self) -> None:
        assert coerce_cell(None) == ""

    def test_whole_float_loses_decimal(self) -> None:
        assert coerce_cell(12.0) == "12"

    def test_fractional_float_kept(self) -> None:
        assert coerce_cell(1.5) == "1.5"

    def test_datetime_rendered_as_date(self) -> None:
        assert coerce_cell(datetime(2025, 6, 15, 9, 30)) == "2025-06-15"
        assert coerce_cell(date(2025, 1, 2)) == "2025-01-02"

    def test_text_is_stripped(self) -> None:
        assert coerce_cell("  환경부 ") == "환경부"

    def test_is_blank(self) -> None:
        assert is_blank("")
        assert is_blank("None")
        assert not is_blank("2025-06")


class TestRegulation:
    """Tests for the regulation record."""

    def test_validates_from_korean_headers(self) -> None:
        """Rows keyed by spreadsheet headers populate the English fields."""
        record = Regulation.model_validate(
            {
                "번호": 7,
                "법률명": "산업안전보건법",
                "시행일자": "2025-03-01",
                "담당부서": "안전보건기획그룹",
                "알 수 없는 열": "ignored",
            }
        )

        assert record.seq_no == "7"
        assert record.name == "산업안전보건법"
        assert record.effective_date == "2025-03-01"
        assert record.department == "안전보건기획그룹"

    def test_serializes_with_korean_keys(self, make_regulation) -> None:
        data = make_regulation().model_dump(by_alias=True)

        assert data["법률명"] == "테스트법"
        assert data["담당부서"] == "환경기획그룹"
        assert "AI 주요 개정 정리" in data

    def test_is_frozen(self, make_regulation) -> None:
        record = make_regulation()

        with pytest.raises(ValidationError):
            record.name = "다른 법"

    @pytest.mark.parametrize(
        "seq_no,name,expected",
        [
            ("1", "테스트법", True),
            ("", "테스트법", False),
            ("1", "", False),
            ("번호", "법률명", False),
        ],
    )
    def test_is_valid(self, seq_no: str, name: str, expected: bool) -> None:
        assert Regulation(seq_no=seq_no, name=name).is_valid is expected

    def test_placeholder_summary_is_not_analysis(self, make_regulation) -> None:
        record = make_regulation(ai_summary="- [개정이유]: 없음\n\n- [주요내용]: 없음")

        assert record.has_ai_summary is False

    def test_placeholder_follow_up_is_not_required(self, make_regulation) -> None:
        assert make_regulation(ai_follow_up="내용/조치사항 없음").has_follow_up is False
        assert make_regulation(ai_follow_up="규정 개정 필요").has_follow_up is True


class TestDerivedModels:
    """Tests for dashboard view models."""

    def test_amendment_from_regulation(self, make_regulation) -> None:
        amendment = Amendment.from_regulation(make_regulation())

        assert amendment.model_dump(by_alias=True) == {
            "name": "테스트법",
            "type": "법률",
            "effectiveDate": "2025-06-15",
            "department": "환경기획그룹",
        }

    def test_department_stat_camel_case(self) -> None:
        stat = DepartmentStat(
            name="환경기획그룹",
            total=3,
            yearly_due=2,
            current_month_due=1,
            completed_to_date=1,
            progress_percentage=50,
        )
        data = stat.model_dump(by_alias=True)

        assert data["yearlyDue"] == 2
        assert data["currentMonthDue"] == 1
        assert data["completedToDate"] == 1
        assert data["progressPercentage"] == 50
