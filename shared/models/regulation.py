"""
Regulation Models
=================

Models for regulation records read from the source spreadsheet and the
dashboard views derived from them.

Field names are English; every field is aliased to the Korean column
header used in the spreadsheet, and JSON output keeps the Korean keys.

Version: 0.1.0
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


HEADER_SEQ_LABEL = "번호"
NONE_PLACEHOLDER = "None"
NO_FOLLOW_UP_PLACEHOLDER = "내용/조치사항 없음"
NO_SUMMARY_PLACEHOLDERS = frozenset(
    {
        "- [개정이유]: 없음\n\n- [주요내용]: 없음",
        "- [개정이유]: 없음\\n\\n- [주요내용]: 없음",
    }
)


def coerce_cell(value: Any) -> str:
    """
    Convert a raw spreadsheet cell into text.

    Blank cells become "", whole floats lose their ".0", dates are
    rendered as YYYY-MM-DD. Everything else is stringified and stripped.
    """
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_blank(value: str) -> bool:
    """True for empty text and the literal "None" placeholder."""
    return not value or value == NONE_PLACEHOLDER


class Regulation(BaseModel):
    """One row of the regulation spreadsheet. Immutable once loaded."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Identifiers
    seq_no: str = Field(default="", alias="번호")
    proclamation_no: str = Field(default="", alias="공포번호")

    # Dates (free text: YYYY-MM-DD, YYYY.MM or "None")
    proclamation_date: str = Field(default="", alias="공포일자")
    effective_date: str = Field(default="", alias="시행일자")

    # Names and classification
    short_name: str = Field(default="", alias="법령(약칭)")
    name: str = Field(default="", alias="법률명")
    law_type: str = Field(default="", alias="법령종류")
    ministry: str = Field(default="", alias="소관부처")
    scheduled: str = Field(default="", alias="예정")

    # Ownership
    department: str = Field(default="", alias="담당부서")
    manager: str = Field(default="", alias="담당자")

    # Amendment content
    revision_date: str = Field(default="", alias="제/개정일(시행일)")
    amended_articles: str = Field(default="", alias="개정 법률 조항")
    amendment_summary: str = Field(default="", alias="주요 개정 내용")
    enactment_type: str = Field(default="", alias="제정·개정구분")
    comparison_url: str = Field(default="", alias="신구법비교_URL")
    reason_url: str = Field(default="", alias="제정/개정 이유_URL")

    # AI-generated fields
    ai_summary: str = Field(default="", alias="AI 주요 개정 정리")
    ai_follow_up: str = Field(default="", alias="AI 후속 조치 사항")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_cells(cls, v: Any) -> str:
        """Normalise raw cell values to text."""
        return coerce_cell(v)

    @property
    def is_valid(self) -> bool:
        """A row is kept only with a sequence number and a law name, and is not a header."""
        return bool(self.seq_no) and bool(self.name) and self.seq_no != HEADER_SEQ_LABEL

    @property
    def has_ai_summary(self) -> bool:
        """AI summary present and not the "nothing changed" placeholder."""
        return bool(self.ai_summary) and self.ai_summary not in NO_SUMMARY_PLACEHOLDERS

    @property
    def has_follow_up(self) -> bool:
        """AI follow-up actions present and not the "no action" placeholder."""
        return bool(self.ai_follow_up) and self.ai_follow_up != NO_FOLLOW_UP_PLACEHOLDER


class Amendment(BaseModel):
    """Compact regulation view used by the amendment dashboards."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    effective_date: str = Field(alias="effectiveDate")
    department: str

    @classmethod
    def from_regulation(cls, regulation: Regulation) -> "Amendment":
        return cls(
            name=regulation.name,
            type=regulation.law_type,
            effective_date=regulation.effective_date,
            department=regulation.department,
        )


class YearlyAmendments(BaseModel):
    """Regulations taking effect during a calendar year."""

    model_config = ConfigDict(populate_by_name=True)

    year: int
    total_count: int = Field(alias="totalCount")
    amendments: list[Amendment] = Field(default_factory=list)


class DashboardStats(BaseModel):
    """Headline numbers for the dashboard."""

    model_config = ConfigDict(populate_by_name=True)

    total_regulations: int = Field(alias="totalRegulations")
    total_departments: int = Field(alias="totalDepartments")
    risk_items: int = Field(alias="riskItems")
    yearly_amendments: int = Field(alias="yearlyAmendments")
