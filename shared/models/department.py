"""
Department Models
=================

Per-department aggregates derived from regulation records. Departments
are identified by the free-text name found in the spreadsheet; nothing
here is persisted.

Version: 0.1.0
"""

from pydantic import BaseModel, ConfigDict, Field


class DepartmentRef(BaseModel):
    """Department entry for the department list endpoint."""

    name: str
    code: str


class DepartmentStat(BaseModel):
    """Regulation counts and yearly progress for one department."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    total: int = 0
    yearly_due: int = Field(default=0, alias="yearlyDue")
    current_month_due: int = Field(default=0, alias="currentMonthDue")
    completed_to_date: int = Field(default=0, alias="completedToDate")
    progress_percentage: int = Field(default=0, alias="progressPercentage")

    # Records with a real AI summary, and of those the ones needing follow-up
    analyzed: int = Field(default=0, alias="analyzedRegulations")
    follow_up_required: int = Field(default=0, alias="followUpRequired")
