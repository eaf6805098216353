"""
Dashboard Routes
================

Aggregated views for the dashboard: headline counts, department
progress and this month's and this year's amendments.

Version: 0.1.0
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from services.compliance_dashboard.aggregation import (
    compute_department_stats,
    dashboard_stats,
    monthly_amendments,
    yearly_amendments,
)
from services.compliance_dashboard.dependencies import get_app_settings, get_loader
from services.compliance_dashboard.loader import SpreadsheetLoader
from shared.config import Settings
from shared.models.department import DepartmentStat
from shared.models.regulation import Amendment, DashboardStats, YearlyAmendments

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_stats(loader: SpreadsheetLoader = Depends(get_loader)) -> DashboardStats:
    records = await loader.load_all()
    return dashboard_stats(records, datetime.now().date())


@router.get("/department-progress", response_model=list[DepartmentStat])
async def get_department_progress(
    loader: SpreadsheetLoader = Depends(get_loader),
    settings: Settings = Depends(get_app_settings),
) -> list[DepartmentStat]:
    """
    Progress per department for the current year.

    Priority departments come first; the rest are ordered by total
    regulation count, largest first.
    """
    records = await loader.load_all()
    return compute_department_stats(
        records,
        datetime.now().date(),
        settings.notifications.priority_departments,
    )


@router.get("/monthly-amendments", response_model=list[Amendment])
async def get_monthly_amendments(loader: SpreadsheetLoader = Depends(get_loader)) -> list[Amendment]:
    records = await loader.load_all()
    return monthly_amendments(records, datetime.now().date())


@router.get("/yearly-amendments", response_model=YearlyAmendments)
async def get_yearly_amendments(loader: SpreadsheetLoader = Depends(get_loader)) -> YearlyAmendments:
    records = await loader.load_all()
    return yearly_amendments(records, datetime.now().date())
