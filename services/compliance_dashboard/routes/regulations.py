"""
Regulations Routes
==================

Read-only endpoints over the regulation spreadsheet.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from services.compliance_dashboard.dependencies import get_query_service
from services.compliance_dashboard.queries import RegulationQueryService
from shared.models.department import DepartmentRef
from shared.models.regulation import Regulation


router = APIRouter()


@router.get("/regulations", response_model=list[Regulation])
async def list_regulations(
    department: str | None = Query(default=None, description="Department name contains"),
    type: str | None = Query(default=None, description="Law type contains"),
    search: str | None = Query(default=None, description="Free-text search"),
    queries: RegulationQueryService = Depends(get_query_service),
) -> list[Regulation]:
    """
    List regulations.

    At most one filter applies: search takes precedence over department,
    department over type.
    """
    return await queries.filter(department=department, type_name=type, term=search)


@router.get("/regulations/{regulation_id}", response_model=Regulation)
async def get_regulation(
    regulation_id: str,
    queries: RegulationQueryService = Depends(get_query_service),
) -> Regulation:
    """Get one regulation by its sequence number."""
    regulation = await queries.get(regulation_id)
    if regulation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="법규를 찾을 수 없습니다.",
        )
    return regulation


@router.get("/departments", response_model=list[DepartmentRef])
async def list_departments(
    queries: RegulationQueryService = Depends(get_query_service),
) -> list[DepartmentRef]:
    """Distinct departments; the name doubles as the code."""
    return [DepartmentRef(name=name, code=name) for name in await queries.departments()]


@router.get("/regulation-types", response_model=list[str])
async def list_regulation_types(
    queries: RegulationQueryService = Depends(get_query_service),
) -> list[str]:
    return await queries.types()
