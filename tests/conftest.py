"""
Test Configuration
==================

Pytest fixtures for ComplianceGuard tests.
"""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import date
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import Workbook

# Set test environment
os.environ["ENVIRONMENT"] = "testing"

from shared.config import (  # noqa: E402
    EmailSettings,
    NotificationSettings,
    SchedulerSettings,
    Settings,
    SpreadsheetSettings,
)
from shared.models.regulation import Regulation  # noqa: E402


CREDENTIAL_ENV_VARS = (
    "GMAIL_USER",
    "GMAIL_PASS",
    "GMAIL_APP_PASSWORD",
    "SENDGRID_API_KEY",
    "SENDGRID_FROM_EMAIL",
)

HEADERS = [field.alias for field in Regulation.model_fields.values() if field.alias]


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture(autouse=True)
def clean_email_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with no email credentials in the environment."""
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_regulation() -> Callable[..., Regulation]:
    """Factory for regulation records with sensible defaults."""

    def _make(**overrides: Any) -> Regulation:
        data: dict[str, Any] = {
            "seq_no": "1",
            "name": "테스트법",
            "law_type": "법률",
            "ministry": "환경부",
            "department": "환경기획그룹",
            "effective_date": "2025-06-15",
        }
        data.update(overrides)
        return Regulation(**data)

    return _make


def write_workbook(path: Path, rows: list[dict[str, Any]], headers: list[str] = HEADERS) -> Path:
    """Write `rows` (keyed by Korean header) to a single-sheet workbook."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.append(headers)
    for row in rows:
        worksheet.append([row.get(header) for header in headers])
    workbook.save(path)
    return path


@pytest.fixture
def current_rows() -> list[dict[str, Any]]:
    """Workbook rows dated relative to today so the dashboard views have data."""
    today = date.today()
    year, month = today.year, today.month
    return [
        {
            "번호": 1,
            "법률명": "대기환경보전법",
            "법령(약칭)": "대기환경법",
            "법령종류": "법률",
            "소관부처": "환경부",
            "담당부서": "환경기획그룹",
            "시행일자": f"{year}-{month:02d}-15",
            "제정·개정구분": "일부개정",
            "AI 주요 개정 정리": "배출 기준 강화",
            "AI 후속 조치 사항": "측정 주기 변경 필요",
        },
        {
            "번호": 2,
            "법률명": "개인정보 보호법",
            "법령종류": "법률",
            "소관부처": "개인정보보호위원회",
            "담당부서": "정보보호사무국",
            "시행일자": f"{year}-{month:02d}-01",
            "AI 후속 조치 사항": "내용/조치사항 없음",
        },
        {
            "번호": 3,
            "법률명": "근로기준법 시행령",
            "법령종류": "대통령령",
            "소관부처": "고용노동부",
            "담당부서": "인사문화그룹",
            "시행일자": f"{year + 1}-01-01",
        },
        {
            "번호": 4,
            "법률명": "외부감사법 시행규칙",
            "법령종류": "부령",
            "소관부처": "금융위원회",
            "담당부서": "재무그룹",
            "시행일자": "None",
        },
        {},
        {
            "번호": None,
            "법률명": "번호 없는 행",
        },
    ]


@pytest.fixture
def workbook_path(tmp_path: Path, current_rows: list[dict[str, Any]]) -> Path:
    """Regulation workbook in a temporary directory."""
    return write_workbook(tmp_path / "law_list2ai.xlsx", current_rows)


@pytest.fixture
def app_settings(tmp_path: Path, workbook_path: Path) -> Settings:
    """Settings pointing at temporary files, with the scheduler off."""
    return Settings(
        environment="testing",
        project_root=tmp_path,
        spreadsheet=SpreadsheetSettings(path=workbook_path),
        email=EmailSettings(log_path=tmp_path / "logging.txt"),
        notifications=NotificationSettings(
            department_contacts={"환경기획그룹": "env@example.com"},
        ),
        scheduler=SchedulerSettings(enabled=False),
    )


@pytest_asyncio.fixture
async def dashboard_client(app_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Compliance Dashboard Service."""
    from services.compliance_dashboard.main import create_app

    app = create_app(app_settings)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def workbook_writer(tmp_path: Path) -> Callable[..., Path]:
    """Write ad-hoc workbooks into the test's temporary directory."""

    def _write(rows: list[dict[str, Any]], name: str = "book.xlsx", headers: list[str] = HEADERS) -> Path:
        return write_workbook(tmp_path / name, rows, headers)

    return _write
