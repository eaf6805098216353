#!/usr/bin/env python3
"""
Sample Workbook Script
======================

Create a development regulation workbook, or summarise an existing one
by department.

Usage:
    python scripts/sample_workbook.py --output data/law_list2ai.xlsx
    python scripts/sample_workbook.py --check data/law_list2ai.xlsx

Version: 0.1.0
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from openpyxl import Workbook

from shared.logging import get_logger, setup_logging
from shared.models.regulation import NO_FOLLOW_UP_PLACEHOLDER, Regulation

setup_logging(log_level="INFO", json_logs=False, service_name="sample-workbook")
logger = get_logger(__name__)


SAMPLE_DEPARTMENTS = [
    ("환경기획그룹", "환경부", "대기환경보전법", "법률"),
    ("안전보건기획그룹", "고용노동부", "산업안전보건법", "법률"),
    ("정보보호사무국", "개인정보보호위원회", "개인정보 보호법", "법률"),
    ("인사문화그룹", "고용노동부", "근로기준법 시행령", "대통령령"),
    ("재무그룹", "금융위원회", "외부감사법 시행규칙", "부령"),
]


def headers() -> list[str]:
    """Spreadsheet column headers in model field order."""
    return [field.alias for field in Regulation.model_fields.values() if field.alias]


def sample_rows(count: int, year: int) -> list[dict[str, str]]:
    """Rows spread over the sample departments and the months of `year`."""
    rows = []
    for i in range(count):
        department, ministry, law, law_type = SAMPLE_DEPARTMENTS[i % len(SAMPLE_DEPARTMENTS)]
        month = i % 12 + 1
        analysed = i % 3 != 0
        rows.append(
            {
                "번호": str(i + 1),
                "공포번호": f"제{20000 + i}호",
                "공포일자": f"{year - 1}-{month:02d}-01",
                "시행일자": f"{year}-{month:02d}-{(i % 27) + 1:02d}",
                "법령(약칭)": law.split()[0],
                "법률명": f"{law} (개정 {i + 1})",
                "법령종류": law_type,
                "소관부처": ministry,
                "예정": "",
                "담당부서": department,
                "담당자": "",
                "제/개정일(시행일)": f"{year}-{month:02d}",
                "개정 법률 조항": f"제{i + 3}조",
                "주요 개정 내용": "시행 일부 조항 정비",
                "제정·개정구분": "일부개정",
                "신구법비교_URL": "",
                "제정/개정 이유_URL": "",
                "AI 주요 개정 정리": "- 신고 기한 단축\n- 과태료 상향" if analysed else "",
                "AI 후속 조치 사항": "내부 절차서 개정 필요" if i % 2 else NO_FOLLOW_UP_PLACEHOLDER,
            }
        )
    return rows


def write_workbook(path: Path, rows: list[dict[str, str]]) -> None:
    columns = headers()
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "law_list"
    worksheet.append(columns)
    for row in rows:
        worksheet.append([row.get(column, "") for column in columns])

    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)


async def check(path: Path) -> int:
    """Log per-department counts for an existing workbook."""
    from services.compliance_dashboard.aggregation import compute_department_stats
    from services.compliance_dashboard.exceptions import DataSourceUnavailable
    from services.compliance_dashboard.loader import SpreadsheetLoader

    try:
        records = await SpreadsheetLoader(path).load_all()
    except DataSourceUnavailable as e:
        logger.error("workbook_unreadable", path=str(path), error=str(e))
        return 1

    logger.info("workbook_loaded", path=str(path), records=len(records))
    for stat in compute_department_stats(records, datetime.now().date()):
        logger.info(
            "department",
            name=stat.name,
            total=stat.total,
            yearly_due=stat.yearly_due,
            current_month_due=stat.current_month_due,
            progress=f"{stat.progress_percentage}%",
        )
    return 0


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Create or inspect a regulation workbook",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("data/law_list2ai.xlsx"),
        help="Where to write the sample workbook",
    )
    parser.add_argument(
        "--rows",
        type=int,
        default=60,
        help="Number of sample regulations",
    )
    parser.add_argument(
        "--check",
        type=Path,
        default=None,
        help="Summarise an existing workbook instead of writing one",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()

    if args.check is not None:
        sys.exit(asyncio.run(check(args.check)))

    write_workbook(args.output, sample_rows(args.rows, datetime.now().year))
    logger.info("sample_workbook_written", path=str(args.output), rows=args.rows)
