"""
Regulation Queries
==================

Case-insensitive filters over loaded regulation records. Results keep
the order of the source sheet.

Version: 0.1.0
"""

from collections.abc import Sequence

from services.compliance_dashboard.loader import SpreadsheetLoader
from shared.models.regulation import Regulation, is_blank


def _contains(value: str, term: str) -> bool:
    return bool(value) and term in value.lower()


def by_department(records: Sequence[Regulation], name: str) -> list[Regulation]:
    """Records whose department contains `name`."""
    term = name.lower()
    return [r for r in records if _contains(r.department, term)]


def by_type(records: Sequence[Regulation], type_name: str) -> list[Regulation]:
    """Records whose law type contains `type_name`."""
    term = type_name.lower()
    return [r for r in records if _contains(r.law_type, term)]


def search(records: Sequence[Regulation], term: str) -> list[Regulation]:
    """
    Free-text search.

    A record matches when any of law name, abbreviated name, supervising
    ministry, department or AI summary contains the term.
    """
    needle = term.lower()
    return [
        r
        for r in records
        if any(
            _contains(field, needle)
            for field in (r.name, r.short_name, r.ministry, r.department, r.ai_summary)
        )
    ]


def by_id(records: Sequence[Regulation], seq_no: str) -> Regulation | None:
    """Exact lookup by sequence number."""
    return next((r for r in records if r.seq_no == seq_no), None)


def distinct_departments(records: Sequence[Regulation]) -> list[str]:
    """Sorted department names, excluding blanks and "None"."""
    return sorted({r.department for r in records if not is_blank(r.department)})


def distinct_types(records: Sequence[Regulation]) -> list[str]:
    """Sorted law types, excluding blanks and "None"."""
    return sorted({r.law_type for r in records if not is_blank(r.law_type)})


class RegulationQueryService:
    """Query functions bound to a shared loader."""

    def __init__(self, loader: SpreadsheetLoader) -> None:
        self.loader = loader

    async def all(self) -> list[Regulation]:
        return await self.loader.load_all()

    async def filter(
        self,
        department: str | None = None,
        type_name: str | None = None,
        term: str | None = None,
    ) -> list[Regulation]:
        """
        Apply at most one filter: search wins over department, department
        over type. No filter returns everything.
        """
        records = await self.loader.load_all()
        if term:
            return search(records, term)
        if department:
            return by_department(records, department)
        if type_name:
            return by_type(records, type_name)
        return list(records)

    async def get(self, seq_no: str) -> Regulation | None:
        return by_id(await self.loader.load_all(), seq_no)

    async def departments(self) -> list[str]:
        return distinct_departments(await self.loader.load_all())

    async def types(self) -> list[str]:
        return distinct_types(await self.loader.load_all())
