"""
Spreadsheet Loader
==================

Reads the regulation workbook into immutable `Regulation` records and
keeps them in memory for a fixed time window.

One loader instance is shared by every request handler; the whole record
list is replaced on each reload, never patched.

Version: 0.1.0
"""

import asyncio
import time
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from openpyxl import load_workbook

from services.compliance_dashboard.exceptions import DataSourceUnavailable
from shared.logging import get_logger
from shared.models.regulation import Regulation, coerce_cell


logger = get_logger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300.0


def _is_blank_row(row: Sequence[Any]) -> bool:
    return all(coerce_cell(cell) == "" for cell in row)


def parse_rows(rows: Iterable[Sequence[Any]]) -> list[Regulation]:
    """
    Convert raw sheet rows into regulation records.

    The first row supplies the field names; every later row becomes one
    record keyed by those names. Blank rows, rows without a sequence
    number or law name, and repeated header rows are dropped.

    Args:
        rows: Row tuples as produced by openpyxl ``iter_rows(values_only=True)``

    Returns:
        Valid records in sheet order
    """
    iterator = iter(rows)
    header_row = next(iterator, None)
    if header_row is None:
        return []

    headers = [coerce_cell(cell) for cell in header_row]
    records: list[Regulation] = []

    for row in iterator:
        if row is None or _is_blank_row(row):
            continue

        data = {header: cell for header, cell in zip(headers, row) if header}
        record = Regulation.model_validate(data)
        if record.is_valid:
            records.append(record)

    return records


class SpreadsheetLoader:
    """
    Time-windowed cache in front of the regulation workbook.

    Example:
        >>> loader = SpreadsheetLoader(Path("data/law_list2ai.xlsx"))
        >>> records = await loader.load_all()
    """

    def __init__(
        self,
        path: Path | str,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        sheet_name: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the loader.

        Args:
            path: Workbook location
            ttl_seconds: How long a successful load is served from memory
            sheet_name: Sheet to read; the first sheet when omitted
            clock: Monotonic time source, replaceable in tests
        """
        self.path = Path(path)
        self.ttl_seconds = ttl_seconds
        self.sheet_name = sheet_name
        self._clock = clock

        self._records: list[Regulation] | None = None
        self._loaded_at: float | None = None
        self.last_loaded_at: datetime | None = None

    def is_fresh(self) -> bool:
        """Check whether the cached records are still inside the window."""
        if self._records is None or self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at <= self.ttl_seconds

    def invalidate(self) -> None:
        """Force the next `load_all` to re-read the workbook."""
        self._loaded_at = None

    async def reload(self) -> list[Regulation]:
        """Re-read the workbook regardless of cache age."""
        self.invalidate()
        return await self.load_all()

    async def load_all(self) -> list[Regulation]:
        """
        Return all valid regulation records.

        Raises:
            DataSourceUnavailable: If the workbook cannot be opened or parsed.
                The previous cache is not served in that case.
        """
        if self._records is not None and self.is_fresh():
            return self._records

        rows = await asyncio.to_thread(self._read_rows)
        records = parse_rows(rows)

        self._records = records
        self._loaded_at = self._clock()
        self.last_loaded_at = datetime.now(UTC)

        logger.info(
            "regulations_loaded",
            count=len(records),
            dropped=max(len(rows) - 1 - len(records), 0),
            path=str(self.path),
        )
        return records

    def _read_rows(self) -> list[tuple[Any, ...]]:
        """Read every row of the configured sheet (blocking)."""
        try:
            workbook = load_workbook(self.path, read_only=True, data_only=True)
        except Exception as e:
            # openpyxl surfaces malformed archives as zip, XML and OS errors alike.
            logger.error(
                "spreadsheet_open_failed",
                path=str(self.path),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DataSourceUnavailable(f"Failed to open regulation spreadsheet: {self.path}") from e

        try:
            if self.sheet_name:
                if self.sheet_name not in workbook.sheetnames:
                    raise DataSourceUnavailable(f"Sheet not found: {self.sheet_name}")
                worksheet = workbook[self.sheet_name]
            else:
                worksheet = workbook.worksheets[0]

            rows = list(worksheet.iter_rows(values_only=True))
        except DataSourceUnavailable:
            raise
        except Exception as e:
            logger.error(
                "spreadsheet_parse_failed",
                path=str(self.path),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DataSourceUnavailable(f"Failed to parse regulation spreadsheet: {self.path}") from e
        finally:
            workbook.close()

        if not rows:
            raise DataSourceUnavailable(f"Regulation spreadsheet is empty: {self.path}")

        return rows
