"""
Email Log
=========

Append-only plain-text record of every email attempt, shared by the
whole process. Entries are framed text blocks tagged SUCCESS or ERROR.

Writers do not lock the file; concurrent appends may interleave.

Version: 0.1.0
"""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

from shared.logging import get_logger


logger = get_logger(__name__)

RULE = "=" * 40
DEFAULT_TAIL_LINES = 50


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def format_success_entry(
    to: str,
    subject: str,
    transport: str,
    message_id: str | None = None,
    timestamp: str | None = None,
) -> str:
    """Render a SUCCESS block."""
    return (
        f"\n{RULE}\n"
        f"EMAIL SUCCESS LOG - {timestamp or _timestamp()}\n"
        f"{RULE}\n"
        f"Context: Email sent successfully\n"
        f"Transport: {transport}\n"
        f"Email To: {to}\n"
        f"Email Subject: {subject}\n"
        f"Message ID: {message_id or 'N/A'}\n"
        f"{RULE}\n\n"
    )


def format_error_entry(
    context: str,
    to: str,
    subject: str,
    transport: str,
    code: str | None = None,
    message: str | None = None,
    stack: str | None = None,
    credentials: dict[str, str] | None = None,
    timestamp: str | None = None,
) -> str:
    """Render an ERROR block."""
    credential_lines = "".join(f"{key}: {value}\n" for key, value in (credentials or {}).items())
    return (
        f"\n{RULE}\n"
        f"EMAIL ERROR LOG - {timestamp or _timestamp()}\n"
        f"{RULE}\n"
        f"Context: {context}\n"
        f"Transport: {transport}\n"
        f"Error Code: {code or 'UNKNOWN'}\n"
        f"Error Message: {message or 'No message'}\n"
        f"Email To: {to or 'N/A'}\n"
        f"Email Subject: {subject or 'N/A'}\n"
        f"{credential_lines}"
        f"Stack Trace:\n{stack or 'No stack trace'}\n"
        f"{RULE}\n\n"
    )


class EmailLog:
    """File-backed email log with tail and clear operations."""

    def __init__(self, path: Path | str, tail_lines: int = DEFAULT_TAIL_LINES) -> None:
        self.path = Path(path)
        self.tail_lines = tail_lines

    async def append_success(
        self,
        to: str,
        subject: str,
        transport: str,
        message_id: str | None = None,
    ) -> None:
        await self._append(format_success_entry(to, subject, transport, message_id), "success")

    async def append_error(
        self,
        context: str,
        to: str,
        subject: str,
        transport: str,
        code: str | None = None,
        message: str | None = None,
        stack: str | None = None,
        credentials: dict[str, str] | None = None,
    ) -> None:
        entry = format_error_entry(
            context,
            to,
            subject,
            transport,
            code=code,
            message=message,
            stack=stack,
            credentials=credentials,
        )
        await self._append(entry, "error")

    async def _append(self, entry: str, kind: str) -> None:
        try:
            await asyncio.to_thread(self._write, entry)
        except OSError as e:
            # Write failures never propagate to the sender.
            logger.error("email_log_write_failed", path=str(self.path), error=str(e))
            return
        logger.debug("email_log_appended", kind=kind, path=str(self.path))

    def _write(self, entry: str) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(entry)

    async def tail(self, lines: int | None = None) -> list[str]:
        """
        Last lines of the log.

        Args:
            lines: Number of lines; defaults to the configured tail size

        Returns:
            Lines without trailing newlines; empty when no log exists yet
        """
        count = lines if lines is not None else self.tail_lines
        if count <= 0:
            return []
        return await asyncio.to_thread(self._read_tail, count)

    def _read_tail(self, count: int) -> list[str]:
        if not self.path.exists():
            return []
        content = self.path.read_text(encoding="utf-8")
        return content.splitlines()[-count:]

    async def clear(self) -> bool:
        """
        Delete the log file.

        Returns:
            True if a file was removed, False if there was none
        """
        if not self.path.exists():
            return False
        await asyncio.to_thread(self.path.unlink)
        logger.info("email_log_cleared", path=str(self.path))
        return True
