"""
Dashboard Exceptions
====================

Version: 0.1.0
"""


class DataSourceUnavailable(Exception):
    """The regulation spreadsheet is missing or cannot be parsed."""


class ValidationFailure(Exception):
    """A request field or credential set failed validation."""


class TransportFailure(Exception):
    """An email transport failed to connect, authenticate or deliver."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
