"""
Custom exceptions for the stats engine with user-friendly error messages.
"""

from typing import Optional


class StatsException(Exception):
    """Base exception for stats-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class UnknownStatKind(StatsException):
    """Raised when a stat identifier matches no known stat kind."""
    def __init__(self, identifier: object):
        self.identifier = identifier
        super().__init__(
            f"Unknown stat kind '{identifier}'",
            f"❌ '{identifier}' is not a tracked stat!"
        )

class QueryFailed(StatsException):
    """Raised when an underlying stats query fails."""
    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(
            f"Query failed during {operation}: {cause}",
            "❌ Could not load stats. Please try again later."
        )

class MalformedRow(StatsException):
    """Raised when a required result field is absent or cannot be typed."""
    def __init__(self, field: str, reason: str):
        self.field = field
        super().__init__(
            f"Malformed row, field '{field}': {reason}",
            "❌ Stored stats are corrupted."
        )
