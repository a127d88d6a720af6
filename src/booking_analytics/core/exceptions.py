"""Exception hierarchy for the analytics engine.

Computation over booking and user records never raises. These exceptions
cover caller-supplied parameters and snapshot I/O only.
"""

from typing import Any


class AnalyticsError(Exception):
    """Base exception for all analytics errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PermanentError(AnalyticsError):
    """Errors that will not succeed on retry."""

    pass


class ValidationError(PermanentError):
    """Invalid input or data format."""

    pass


class InvalidTimeWindowError(ValidationError, ValueError):
    """Time window is not one of the supported lookback periods."""

    pass


class InvalidSortFieldError(ValidationError, ValueError):
    """Ledger sort field is not sortable."""

    pass


class SnapshotError(PermanentError):
    """Snapshot file missing, unreadable or not valid JSON."""

    pass


class ConfigurationError(PermanentError):
    """Missing or invalid configuration."""

    pass
