"""Fixed business parameters for commission and analytics."""

from typing import Final

COMMISSION_RATE: Final[float] = 0.10
"""Platform share of a fare under the percentage leg of the hybrid rule."""

MINIMUM_COMMISSION: Final[float] = 100.0
"""Commission floor applied whenever the fare is positive."""

MS_PER_DAY: Final[int] = 86_400_000

LEADERBOARD_SIZE: Final[int] = 5

STATUS_PENDING: Final[str] = "pending"
STATUS_ACCEPTED: Final[str] = "accepted"
STATUS_IN_PROGRESS: Final[str] = "in_progress"
STATUS_COMPLETED: Final[str] = "completed"
STATUS_CANCELLED: Final[str] = "cancelled"
STATUS_DISPATCHED: Final[str] = "dispatched"

UNKNOWN_NAME: Final[str] = "Unknown"
UNKNOWN_EMAIL: Final[str] = "N/A"
NOT_AVAILABLE: Final[str] = "N/A"
"""Placeholder for missing contact details in the performance reports."""
