"""Request bodies for the compute endpoints.

Each request carries the snapshot it wants computed; the service keeps none.
"""

from typing import Any

from pydantic import BaseModel, Field

from booking_analytics.models import ActivityLog, Booking, User


class FareQuoteRequest(BaseModel):
    fare: Any = None


class BookingsRequest(BaseModel):
    bookings: list[Booking] = Field(default_factory=list)


class SnapshotRequest(BookingsRequest):
    users: list[User] = Field(default_factory=list)


class ReportRequest(SnapshotRequest):
    window: int | str | None = None


class LedgerRequest(ReportRequest):
    window: int | str | None = "all"
    search: str = ""
    sort_by: str = "commission"
    descending: bool = True


class PerformanceRequest(SnapshotRequest):
    driver_history: ActivityLog = Field(default_factory=dict)
    enterprise_history: ActivityLog = Field(default_factory=dict)
    driver_ratings: ActivityLog = Field(default_factory=dict)
    enterprise_ratings: ActivityLog = Field(default_factory=dict)
    search: str = ""
    sort_by: str = "total"
    descending: bool = True


class HealthResponse(BaseModel):
    status: str
