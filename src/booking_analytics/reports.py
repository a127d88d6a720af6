"""Driver and enterprise performance reports.

Each row counts the requests a partner accepted, split by status, on top of
the trips already archived in the partner's history. Ratings are averaged per
partner from the optional ratings collection.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from booking_analytics.amounts import is_truthy, parse_amount
from booking_analytics.constants import (
    NOT_AVAILABLE,
    STATUS_ACCEPTED,
    STATUS_DISPATCHED,
    STATUS_IN_PROGRESS,
)
from booking_analytics.core.exceptions import InvalidSortFieldError
from booking_analytics.models import (
    Booking,
    DriverPerformance,
    EnterprisePerformance,
    PerformanceReport,
    User,
)

logger = logging.getLogger(__name__)

# Shared by both tables; each maps to its own count fields
SORT_FIELDS = ("total", "completed", "name", "email", "average_rating")

_DRIVER_COLUMNS = {"total": "total_trips", "completed": "completed_trips"}
_ENTERPRISE_COLUMNS = {"total": "total_bookings", "completed": "completed_bookings"}

Row = TypeVar("Row", DriverPerformance, EnterprisePerformance)


def rating_stats(ratings: Mapping[str, Any] | None) -> tuple[float | None, int]:
    """Average of the truthy ratings (one decimal) and how many there were."""
    values = [
        parse_amount(entry.get("rating"))
        for entry in (ratings or {}).values()
        if isinstance(entry, Mapping) and is_truthy(entry.get("rating"))
    ]
    if not values:
        return None, 0
    return round(sum(values) / len(values), 1), len(values)


def _history_count(history: Mapping[str, Mapping[str, Any]] | None, user_id: str) -> int:
    return len((history or {}).get(user_id) or {})


def driver_performance(
    bookings: Iterable[Booking],
    users: Iterable[User],
    history: Mapping[str, Mapping[str, Any]] | None = None,
    ratings: Mapping[str, Mapping[str, Any]] | None = None,
) -> list[DriverPerformance]:
    """One row per user with the driver role, in user order."""
    accepted: dict[str, list[Booking]] = {}
    for booking in bookings:
        if booking.accepted_driver_id:
            accepted.setdefault(booking.accepted_driver_id, []).append(booking)

    rows = []
    for user in users:
        if user.role != "driver":
            continue
        trips = accepted.get(user.id, [])
        completed = _history_count(history, user.id)
        average, rating_count = rating_stats((ratings or {}).get(user.id))
        details = user.driver_details
        rows.append(
            DriverPerformance(
                id=user.id,
                name=user.name or (details and details.full_name) or NOT_AVAILABLE,
                email=user.email or NOT_AVAILABLE,
                phone=user.phone or NOT_AVAILABLE,
                license_number=(details and details.license_number) or NOT_AVAILABLE,
                cnic=(details and details.cnic) or NOT_AVAILABLE,
                created_at=user.created_at,
                total_trips=completed + len(trips),
                completed_trips=completed,
                accepted_trips=sum(1 for b in trips if b.status == STATUS_ACCEPTED),
                in_progress_trips=sum(1 for b in trips if b.status == STATUS_IN_PROGRESS),
                average_rating=average,
                total_ratings=rating_count,
            )
        )
    return rows


def enterprise_performance(
    bookings: Iterable[Booking],
    users: Iterable[User],
    history: Mapping[str, Mapping[str, Any]] | None = None,
    ratings: Mapping[str, Mapping[str, Any]] | None = None,
) -> list[EnterprisePerformance]:
    """One row per user with the enterprise role, in user order."""
    accepted: dict[str, list[Booking]] = {}
    for booking in bookings:
        if booking.accepted_enterprise_id:
            accepted.setdefault(booking.accepted_enterprise_id, []).append(booking)

    rows = []
    for user in users:
        if user.role != "enterprise":
            continue
        bookings_taken = accepted.get(user.id, [])
        completed = _history_count(history, user.id)
        average, rating_count = rating_stats((ratings or {}).get(user.id))
        details = user.enterprise_details
        phone = details and (details.contact_phone or details.cooperate_number)
        rows.append(
            EnterprisePerformance(
                id=user.id,
                name=(details and details.enterprise_name) or user.name or NOT_AVAILABLE,
                email=user.email or NOT_AVAILABLE,
                phone=phone or user.phone or NOT_AVAILABLE,
                registration_number=(details and details.registration_number) or NOT_AVAILABLE,
                created_at=user.created_at,
                total_bookings=completed + len(bookings_taken),
                completed_bookings=completed,
                accepted_bookings=sum(1 for b in bookings_taken if b.status == STATUS_ACCEPTED),
                dispatched_bookings=sum(
                    1 for b in bookings_taken if b.status == STATUS_DISPATCHED
                ),
                in_progress_bookings=sum(
                    1 for b in bookings_taken if b.status == STATUS_IN_PROGRESS
                ),
                average_rating=average,
                total_ratings=rating_count,
            )
        )
    return rows


def _search_text(row: DriverPerformance | EnterprisePerformance) -> tuple[str, ...]:
    reference = (
        row.license_number if isinstance(row, DriverPerformance) else row.registration_number
    )
    return (row.name, row.email, row.phone, reference)


def _sort_value(row: DriverPerformance | EnterprisePerformance, field: str) -> Any:
    value = getattr(row, field)
    if isinstance(value, str):
        return value.lower()
    # Unrated partners sort below every rating
    return -1.0 if value is None else value


def search_and_sort(
    rows: list[Row],
    search: str = "",
    sort_by: str = "total",
    descending: bool = True,
) -> list[Row]:
    """Case-insensitive search over name, email, phone and licence or registration."""
    if sort_by not in SORT_FIELDS:
        raise InvalidSortFieldError(
            f"Cannot sort performance report by {sort_by!r}",
            details={"supported": list(SORT_FIELDS)},
        )

    term = search.strip().lower()
    if term:
        rows = [row for row in rows if any(term in text.lower() for text in _search_text(row))]

    if rows and isinstance(rows[0], DriverPerformance):
        field = _DRIVER_COLUMNS.get(sort_by, sort_by)
    else:
        field = _ENTERPRISE_COLUMNS.get(sort_by, sort_by)
    return sorted(rows, key=lambda row: _sort_value(row, field), reverse=descending)


def build_performance_report(
    bookings: Iterable[Booking],
    users: Iterable[User],
    driver_history: Mapping[str, Mapping[str, Any]] | None = None,
    enterprise_history: Mapping[str, Mapping[str, Any]] | None = None,
    driver_ratings: Mapping[str, Mapping[str, Any]] | None = None,
    enterprise_ratings: Mapping[str, Mapping[str, Any]] | None = None,
    search: str = "",
    sort_by: str = "total",
    descending: bool = True,
) -> PerformanceReport:
    """Driver and enterprise tables, both filtered and sorted the same way.

    Without history or ratings, completed counts are 0 and ratings are None.
    """
    bookings = list(bookings)
    users = list(users)
    drivers = driver_performance(bookings, users, driver_history, driver_ratings)
    enterprises = enterprise_performance(bookings, users, enterprise_history, enterprise_ratings)
    logger.debug(f"Performance report over {len(drivers)} drivers, {len(enterprises)} enterprises")

    return PerformanceReport(
        drivers=search_and_sort(drivers, search, sort_by, descending),
        enterprises=search_and_sort(enterprises, search, sort_by, descending),
    )
