"""Commission ledger: searchable, sortable per-booking commission rows."""

import logging
from collections.abc import Iterable
from typing import Any

from booking_analytics.analytics import parse_time_window, window_cutoff
from booking_analytics.commission import (
    calculate_commission,
    calculate_total_commission,
    resolve_commission_fare,
)
from booking_analytics.constants import STATUS_COMPLETED, UNKNOWN_EMAIL, UNKNOWN_NAME
from booking_analytics.core.exceptions import InvalidSortFieldError
from booking_analytics.models import Booking, CommissionLedger, LedgerEntry, User

logger = logging.getLogger(__name__)

SORT_FIELDS = ("commission", "fare", "timestamp", "load_name", "driver_receives")


def _sort_value(entry: LedgerEntry, sort_by: str) -> float | str:
    if sort_by == "timestamp":
        return entry.booking.timestamp or 0
    if sort_by == "load_name":
        return entry.booking.load_name or ""
    return getattr(entry, sort_by) or 0


def _matches(booking: Booking, customer: User | None, term: str) -> bool:
    haystacks = (
        booking.load_name,
        customer.name if customer else None,
        customer.email if customer else None,
        booking.pickup_location,
        booking.destination_location,
    )
    return any(term in text.lower() for text in haystacks if text)


def build_commission_ledger(
    bookings: Iterable[Booking],
    users: Iterable[User],
    window: Any = "all",
    search: str = "",
    sort_by: str = "commission",
    descending: bool = True,
    now: float | None = None,
) -> CommissionLedger:
    """Commission rows for completed bookings in the window that match `search`.

    Status matching is case-insensitive here, unlike the analytics totals.
    The summary always covers the whole snapshot, not just the shown rows.
    """
    if sort_by not in SORT_FIELDS:
        raise InvalidSortFieldError(
            f"Cannot sort ledger by {sort_by!r}", details={"supported": list(SORT_FIELDS)}
        )

    bookings = list(bookings)
    cutoff = window_cutoff(parse_time_window(window), now)
    term = search.strip().lower()
    user_index: dict[str, User] = {}
    for user in users:
        user_index.setdefault(user.id, user)

    entries = []
    for booking in bookings:
        if (booking.status or "").lower() != STATUS_COMPLETED:
            continue
        if cutoff is not None and (booking.timestamp or 0) < cutoff:
            continue

        customer = user_index.get(booking.customer_id) if booking.customer_id else None
        if term and not _matches(booking, customer, term):
            continue

        fare = resolve_commission_fare(booking)
        result = calculate_commission(fare)
        entries.append(
            LedgerEntry(
                booking=booking,
                customer_name=(customer and customer.name) or UNKNOWN_NAME,
                customer_email=(customer and customer.email) or UNKNOWN_EMAIL,
                fare=fare,
                commission=result.commission,
                driver_receives=result.driver_receives,
                commission_percentage=result.percentage,
            )
        )

    entries.sort(key=lambda entry: _sort_value(entry, sort_by), reverse=descending)
    summary = calculate_total_commission(bookings)
    logger.debug(f"Ledger showing {len(entries)} of {summary.booking_count} completed bookings")

    return CommissionLedger(
        entries=entries,
        shown=len(entries),
        completed_total=summary.booking_count,
        summary=summary,
    )
