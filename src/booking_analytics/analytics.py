"""Booking analytics: time-window filtering, summary metrics, trends and leaderboards.

All functions are pure over an in-memory snapshot. Revenue here prefers
offerFare over finalFare while the daily trend prefers finalFare; both rules
are kept distinct on purpose, matching how the dashboard has always reported.
"""

import logging
import time
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from booking_analytics.amounts import first_present, parse_amount
from booking_analytics.commission import calculate_commission, calculate_total_commission
from booking_analytics.constants import (
    LEADERBOARD_SIZE,
    MS_PER_DAY,
    STATUS_ACCEPTED,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
    UNKNOWN_EMAIL,
    UNKNOWN_NAME,
)
from booking_analytics.core.exceptions import InvalidTimeWindowError
from booking_analytics.models import (
    AggregateMetrics,
    AnalyticsReport,
    Booking,
    DailyBucket,
    LeaderboardEntry,
    TimeWindow,
    TrendPoint,
    User,
)

logger = logging.getLogger(__name__)

SUPPORTED_WINDOWS: tuple[TimeWindow, ...] = (7, 30, 90, "all")


def parse_time_window(value: Any) -> TimeWindow:
    """Normalise a lookback selector ("7", 30, "ALL", ...) to a TimeWindow."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "all":
            return "all"
        if text.isdigit() and int(text) in SUPPORTED_WINDOWS:
            return int(text)
    elif isinstance(value, int) and not isinstance(value, bool) and value in SUPPORTED_WINDOWS:
        return value

    raise InvalidTimeWindowError(
        f"Unsupported time window: {value!r}",
        details={"supported": [str(w) for w in SUPPORTED_WINDOWS]},
    )


def now_ms() -> float:
    return time.time() * 1000


def window_cutoff(window: TimeWindow, now: float | None = None) -> float | None:
    """Earliest timestamp (ms) inside the window, or None for "all"."""
    if window == "all":
        return None
    reference = now_ms() if now is None else now
    return reference - window * MS_PER_DAY


def filter_by_time_window(
    bookings: Iterable[Booking], window: Any, now: float | None = None
) -> list[Booking]:
    """Drop pending bookings and, unless window is "all", bookings older than the cutoff.

    A booking without a timestamp counts as epoch 0 and only survives "all".
    """
    cutoff = window_cutoff(parse_time_window(window), now)
    kept = [
        booking
        for booking in bookings
        if booking.status != STATUS_PENDING
        and (cutoff is None or (booking.timestamp or 0) >= cutoff)
    ]
    logger.debug(f"Time window {window!r} kept {len(kept)} bookings")
    return kept


def local_date_key(timestamp: float) -> str | None:
    """ISO calendar date of a millisecond timestamp in the local timezone."""
    try:
        return datetime.fromtimestamp(timestamp / 1000).date().isoformat()
    except (OverflowError, OSError, ValueError):
        return None


def group_by_date(bookings: Iterable[Booking]) -> dict[str, DailyBucket]:
    """Per-day totals; completed bookings also add revenue and commission.

    The fare here is finalFare ?? offerFare. Bookings without a usable
    timestamp are left out of the series.
    """
    buckets: dict[str, DailyBucket] = {}
    for booking in bookings:
        if not booking.timestamp:
            continue
        key = local_date_key(booking.timestamp)
        if key is None:
            continue

        bucket = buckets.setdefault(key, DailyBucket())
        bucket.total += 1
        if booking.status == STATUS_COMPLETED:
            fare = parse_amount(first_present(booking.final_fare, booking.offer_fare))
            bucket.completed += 1
            bucket.revenue += fare
            bucket.commission += calculate_commission(fare).commission
    return buckets


def _index_users(users: Iterable[User]) -> dict[str, User]:
    index: dict[str, User] = {}
    for user in users:
        index.setdefault(user.id, user)
    return index


def _top_counts(ids: Iterable[str]) -> list[tuple[str, int]]:
    counts: dict[str, int] = {}
    for entity_id in ids:
        counts[entity_id] = counts.get(entity_id, 0) + 1
    # sorted() is stable, so ties keep first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:LEADERBOARD_SIZE]


def top_customers(bookings: Iterable[Booking], users: Mapping[str, User]) -> list[LeaderboardEntry]:
    """Customers with the most bookings of any status."""
    entries = []
    for customer_id, count in _top_counts(b.customer_id for b in bookings if b.customer_id):
        customer = users.get(customer_id)
        entries.append(
            LeaderboardEntry(
                id=customer_id,
                name=(customer and customer.name) or UNKNOWN_NAME,
                email=(customer and customer.email) or UNKNOWN_EMAIL,
                count=count,
            )
        )
    return entries


def top_drivers(bookings: Iterable[Booking], users: Mapping[str, User]) -> list[LeaderboardEntry]:
    """Drivers with the most completed bookings."""
    completed_driver_ids = (
        b.accepted_driver_id
        for b in bookings
        if b.status == STATUS_COMPLETED and b.accepted_driver_id
    )
    entries = []
    for driver_id, count in _top_counts(completed_driver_ids):
        driver = users.get(driver_id)
        name = None
        if driver is not None:
            name = driver.name or (driver.driver_details and driver.driver_details.full_name)
        entries.append(
            LeaderboardEntry(
                id=driver_id,
                name=name or UNKNOWN_NAME,
                email=(driver and driver.email) or UNKNOWN_EMAIL,
                count=count,
            )
        )
    return entries


def compute_metrics(bookings: Iterable[Booking], users: Iterable[User]) -> AggregateMetrics:
    """Summary metrics over bookings that already passed the time-window filter.

    Status buckets are exclusive; unknown statuses only count toward total.
    """
    bookings = list(bookings)
    status_counts = {
        STATUS_COMPLETED: 0,
        STATUS_CANCELLED: 0,
        STATUS_IN_PROGRESS: 0,
        STATUS_ACCEPTED: 0,
    }
    total_revenue = 0.0
    for booking in bookings:
        if booking.status in status_counts:
            status_counts[booking.status] += 1
        if booking.status == STATUS_COMPLETED:
            total_revenue += parse_amount(first_present(booking.offer_fare, booking.final_fare))

    total = len(bookings)
    completed = status_counts[STATUS_COMPLETED]
    commission = calculate_total_commission(bookings)
    user_index = _index_users(users)

    return AggregateMetrics(
        total=total,
        completed=completed,
        cancelled=status_counts[STATUS_CANCELLED],
        in_progress=status_counts[STATUS_IN_PROGRESS],
        accepted=status_counts[STATUS_ACCEPTED],
        total_revenue=total_revenue,
        avg_booking_value=total_revenue / completed if completed else 0.0,
        completion_rate=completed / total * 100 if total else 0.0,
        total_commission=commission.total_commission,
        avg_commission=commission.average_commission,
        total_driver_receives=commission.total_driver_receives,
        bookings_by_date=group_by_date(bookings),
        top_customers=top_customers(bookings, user_index),
        top_drivers=top_drivers(bookings, user_index),
    )


def build_trend_series(bookings_by_date: Mapping[str, DailyBucket]) -> list[TrendPoint]:
    """Chronological chart points with bar heights relative to the busiest day."""
    dates = sorted(bookings_by_date)
    max_bookings = max([bookings_by_date[d].total for d in dates] + [1])
    max_revenue = max([bookings_by_date[d].revenue for d in dates] + [1])
    max_commission = max([bookings_by_date[d].commission for d in dates] + [1])

    points = []
    for date in dates:
        bucket = bookings_by_date[date]
        points.append(
            TrendPoint(
                date=date,
                bookings=bucket.total,
                completed=bucket.completed,
                revenue=bucket.revenue,
                commission=bucket.commission,
                bookings_height=bucket.total / max_bookings * 100,
                revenue_height=bucket.revenue / max_revenue * 100,
                commission_height=bucket.commission / max_commission * 100,
            )
        )
    return points


def build_analytics_report(
    bookings: Iterable[Booking],
    users: Iterable[User],
    window: Any = 30,
    now: float | None = None,
) -> AnalyticsReport:
    """Filter, aggregate and chart a snapshot in one call."""
    parsed = parse_time_window(window)
    filtered = filter_by_time_window(bookings, parsed, now)
    metrics = compute_metrics(filtered, users)
    return AnalyticsReport(
        window=parsed,
        metrics=metrics,
        trend=build_trend_series(metrics.bookings_by_date),
    )
