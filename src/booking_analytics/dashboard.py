"""Headline counters for the admin overview screen."""

from collections.abc import Iterable

from booking_analytics.constants import STATUS_CANCELLED, STATUS_COMPLETED, STATUS_PENDING
from booking_analytics.models import (
    Booking,
    BookingCounts,
    Dashboard,
    User,
    UserCounts,
    VehicleUsage,
)


def summarize_users(users: Iterable[User]) -> UserCounts:
    """Count users by role. Users without a role are customers."""
    counts = UserCounts()
    for user in users:
        counts.total += 1
        if user.role in ("customer", None, ""):
            counts.customers += 1
        elif user.role == "driver":
            counts.drivers += 1
        elif user.role == "enterprise":
            counts.enterprises += 1
    return counts


def summarize_bookings(bookings: Iterable[Booking]) -> BookingCounts:
    counts = BookingCounts()
    for booking in bookings:
        if booking.status != STATUS_PENDING:
            counts.total += 1
        if booking.status == STATUS_COMPLETED:
            counts.completed += 1
        elif booking.status == STATUS_CANCELLED:
            counts.cancelled += 1
    return counts


def count_vehicle_usage(bookings: Iterable[Booking]) -> VehicleUsage:
    """Completed trips per vehicle type; the first type to reach the top count wins."""
    counts: dict[str, int] = {}
    for booking in bookings:
        if booking.status == STATUS_COMPLETED and booking.vehicle_type:
            counts[booking.vehicle_type] = counts.get(booking.vehicle_type, 0) + 1

    usage = VehicleUsage(counts=counts)
    for vehicle_type, count in counts.items():
        if count > usage.most_used_count:
            usage.most_used = vehicle_type
            usage.most_used_count = count
    return usage


def build_dashboard(bookings: Iterable[Booking], users: Iterable[User]) -> Dashboard:
    bookings = list(bookings)
    return Dashboard(
        users=summarize_users(users),
        bookings=summarize_bookings(bookings),
        vehicles=count_vehicle_usage(bookings),
    )
