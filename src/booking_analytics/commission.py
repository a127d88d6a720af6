"""Hybrid commission model for completed bookings.

The platform takes COMMISSION_RATE of the fare or MINIMUM_COMMISSION,
whichever is higher. The driver receives the remainder, which goes negative
for fares below the floor; that payout is reported as-is, not clamped.
"""

import logging
from collections.abc import Iterable
from typing import Any

from booking_analytics.amounts import first_truthy, parse_amount, round_money
from booking_analytics.constants import COMMISSION_RATE, MINIMUM_COMMISSION, STATUS_COMPLETED
from booking_analytics.models import (
    Booking,
    BookingCommission,
    CommissionResult,
    TotalCommissionSummary,
)

logger = logging.getLogger(__name__)

_ZERO_COMMISSION = CommissionResult(commission=0.0, driver_receives=0.0, percentage=0.0)


def resolve_commission_fare(booking: Booking) -> float:
    """Fare used for commission: finalFare when truthy, else offerFare."""
    return parse_amount(first_truthy(booking.final_fare, booking.offer_fare))


def calculate_commission(fare: Any) -> CommissionResult:
    """Split a single fare into platform commission and driver payout.

    Non-positive or unparsable fares yield an all-zero result. The
    percentage is left unrounded for display layers to format.
    """
    amount = parse_amount(fare)
    if amount <= 0:
        return _ZERO_COMMISSION

    raw = max(amount * COMMISSION_RATE, MINIMUM_COMMISSION)
    commission = round_money(raw)
    return CommissionResult(
        commission=commission,
        driver_receives=round_money(amount - commission),
        percentage=raw / amount * 100,
    )


def calculate_total_commission(bookings: Iterable[Booking]) -> TotalCommissionSummary:
    """Aggregate commission over the completed bookings with a positive fare.

    Per-booking values are already rounded to cents; the grand totals are
    summed unrounded and rounded once at the end. The breakdown is ordered by
    commission, highest first, keeping input order among equal commissions.
    """
    total_commission = 0.0
    total_revenue = 0.0
    total_driver_receives = 0.0
    breakdown: list[BookingCommission] = []
    skipped = 0

    for booking in bookings:
        if booking.status != STATUS_COMPLETED:
            continue
        fare = resolve_commission_fare(booking)
        if fare <= 0:
            skipped += 1
            continue

        result = calculate_commission(fare)
        total_commission += result.commission
        total_revenue += fare
        total_driver_receives += result.driver_receives
        breakdown.append(
            BookingCommission(
                booking_id=booking.id,
                booking=booking,
                fare=fare,
                commission=result.commission,
                driver_receives=result.driver_receives,
                percentage=result.percentage,
            )
        )

    if skipped:
        logger.debug(f"Skipped {skipped} completed bookings without a positive fare")

    count = len(breakdown)
    return TotalCommissionSummary(
        total_commission=round_money(total_commission),
        total_revenue=round_money(total_revenue),
        total_driver_receives=round_money(total_driver_receives),
        booking_count=count,
        average_commission=round_money(total_commission / count) if count else 0.0,
        commission_by_booking=sorted(breakdown, key=lambda entry: entry.commission, reverse=True),
    )
