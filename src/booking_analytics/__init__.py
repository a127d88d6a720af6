"""Commission and booking analytics for the logistics marketplace admin dashboard."""

from booking_analytics.analytics import (
    build_analytics_report,
    build_trend_series,
    compute_metrics,
    filter_by_time_window,
    parse_time_window,
)
from booking_analytics.commission import calculate_commission, calculate_total_commission
from booking_analytics.constants import COMMISSION_RATE, MINIMUM_COMMISSION
from booking_analytics.dashboard import build_dashboard
from booking_analytics.ledger import build_commission_ledger
from booking_analytics.models import Booking, Snapshot, User
from booking_analytics.reports import build_performance_report
from booking_analytics.snapshot import load_snapshot, parse_snapshot

__version__ = "0.1.0"

__all__ = [
    "COMMISSION_RATE",
    "MINIMUM_COMMISSION",
    "Booking",
    "Snapshot",
    "User",
    "build_analytics_report",
    "build_commission_ledger",
    "build_dashboard",
    "build_performance_report",
    "build_trend_series",
    "calculate_commission",
    "calculate_total_commission",
    "compute_metrics",
    "filter_by_time_window",
    "load_snapshot",
    "parse_snapshot",
    "parse_time_window",
]
