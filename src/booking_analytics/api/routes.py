import logging

from fastapi import APIRouter, Depends

from booking_analytics.analytics import build_analytics_report
from booking_analytics.api.auth import verify_api_key
from booking_analytics.api.models import (
    BookingsRequest,
    FareQuoteRequest,
    LedgerRequest,
    PerformanceRequest,
    ReportRequest,
    SnapshotRequest,
)
from booking_analytics.commission import calculate_commission, calculate_total_commission
from booking_analytics.dashboard import build_dashboard
from booking_analytics.ledger import build_commission_ledger
from booking_analytics.models import (
    AnalyticsReport,
    CommissionLedger,
    CommissionResult,
    Dashboard,
    PerformanceReport,
    TotalCommissionSummary,
)
from booking_analytics.reports import build_performance_report
from booking_analytics.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(verify_api_key)])


def _window(requested: int | str | None) -> int | str:
    if requested is None:
        return get_settings().analytics.default_window
    return requested


@router.post("/commission/quote", response_model=CommissionResult)
def quote_commission(body: FareQuoteRequest) -> CommissionResult:
    return calculate_commission(body.fare)


@router.post("/commission/summary", response_model=TotalCommissionSummary)
def commission_summary(body: BookingsRequest) -> TotalCommissionSummary:
    return calculate_total_commission(body.bookings)


@router.post("/commission/ledger", response_model=CommissionLedger)
def commission_ledger(body: LedgerRequest) -> CommissionLedger:
    return build_commission_ledger(
        body.bookings,
        body.users,
        window=_window(body.window),
        search=body.search,
        sort_by=body.sort_by,
        descending=body.descending,
    )


@router.post("/analytics/report", response_model=AnalyticsReport)
def analytics_report(body: ReportRequest) -> AnalyticsReport:
    report = build_analytics_report(body.bookings, body.users, window=_window(body.window))
    logger.info(
        f"Report for window {report.window}: {report.metrics.total} bookings, "
        f"{report.metrics.completed} completed"
    )
    return report


@router.post("/dashboard", response_model=Dashboard)
def dashboard(body: SnapshotRequest) -> Dashboard:
    return build_dashboard(body.bookings, body.users)


@router.post("/reports/performance", response_model=PerformanceReport)
def performance_report(body: PerformanceRequest) -> PerformanceReport:
    return build_performance_report(
        body.bookings,
        body.users,
        driver_history=body.driver_history,
        enterprise_history=body.enterprise_history,
        driver_ratings=body.driver_ratings,
        enterprise_ratings=body.enterprise_ratings,
        search=body.search,
        sort_by=body.sort_by,
        descending=body.descending,
    )
