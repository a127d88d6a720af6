"""Command line entry point.

Computes commission and analytics reports from a snapshot file and prints
them as JSON, or serves the same computations over HTTP.
"""

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from pydantic import BaseModel

from booking_analytics.analytics import build_analytics_report
from booking_analytics.commission import calculate_commission, calculate_total_commission
from booking_analytics.core.exceptions import AnalyticsError, ConfigurationError
from booking_analytics.dashboard import build_dashboard
from booking_analytics.ledger import SORT_FIELDS, build_commission_ledger
from booking_analytics.logging_setup import setup_logging
from booking_analytics.reports import SORT_FIELDS as REPORT_SORT_FIELDS
from booking_analytics.reports import build_performance_report
from booking_analytics.settings import Settings, get_settings
from booking_analytics.snapshot import load_snapshot

logger = logging.getLogger(__name__)


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="booking-analytics",
        description="Commission and booking analytics for the logistics marketplace",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    quote = subparsers.add_parser("quote", help="Commission split for a single fare")
    quote.add_argument("fare", help="Fare amount")

    summary = subparsers.add_parser("summary", help="Commission totals for completed bookings")
    summary.add_argument("snapshot", help="Path to a JSON snapshot")

    report = subparsers.add_parser("report", help="Analytics metrics and daily trend")
    report.add_argument("snapshot", help="Path to a JSON snapshot")
    report.add_argument(
        "--window",
        default=settings.analytics.default_window,
        help="Lookback in days (7, 30, 90) or 'all'",
    )

    ledger = subparsers.add_parser("ledger", help="Per-booking commission ledger")
    ledger.add_argument("snapshot", help="Path to a JSON snapshot")
    ledger.add_argument("--window", default="all", help="Lookback in days (7, 30, 90) or 'all'")
    ledger.add_argument("--search", default="", help="Filter by load, customer or location")
    ledger.add_argument("--sort-by", default="commission", choices=SORT_FIELDS)
    ledger.add_argument("--ascending", action="store_true", help="Sort ascending")

    reports = subparsers.add_parser("reports", help="Driver and enterprise performance")
    reports.add_argument("snapshot", help="Path to a JSON snapshot")
    reports.add_argument("--search", default="", help="Filter by name, email, phone or licence")
    reports.add_argument("--sort-by", default="total", choices=REPORT_SORT_FIELDS)
    reports.add_argument("--ascending", action="store_true", help="Sort ascending")

    dashboard = subparsers.add_parser("dashboard", help="User and booking counters")
    dashboard.add_argument("snapshot", help="Path to a JSON snapshot")

    serve = subparsers.add_parser("serve", help="Run the HTTP compute service")
    serve.add_argument("--host", default=settings.api.host)
    serve.add_argument("--port", type=int, default=settings.api.port)

    return parser


def _emit(result: BaseModel) -> None:
    print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))


def serve(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from booking_analytics.api.app import create_app

    if not settings.api.key:
        raise ConfigurationError("Required credential not provided: API_KEY")

    logger.info(f"Serving analytics API on {host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_config=None)


def run(args: argparse.Namespace, settings: Settings) -> None:
    if args.command == "quote":
        _emit(calculate_commission(args.fare))
    elif args.command == "serve":
        serve(settings, args.host, args.port)
    else:
        snapshot = load_snapshot(args.snapshot)
        if args.command == "summary":
            _emit(calculate_total_commission(snapshot.bookings))
        elif args.command == "report":
            _emit(build_analytics_report(snapshot.bookings, snapshot.users, window=args.window))
        elif args.command == "ledger":
            _emit(
                build_commission_ledger(
                    snapshot.bookings,
                    snapshot.users,
                    window=args.window,
                    search=args.search,
                    sort_by=args.sort_by,
                    descending=not args.ascending,
                )
            )
        elif args.command == "dashboard":
            _emit(build_dashboard(snapshot.bookings, snapshot.users))
        elif args.command == "reports":
            _emit(
                build_performance_report(
                    snapshot.bookings,
                    snapshot.users,
                    driver_history=snapshot.driver_history,
                    enterprise_history=snapshot.enterprise_history,
                    driver_ratings=snapshot.driver_ratings,
                    enterprise_ratings=snapshot.enterprise_ratings,
                    search=args.search,
                    sort_by=args.sort_by,
                    descending=not args.ascending,
                )
            )


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    setup_logging(
        level=settings.analytics.log_level,
        json_output=settings.analytics.log_format == "json",
        environment=settings.analytics.environment,
    )
    args = build_parser(settings).parse_args(argv)

    try:
        run(args, settings)
    except AnalyticsError as e:
        logger.error(e.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
