import pytest

from booking_analytics.dashboard import (
    build_dashboard,
    count_vehicle_usage,
    summarize_bookings,
    summarize_users,
)
from booking_analytics.models import User


@pytest.mark.unit
class TestSummarizeUsers:
    def test_counts_by_role(self, user_factory):
        users = [
            user_factory.customer("c1"),
            User(id="c2"),
            user_factory.driver("d1"),
            user_factory.driver("d2"),
            User(id="e1", role="enterprise"),
            User(id="a1", role="admin"),
        ]

        counts = summarize_users(users)

        assert counts.total == 6
        assert counts.customers == 2
        assert counts.drivers == 2
        assert counts.enterprises == 1

    def test_empty(self):
        assert summarize_users([]).model_dump() == {
            "total": 0,
            "customers": 0,
            "drivers": 0,
            "enterprises": 0,
        }


@pytest.mark.unit
class TestSummarizeBookings:
    def test_total_excludes_pending(self, booking_factory):
        bookings = [
            booking_factory.build(status="pending"),
            booking_factory.build(status="completed"),
            booking_factory.build(status="cancelled"),
            booking_factory.build(status="accepted"),
        ]

        counts = summarize_bookings(bookings)

        assert counts.total == 3
        assert counts.completed == 1
        assert counts.cancelled == 1


@pytest.mark.unit
class TestVehicleUsage:
    def test_counts_completed_bookings_with_vehicle_type(self, booking_factory):
        bookings = [
            booking_factory.build(vehicleType="Shehzore"),
            booking_factory.build(vehicleType="Mazda"),
            booking_factory.build(vehicleType="Mazda"),
            booking_factory.build(vehicleType="Mazda", status="cancelled"),
            booking_factory.build(vehicleType=None),
        ]

        usage = count_vehicle_usage(bookings)

        assert usage.counts == {"Shehzore": 1, "Mazda": 2}
        assert usage.most_used == "Mazda"
        assert usage.most_used_count == 2

    def test_first_type_wins_tie(self, booking_factory):
        bookings = [
            booking_factory.build(vehicleType="Suzuki"),
            booking_factory.build(vehicleType="Hino"),
        ]

        assert count_vehicle_usage(bookings).most_used == "Suzuki"

    def test_no_vehicle_data(self):
        usage = count_vehicle_usage([])

        assert usage.most_used == "N/A"
        assert usage.most_used_count == 0


@pytest.mark.unit
def test_build_dashboard(booking_factory, user_factory):
    bookings = (booking_factory.build(vehicleType="Mazda") for _ in range(2))

    dashboard = build_dashboard(bookings, [user_factory.driver("d1")])

    assert dashboard.users.drivers == 1
    assert dashboard.bookings.completed == 2
    assert dashboard.vehicles.counts == {"Mazda": 2}
