"""Test factories for booking and user records."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from typing import Any

from booking_analytics.models import Booking, User

# Local wall-clock reference so date-grouping tests hold in any timezone
REFERENCE_TIME = datetime(2025, 3, 15, 12, 0, 0)


def local_ms(moment: datetime) -> float:
    """Milliseconds since epoch for a naive local datetime."""
    return moment.timestamp() * 1000


def days_ago(days: float, reference: datetime = REFERENCE_TIME) -> float:
    return local_ms(reference - timedelta(days=days))


class BookingFactory:
    """Factory for Booking records in the database's camelCase layout."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    def record(self, **overrides: Any) -> dict[str, Any]:
        """Raw record as it appears in a snapshot export."""
        defaults: dict[str, Any] = {
            "id": f"booking_{next(self._ids)}",
            "status": "completed",
            "offerFare": 1500,
            "timestamp": days_ago(1),
            "customerId": "customer_1",
            "loadName": "Furniture",
            "pickupLocation": "Lahore",
            "destinationLocation": "Karachi",
        }
        defaults.update(overrides)
        return defaults

    def build(self, **overrides: Any) -> Booking:
        return Booking.model_validate(self.record(**overrides))

    def batch(self, count: int, **overrides: Any) -> list[Booking]:
        return [self.build(**overrides) for _ in range(count)]


class UserFactory:
    def customer(self, user_id: str, **overrides: Any) -> User:
        defaults: dict[str, Any] = {
            "id": user_id,
            "name": f"Customer {user_id}",
            "email": f"{user_id}@example.com",
            "role": "customer",
        }
        defaults.update(overrides)
        return User.model_validate(defaults)

    def driver(self, user_id: str, **overrides: Any) -> User:
        defaults: dict[str, Any] = {
            "id": user_id,
            "name": f"Driver {user_id}",
            "email": f"{user_id}@example.com",
            "role": "driver",
        }
        defaults.update(overrides)
        return User.model_validate(defaults)

    def enterprise(self, user_id: str, **overrides: Any) -> User:
        defaults: dict[str, Any] = {
            "id": user_id,
            "email": f"{user_id}@example.com",
            "role": "enterprise",
            "enterpriseDetails": {"enterpriseName": f"Enterprise {user_id}"},
        }
        defaults.update(overrides)
        return User.model_validate(defaults)
