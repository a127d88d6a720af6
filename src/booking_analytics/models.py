"""Pydantic data contracts for booking analytics.

Input records (Booking, User) mirror the document database and accept its
camelCase keys. They are frozen and validate leniently: a malformed field
degrades to None instead of failing the whole snapshot.
"""

import math
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booking_analytics.constants import COMMISSION_RATE, MINIMUM_COMMISSION

TimeWindow = int | Literal["all"]


def _optional_str(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return str(value)
    return None


def _optional_timestamp(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        ts = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return ts if math.isfinite(ts) else None


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class DriverDetails(_Record):
    full_name: str | None = Field(default=None, alias="fullName")
    license_number: str | None = Field(default=None, alias="licenseNumber")
    cnic: str | None = None

    @field_validator("full_name", "license_number", "cnic", mode="before")
    @classmethod
    def coerce_optional_str(cls, v: Any) -> str | None:
        return _optional_str(v)


class EnterpriseDetails(_Record):
    enterprise_name: str | None = Field(default=None, alias="enterpriseName")
    contact_phone: str | None = Field(default=None, alias="contactPhone")
    cooperate_number: str | None = Field(default=None, alias="cooperateNumber")
    registration_number: str | None = Field(default=None, alias="registrationNumber")

    @field_validator(
        "enterprise_name", "contact_phone", "cooperate_number", "registration_number", mode="before"
    )
    @classmethod
    def coerce_optional_str(cls, v: Any) -> str | None:
        return _optional_str(v)


class Booking(_Record):
    """A transport request as stored by the marketplace.

    Fare fields keep their raw value; resolution and coercion to a number
    happen where each calculation needs them, since call sites disagree on
    which of the two fares takes precedence.
    """

    id: str = ""
    status: str | None = None
    offer_fare: Any = Field(default=None, alias="offerFare")
    final_fare: Any = Field(default=None, alias="finalFare")
    timestamp: float | None = None
    customer_id: str | None = Field(default=None, alias="customerId")
    accepted_driver_id: str | None = Field(default=None, alias="acceptedDriverId")
    accepted_enterprise_id: str | None = Field(default=None, alias="acceptedEnterpriseId")
    vehicle_type: str | None = Field(default=None, alias="vehicleType")
    load_name: str | None = Field(default=None, alias="loadName")
    pickup_location: str | None = Field(default=None, alias="pickupLocation")
    destination_location: str | None = Field(default=None, alias="destinationLocation")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return _optional_str(v) or ""

    @field_validator(
        "status",
        "customer_id",
        "accepted_driver_id",
        "accepted_enterprise_id",
        "vehicle_type",
        "load_name",
        "pickup_location",
        "destination_location",
        mode="before",
    )
    @classmethod
    def coerce_optional_str(cls, v: Any) -> str | None:
        return _optional_str(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> float | None:
        return _optional_timestamp(v)


class User(_Record):
    id: str = ""
    name: str | None = None
    email: str | None = None
    role: str | None = None
    phone: str | None = None
    created_at: float | None = Field(default=None, alias="createdAt")
    driver_details: DriverDetails | None = Field(default=None, alias="driverDetails")
    enterprise_details: EnterpriseDetails | None = Field(default=None, alias="enterpriseDetails")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return _optional_str(v) or ""

    @field_validator("name", "email", "role", "phone", mode="before")
    @classmethod
    def coerce_optional_str(cls, v: Any) -> str | None:
        return _optional_str(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, v: Any) -> float | None:
        return _optional_timestamp(v)

    @field_validator("driver_details", "enterprise_details", mode="before")
    @classmethod
    def drop_malformed_details(cls, v: Any) -> Any:
        if isinstance(v, DriverDetails | EnterpriseDetails):
            return v
        return v if isinstance(v, Mapping) else None


# Per-user collections keyed by user id, then by request id
ActivityLog = dict[str, dict[str, Any]]


class Snapshot(BaseModel):
    """Materialized bookings and users handed to the engine.

    The history and rating collections are optional; only the performance
    reports read them.
    """

    bookings: list[Booking] = Field(default_factory=list)
    users: list[User] = Field(default_factory=list)
    driver_history: ActivityLog = Field(default_factory=dict)
    enterprise_history: ActivityLog = Field(default_factory=dict)
    driver_ratings: ActivityLog = Field(default_factory=dict)
    enterprise_ratings: ActivityLog = Field(default_factory=dict)


# Commission


class CommissionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    commission: float
    driver_receives: float
    percentage: float
    commission_rate: float = COMMISSION_RATE
    minimum_commission: float = MINIMUM_COMMISSION


class BookingCommission(BaseModel):
    booking_id: str
    booking: Booking
    fare: float
    commission: float
    driver_receives: float
    percentage: float


class TotalCommissionSummary(BaseModel):
    total_commission: float = 0.0
    total_revenue: float = 0.0
    total_driver_receives: float = 0.0
    booking_count: int = 0
    average_commission: float = 0.0
    commission_by_booking: list[BookingCommission] = Field(default_factory=list)


# Analytics


class DailyBucket(BaseModel):
    total: int = 0
    completed: int = 0
    revenue: float = 0.0
    commission: float = 0.0


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    email: str
    count: int


class AggregateMetrics(BaseModel):
    total: int = 0
    completed: int = 0
    cancelled: int = 0
    in_progress: int = 0
    accepted: int = 0
    total_revenue: float = 0.0
    avg_booking_value: float = 0.0
    completion_rate: float = 0.0  # Percentage
    total_commission: float = 0.0
    avg_commission: float = 0.0
    total_driver_receives: float = 0.0
    bookings_by_date: dict[str, DailyBucket] = Field(default_factory=dict)
    top_customers: list[LeaderboardEntry] = Field(default_factory=list)
    top_drivers: list[LeaderboardEntry] = Field(default_factory=list)


class TrendPoint(BaseModel):
    date: str
    bookings: int
    completed: int
    revenue: float
    commission: float
    bookings_height: float  # Percentage of the busiest day
    revenue_height: float
    commission_height: float


class AnalyticsReport(BaseModel):
    window: TimeWindow
    metrics: AggregateMetrics
    trend: list[TrendPoint] = Field(default_factory=list)


# Commission ledger


class LedgerEntry(BaseModel):
    booking: Booking
    customer_name: str
    customer_email: str
    fare: float
    commission: float
    driver_receives: float
    commission_percentage: float


class CommissionLedger(BaseModel):
    entries: list[LedgerEntry] = Field(default_factory=list)
    shown: int = 0
    completed_total: int = 0
    summary: TotalCommissionSummary = Field(default_factory=TotalCommissionSummary)


# Dashboard


class UserCounts(BaseModel):
    total: int = 0
    customers: int = 0
    drivers: int = 0
    enterprises: int = 0


class BookingCounts(BaseModel):
    total: int = 0  # Excludes pending
    completed: int = 0
    cancelled: int = 0


class VehicleUsage(BaseModel):
    counts: dict[str, int] = Field(default_factory=dict)
    most_used: str = "N/A"
    most_used_count: int = 0


class Dashboard(BaseModel):
    users: UserCounts
    bookings: BookingCounts
    vehicles: VehicleUsage


# Performance reports


class DriverPerformance(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    license_number: str
    cnic: str
    created_at: float | None = None
    total_trips: int = 0  # History plus every request the driver accepted
    completed_trips: int = 0
    accepted_trips: int = 0
    in_progress_trips: int = 0
    average_rating: float | None = None
    total_ratings: int = 0


class EnterprisePerformance(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    registration_number: str
    created_at: float | None = None
    total_bookings: int = 0
    completed_bookings: int = 0
    accepted_bookings: int = 0
    dispatched_bookings: int = 0
    in_progress_bookings: int = 0
    average_rating: float | None = None
    total_ratings: int = 0


class PerformanceReport(BaseModel):
    drivers: list[DriverPerformance] = Field(default_factory=list)
    enterprises: list[EnterprisePerformance] = Field(default_factory=list)
