"""Load booking and user snapshots from JSON exports.

Two layouts are understood: the realtime database export, where each
collection is an object keyed by record id, and plain record lists.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from booking_analytics.core.exceptions import SnapshotError
from booking_analytics.models import Booking, Snapshot, User

logger = logging.getLogger(__name__)

BOOKING_KEYS = ("requests", "bookings")
USER_KEYS = ("users",)
ACTIVITY_KEYS = ("driver_history", "enterprise_history", "driver_ratings", "enterprise_ratings")


def _records(collection: Any, name: str) -> list[dict[str, Any]]:
    if collection is None:
        return []

    if isinstance(collection, Mapping):
        items = [(str(key), value) for key, value in collection.items()]
    elif isinstance(collection, list):
        items = [(None, value) for value in collection]
    else:
        logger.warning(f"Ignoring {name}: expected an object or a list")
        return []

    records = []
    for key, value in items:
        if not isinstance(value, Mapping):
            logger.warning(f"Skipping malformed {name} record {key or '-'}")
            continue
        # The record's own id wins over the collection key
        records.append({"id": key, **value} if key is not None else dict(value))
    return records


def _activity_log(collection: Any, name: str) -> dict[str, dict[str, Any]]:
    """Per-user history or ratings, {user_id: {request_id: entry}}."""
    if collection is None:
        return {}
    if not isinstance(collection, Mapping):
        logger.warning(f"Ignoring {name}: expected an object")
        return {}

    log = {}
    for user_id, entries in collection.items():
        if not isinstance(entries, Mapping):
            logger.warning(f"Skipping malformed {name} entry {user_id}")
            continue
        log[str(user_id)] = {str(key): value for key, value in entries.items()}
    return log


def _collection(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def parse_snapshot(data: Any) -> Snapshot:
    """Build a Snapshot from already-decoded JSON."""
    if not isinstance(data, Mapping):
        raise SnapshotError("Snapshot must be a JSON object")

    bookings = [
        Booking.model_validate(record)
        for record in _records(_collection(data, BOOKING_KEYS), "booking")
    ]
    users = [
        User.model_validate(record) for record in _records(_collection(data, USER_KEYS), "user")
    ]
    activity = {key: _activity_log(data.get(key), key) for key in ACTIVITY_KEYS}
    logger.info(f"Loaded snapshot with {len(bookings)} bookings and {len(users)} users")
    return Snapshot(bookings=bookings, users=users, **activity)


def load_snapshot(path: str | Path) -> Snapshot:
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}", details={"path": str(path)}) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON in {path}: {e}", details={"path": str(path)}) from e

    return parse_snapshot(data)
