import json
import logging

import pytest

from booking_analytics.analytics import compute_metrics
from booking_analytics.commission import calculate_total_commission
from booking_analytics.core.exceptions import SnapshotError
from booking_analytics.ledger import build_commission_ledger
from booking_analytics.snapshot import load_snapshot, parse_snapshot


@pytest.mark.unit
class TestParseSnapshot:
    def test_database_export_layout(self):
        data = {
            "requests": {
                "-Nabc": {"status": "completed", "offerFare": "1500", "timestamp": 1741996800000},
                "-Ndef": {"id": "own-id", "status": "pending"},
            },
            "users": {
                "u1": {"name": "Ayesha", "role": "customer"},
                "u2": {"role": "driver", "driverDetails": {"fullName": "Imran"}},
            },
        }

        snapshot = parse_snapshot(data)

        assert [b.id for b in snapshot.bookings] == ["-Nabc", "own-id"]
        assert snapshot.bookings[0].offer_fare == "1500"
        assert snapshot.bookings[0].timestamp == 1741996800000.0
        assert [u.id for u in snapshot.users] == ["u1", "u2"]
        assert snapshot.users[1].driver_details.full_name == "Imran"

    def test_list_layout(self):
        data = {
            "bookings": [{"id": "b1", "status": "completed", "finalFare": 900}],
            "users": [{"id": "u1", "email": "u1@example.com"}],
        }

        snapshot = parse_snapshot(data)

        assert snapshot.bookings[0].final_fare == 900
        assert snapshot.users[0].email == "u1@example.com"

    def test_missing_collections(self):
        snapshot = parse_snapshot({})

        assert snapshot.bookings == []
        assert snapshot.users == []

    def test_malformed_records_skipped(self, caplog):
        data = {"requests": {"ok": {"status": "completed"}, "bad": "oops"}, "users": 42}

        with caplog.at_level(logging.WARNING):
            snapshot = parse_snapshot(data)

        assert [b.id for b in snapshot.bookings] == ["ok"]
        assert snapshot.users == []
        assert "Skipping malformed booking record bad" in caplog.text

    def test_lenient_field_values(self):
        data = {
            "requests": {
                "b1": {
                    "status": "completed",
                    "timestamp": "yesterday",
                    "customerId": 17,
                    "offerFare": None,
                    "weight": "2 tons",
                }
            },
            "users": {"u1": {"driverDetails": "n/a", "name": ["x"]}},
        }

        snapshot = parse_snapshot(data)

        booking = snapshot.bookings[0]
        assert booking.timestamp is None
        assert booking.customer_id == "17"
        assert booking.model_extra == {"weight": "2 tons"}
        assert snapshot.users[0].driver_details is None
        assert snapshot.users[0].name is None

    def test_oversized_integer_fare_degrades_to_zero(self):
        raw = json.loads(
            '{"bookings": [{"id": "huge", "status": "completed", "offerFare": 1'
            + "0" * 400
            + '}, {"id": "ok", "status": "completed", "offerFare": 2000}]}'
        )

        snapshot = parse_snapshot(raw)
        metrics = compute_metrics(snapshot.bookings, snapshot.users)
        summary = calculate_total_commission(snapshot.bookings)
        ledger = build_commission_ledger(snapshot.bookings, snapshot.users, window="all")

        assert metrics.total_revenue == 2000.0
        assert metrics.total_commission == 200.0
        assert summary.booking_count == 1
        assert ledger.shown == 2
        assert {e.booking.id: e.fare for e in ledger.entries} == {"huge": 0.0, "ok": 2000.0}

    def test_history_and_ratings_collections(self, caplog):
        data = {
            "driver_history": {"d1": {"req1": {"vehicleType": "Mazda"}}, "d2": "broken"},
            "enterprise_ratings": {"e1": {"req2": {"rating": 5}}},
            "driver_ratings": ["not", "an", "object"],
        }

        with caplog.at_level(logging.WARNING):
            snapshot = parse_snapshot(data)

        assert snapshot.driver_history == {"d1": {"req1": {"vehicleType": "Mazda"}}}
        assert snapshot.enterprise_ratings == {"e1": {"req2": {"rating": 5}}}
        assert snapshot.driver_ratings == {}
        assert snapshot.enterprise_history == {}
        assert "Skipping malformed driver_history entry d2" in caplog.text

    def test_not_an_object(self):
        with pytest.raises(SnapshotError):
            parse_snapshot([1, 2, 3])


@pytest.mark.unit
class TestLoadSnapshot:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps({"requests": {"b1": {"status": "completed"}}}))

        snapshot = load_snapshot(path)

        assert snapshot.bookings[0].id == "b1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError) as exc_info:
            load_snapshot(tmp_path / "absent.json")

        assert exc_info.value.details["path"].endswith("absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(SnapshotError):
            load_snapshot(path)
