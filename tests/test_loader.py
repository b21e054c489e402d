#!/usr/bin/env python3
"""Tests for YAML loading and saving utilities."""
from datetime import date

import pytest
import yaml

from availability import (
    Booking,
    BookingStatus,
    Car,
    Fleet,
    InvalidTransition,
    MaintenanceBlock,
    RentalPolicyError,
    StaleConflict,
    DayStatus,
    add_maintenance_block,
    commit_booking,
    delete_maintenance_block,
    load_fleet,
    new_id,
    update_booking_status,
)
from availability.loader import parse_date

TODAY = date(2025, 3, 5)

FLEET_YAML = """
policy:
  maxRentalDays: 30

cars:
  - id: car-1
    make: Toyota
    model: Corolla
    year: 2022
    carNumber: EK-001
  - id: car-2
    make: Kia
    model: Rio
    trim: LX
    year: 2023
    carNumber: EK-002

bookings:
  - id: bk-1
    carId: car-1
    startDate: '2025-03-10'
    endDate: '2025-03-15'
    status: confirmed
    customerName: Jane Doe
  - id: bk-2
    carId: car-1
    startDate: 2025-03-20
    endDate: '2025-03-22T00:00:00+00:00'
    status: pending

maintenanceBlocks:
  - id: mb-1
    carId: car-2
    startDate: '2025-03-01'
    endDate: '2025-03-12'
    reason: Brake service
"""


@pytest.fixture
def fleet_file(tmp_path):
    path = tmp_path / "fleet.yaml"
    path.write_text(FLEET_YAML)
    return path


def read_raw(path):
    return yaml.safe_load(path.read_text())


# =============================================================================
# parse_date / new_id tests
# =============================================================================


class TestParseDate:
    """Tests for parse_date."""

    def test_accepts_date_string_and_timestamp(self):
        assert parse_date(date(2025, 3, 10)) == date(2025, 3, 10)
        assert parse_date("2025-03-10") == date(2025, 3, 10)
        assert parse_date("2025-03-10T14:30:00Z") == date(2025, 3, 10)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_date("next tuesday")
        with pytest.raises(ValueError):
            parse_date(None)


class TestNewId:
    def test_prefix_and_uniqueness(self):
        a, b = new_id("bk"), new_id("bk")
        assert a.startswith("bk-")
        assert a != b


# =============================================================================
# load_fleet tests
# =============================================================================


class TestLoadFleet:
    """Tests for load_fleet."""

    def test_loads_records(self, fleet_file):
        fleet = load_fleet(fleet_file)
        assert isinstance(fleet, Fleet)
        assert [c.id for c in fleet.cars] == ["car-1", "car-2"]
        assert isinstance(fleet.cars[1], Car)
        assert fleet.cars[1].trim == "LX"
        assert isinstance(fleet.bookings[0], Booking)
        assert fleet.bookings[0].status == BookingStatus.CONFIRMED
        assert fleet.bookings[0].customer_name == "Jane Doe"
        assert isinstance(fleet.maintenance_blocks[0], MaintenanceBlock)
        assert fleet.maintenance_blocks[0].reason == "Brake service"

    def test_missing_status_defaults_to_pending(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text(FLEET_YAML.replace("    status: confirmed\n", ""))
        assert load_fleet(path).get_booking("bk-1").status == BookingStatus.PENDING

    def test_mixed_date_formats(self, fleet_file):
        booking = load_fleet(fleet_file).get_booking("bk-2")
        assert booking.start_date == date(2025, 3, 20)
        assert booking.end_date == date(2025, 3, 22)

    def test_policy_overrides_and_defaults(self, fleet_file):
        policy = load_fleet(fleet_file).policy
        assert policy.max_rental_days == 30
        assert policy.booking_horizon_days == 365

    def test_minimal_file(self, tmp_path):
        path = tmp_path / "minimal.yaml"
        path.write_text("cars: []\n")
        fleet = load_fleet(path)
        assert fleet.cars == []
        assert fleet.bookings == []
        assert fleet.maintenance_blocks == []


# =============================================================================
# commit_booking tests
# =============================================================================


class TestCommitBooking:
    """Tests for commit_booking."""

    def test_saves_free_dates(self, fleet_file):
        booking = Booking("bk-new", "car-1", date(2025, 3, 16), date(2025, 3, 19),
                          BookingStatus.PENDING, "Sam")
        commit_booking(fleet_file, booking, TODAY)

        raw = read_raw(fleet_file)["bookings"][-1]
        assert raw == {
            "id": "bk-new",
            "carId": "car-1",
            "startDate": "2025-03-16",
            "endDate": "2025-03-19",
            "status": "pending",
            "customerName": "Sam",
        }
        assert load_fleet(fleet_file).get_booking("bk-new").customer_name == "Sam"

    def test_rejects_dates_taken_since_check(self, fleet_file):
        """Another writer booked the days first: StaleConflict, nothing written."""
        first = Booking("bk-a", "car-1", date(2025, 3, 16), date(2025, 3, 18))
        second = Booking("bk-b", "car-1", date(2025, 3, 18), date(2025, 3, 19))
        commit_booking(fleet_file, first, TODAY)

        with pytest.raises(StaleConflict) as excinfo:
            commit_booking(fleet_file, second, TODAY)
        assert excinfo.value.conflict.day == date(2025, 3, 18)
        assert excinfo.value.conflict.reason == DayStatus.RESERVED
        assert "just became unavailable" in str(excinfo.value)
        assert [b["id"] for b in read_raw(fleet_file)["bookings"]][-1] == "bk-a"

    def test_rejects_maintenance_days(self, fleet_file):
        booking = Booking("bk-x", "car-2", date(2025, 3, 12), date(2025, 3, 14))
        with pytest.raises(StaleConflict) as excinfo:
            commit_booking(fleet_file, booking, TODAY)
        assert excinfo.value.conflict.reason == DayStatus.BLOCKED

    def test_policy_enforced(self, fleet_file):
        booking = Booking("bk-x", "car-1", date(2025, 4, 1), date(2025, 5, 15))
        with pytest.raises(RentalPolicyError):
            commit_booking(fleet_file, booking, TODAY)

    def test_unknown_car(self, fleet_file):
        booking = Booking("bk-x", "car-9", date(2025, 4, 1), date(2025, 4, 2))
        with pytest.raises(KeyError):
            commit_booking(fleet_file, booking, TODAY)

    def test_cancelled_booking_frees_dates(self, fleet_file):
        update_booking_status(fleet_file, "bk-1", BookingStatus.CANCELLED)
        booking = Booking("bk-y", "car-1", date(2025, 3, 12), date(2025, 3, 13))
        commit_booking(fleet_file, booking, TODAY)
        assert load_fleet(fleet_file).get_booking("bk-y").car_id == "car-1"


# =============================================================================
# update_booking_status tests
# =============================================================================


class TestUpdateBookingStatus:
    """Tests for update_booking_status."""

    def test_updates_status(self, fleet_file):
        booking = update_booking_status(fleet_file, "bk-2", BookingStatus.CONFIRMED)
        assert booking.status == BookingStatus.CONFIRMED
        assert read_raw(fleet_file)["bookings"][1]["status"] == "confirmed"

    def test_invalid_transition_leaves_file(self, fleet_file):
        before = fleet_file.read_text()
        with pytest.raises(InvalidTransition):
            update_booking_status(fleet_file, "bk-2", BookingStatus.COMPLETED)
        assert fleet_file.read_text() == before

    def test_unknown_booking(self, fleet_file):
        with pytest.raises(KeyError):
            update_booking_status(fleet_file, "bk-9", BookingStatus.CONFIRMED)


# =============================================================================
# maintenance block tests
# =============================================================================


class TestMaintenanceBlocks:
    """Tests for add_maintenance_block and delete_maintenance_block."""

    def test_add_block(self, fleet_file):
        block = MaintenanceBlock("mb-2", "car-1", date(2025, 4, 1), date(2025, 4, 3), "Tyres")
        assert add_maintenance_block(fleet_file, block) == []
        raw = read_raw(fleet_file)["maintenanceBlocks"][-1]
        assert raw == {
            "id": "mb-2",
            "carId": "car-1",
            "startDate": "2025-04-01",
            "endDate": "2025-04-03",
            "reason": "Tyres",
        }

    def test_add_block_over_booking_reports_it(self, fleet_file):
        block = MaintenanceBlock("mb-2", "car-1", date(2025, 3, 14), date(2025, 3, 20))
        affected = add_maintenance_block(fleet_file, block)
        assert sorted(b.id for b in affected) == ["bk-1", "bk-2"]
        assert "reason" not in read_raw(fleet_file)["maintenanceBlocks"][-1]

    def test_add_block_to_file_without_blocks(self, tmp_path):
        path = tmp_path / "fleet.yaml"
        path.write_text(
            "cars:\n- id: c\n  make: Kia\n  model: Rio\n  year: 2023\n  carNumber: K1\n"
        )
        add_maintenance_block(path, MaintenanceBlock("mb-1", "c", date(2025, 4, 1), date(2025, 4, 1)))
        assert len(load_fleet(path).maintenance_blocks) == 1

    def test_add_block_unknown_car(self, fleet_file):
        with pytest.raises(KeyError):
            add_maintenance_block(
                fleet_file, MaintenanceBlock("mb-2", "car-9", date(2025, 4, 1), date(2025, 4, 3))
            )

    def test_delete_block(self, fleet_file):
        removed = delete_maintenance_block(fleet_file, "mb-1")
        assert removed.car_id == "car-2"
        assert read_raw(fleet_file)["maintenanceBlocks"] == []

    def test_delete_unknown_block(self, fleet_file):
        with pytest.raises(KeyError):
            delete_maintenance_block(fleet_file, "mb-9")
