#!/usr/bin/env python3
"""Tests for the selection validator."""
from datetime import date

import pytest

from availability import (
    Booking,
    BookingStatus,
    Conflict,
    DayStatus,
    InvalidRange,
    MaintenanceBlock,
    collect_intervals,
    resolve_day_status,
    validate_selection,
)

TODAY = date(2025, 3, 5)


def d(day: int) -> date:
    return date(2025, 3, day)


class TestValidateSelectionScenarios:
    """Worked scenarios for validate_selection."""

    def test_confirmed_booking_conflict(self):
        intervals = collect_intervals(
            [Booking("bk-1", "R", d(10), d(15), BookingStatus.CONFIRMED)], []
        )
        result = validate_selection("R", d(12), d(13), intervals, TODAY)
        assert not result.ok
        assert result.conflict.day == d(12)
        assert result.conflict.reason == DayStatus.RESERVED

    def test_single_day_in_maintenance(self):
        intervals = collect_intervals([], [MaintenanceBlock("mb-1", "R", d(10), d(12))])
        result = validate_selection("R", d(10), d(10), intervals, TODAY)
        assert result.conflict == Conflict(d(10), DayStatus.BLOCKED, intervals[0])

    def test_cancelled_booking_ignored(self):
        intervals = collect_intervals(
            [Booking("bk-1", "R", d(10), d(15), BookingStatus.CANCELLED)], []
        )
        result = validate_selection("R", d(12), d(13), intervals, TODAY)
        assert result.ok
        assert result.conflict is None
        assert bool(result)

    def test_end_before_start_raises_without_iterating(self):
        class Exploding:
            def __iter__(self):
                raise AssertionError("intervals should not be read")

        with pytest.raises(InvalidRange):
            validate_selection("R", d(15), d(10), Exploding(), TODAY)

    def test_selection_in_past(self):
        result = validate_selection("R", d(1), d(3), [], TODAY)
        assert result.conflict.day == d(1)
        assert result.conflict.reason == DayStatus.PAST


class TestValidateSelectionOrdering:
    """Tests for first-conflict reporting."""

    def setup_method(self):
        self.intervals = collect_intervals(
            [Booking("bk-1", "R", d(20), d(22), BookingStatus.PENDING)],
            [MaintenanceBlock("mb-1", "R", d(15), d(16), "Brake service")],
        )

    def test_reports_earliest_conflicting_day(self):
        result = validate_selection("R", d(10), d(25), self.intervals, TODAY)
        assert result.conflict.day == d(15)
        assert result.conflict.reason == DayStatus.BLOCKED

    def test_deterministic_on_unchanged_data(self):
        first = validate_selection("R", d(10), d(25), self.intervals, TODAY)
        second = validate_selection("R", d(10), d(25), self.intervals, TODAY)
        assert first == second

    def test_range_touching_booking_end_conflicts(self):
        """Full-day turnover: the booking's last day is taken."""
        result = validate_selection("R", d(22), d(24), self.intervals, TODAY)
        assert result.conflict.day == d(22)
        assert result.conflict.reason == DayStatus.RESERVED

    def test_success_means_every_day_available(self):
        result = validate_selection("R", d(17), d(19), self.intervals, TODAY)
        assert result.ok
        for day in range(17, 20):
            assert resolve_day_status("R", d(day), self.intervals, TODAY) == DayStatus.AVAILABLE

    def test_other_cars_do_not_conflict(self):
        assert validate_selection("other", d(15), d(22), self.intervals, TODAY).ok


class TestConflictMessage:
    """Tests for user-facing conflict messages."""

    def test_reserved_message(self):
        msg = Conflict(d(12), DayStatus.RESERVED).message
        assert msg == "2025-03-12 is unavailable because of an existing booking"

    def test_blocked_message_includes_reason(self):
        intervals = collect_intervals([], [MaintenanceBlock("mb-1", "R", d(10), d(12), "Brakes")])
        msg = Conflict(d(10), DayStatus.BLOCKED, intervals[0]).message
        assert "maintenance" in msg
        assert "(Brakes)" in msg

    def test_past_message(self):
        assert "in the past" in Conflict(d(1), DayStatus.PAST).message
