"""Combine occupancy of several cars for multi-car calendar views."""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List

from .occupancy import OccupancyInterval, OccupancyKind
from .status import BookingStatus


@dataclass
class FleetSummary:
    """Counts shown above the fleet calendar."""

    active_bookings: int = 0
    pending_bookings: int = 0
    maintenance_blocks: int = 0
    total_events: int = 0


def fleet_intervals(
    index, car_ids: Iterable[str], window_start: date, window_end: date
) -> List[OccupancyInterval]:
    """Fetch intervals for each selected car through an AvailabilityIndex."""
    intervals: List[OccupancyInterval] = []
    # Each car once, even if selected twice
    for car_id in dict.fromkeys(car_ids):
        intervals.extend(index.intervals(car_id, window_start, window_end))
    return intervals


def build_fleet_events(
    car_ids: Iterable[str], intervals: Iterable[OccupancyInterval]
) -> List[OccupancyInterval]:
    """
    Intervals belonging to the selected cars, ordered by start date.

    No conflict resolution happens here: cars never conflict with each other,
    and each interval keeps its car, kind and booking status for rendering.
    """
    selected = set(car_ids)
    events = [i for i in intervals if i.car_id in selected]
    events.sort(key=lambda i: (i.start, i.end, i.car_id, i.kind.value))
    return events


def group_by_car(
    car_ids: Iterable[str], events: Iterable[OccupancyInterval]
) -> Dict[str, List[OccupancyInterval]]:
    """One row per selected car, in the order given, including empty rows."""
    rows: Dict[str, List[OccupancyInterval]] = OrderedDict(
        (car_id, []) for car_id in dict.fromkeys(car_ids)
    )
    for event in events:
        if event.car_id in rows:
            rows[event.car_id].append(event)
    return rows


def summarize_fleet(events: Iterable[OccupancyInterval]) -> FleetSummary:
    summary = FleetSummary()
    for event in events:
        summary.total_events += 1
        if event.kind == OccupancyKind.MAINTENANCE:
            summary.maintenance_blocks += 1
        elif event.booking_status == BookingStatus.ACTIVE:
            summary.active_bookings += 1
        elif event.booking_status == BookingStatus.PENDING:
            summary.pending_bookings += 1
    return summary
