"""Per-day availability status for a car."""

from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from .date_range import DateRange
from .occupancy import OccupancyInterval, OccupancyKind
from .status import DayStatus


def _covering(
    car_id: str, day: date, intervals: Iterable[OccupancyInterval], kind: OccupancyKind
) -> Optional[OccupancyInterval]:
    """First interval of ``kind`` for this car that contains ``day``."""
    for interval in intervals:
        if interval.car_id == car_id and interval.kind == kind and interval.contains(day):
            return interval
    return None


def explain_day(
    car_id: str, day: date, intervals: Iterable[OccupancyInterval], today: date
) -> Tuple[DayStatus, Optional[OccupancyInterval]]:
    """
    Resolve a day's status along with the interval responsible for it.

    Precedence, highest first:
    - PAST: day is before today, whatever occupies it
    - BLOCKED: a maintenance block covers the day
    - RESERVED: an occupying booking covers the day
    - AVAILABLE
    """
    if day < today:
        return DayStatus.PAST, None
    intervals = list(intervals)
    block = _covering(car_id, day, intervals, OccupancyKind.MAINTENANCE)
    if block is not None:
        return DayStatus.BLOCKED, block
    booking = _covering(car_id, day, intervals, OccupancyKind.RESERVATION)
    if booking is not None:
        return DayStatus.RESERVED, booking
    return DayStatus.AVAILABLE, None


def resolve_day_status(
    car_id: str, day: date, intervals: Iterable[OccupancyInterval], today: date
) -> DayStatus:
    """Classify one (car, day) pair. Intervals of other cars are ignored."""
    status, _ = explain_day(car_id, day, intervals, today)
    return status


def day_statuses(
    car_id: str,
    start: date,
    end: date,
    intervals: Iterable[OccupancyInterval],
    today: date,
) -> Dict[date, DayStatus]:
    """Status of every day in [start, end], in date order."""
    window = DateRange(start, end)
    relevant = [i for i in intervals if i.car_id == car_id and i.overlaps(window)]
    return OrderedDict(
        (day, resolve_day_status(car_id, day, relevant, today)) for day in window.days()
    )
