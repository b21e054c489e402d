"""Check a proposed rental date range against a car's occupancy."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from .date_range import DateRange
from .occupancy import OccupancyInterval
from .resolver import explain_day
from .status import DayStatus

REASON_TEXT = {
    DayStatus.RESERVED: "of an existing booking",
    DayStatus.BLOCKED: "the car is out of service for maintenance",
    DayStatus.PAST: "the date is in the past",
}


@dataclass(frozen=True)
class Conflict:
    """The first unavailable day of a rejected selection, and why."""

    day: date
    reason: DayStatus
    interval: Optional[OccupancyInterval] = None

    @property
    def message(self) -> str:
        text = f"{self.day.isoformat()} is unavailable because {REASON_TEXT[self.reason]}"
        if self.reason == DayStatus.BLOCKED and self.interval is not None:
            text += f" ({self.interval.label})"
        return text


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a selection check: ok, or the first conflict found."""

    conflict: Optional[Conflict] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None

    def __bool__(self) -> bool:
        return self.ok


def validate_selection(
    car_id: str,
    start: date,
    end: date,
    intervals: Iterable[OccupancyInterval],
    today: date,
) -> ValidationResult:
    """
    Confirm every day of [start, end] is available for ``car_id``.

    Days are checked in increasing order and the first day that is not
    AVAILABLE is reported. Raises InvalidRange before looking at any day
    when a date is missing or start is after end.

    A successful result creates nothing. The booking flow must re-validate
    when it commits, since the data can change in between.
    """
    selection = DateRange(start, end)
    relevant = [i for i in intervals if i.car_id == car_id and i.overlaps(selection)]
    for day in selection.days():
        status, interval = explain_day(car_id, day, relevant, today)
        if status != DayStatus.AVAILABLE:
            return ValidationResult(Conflict(day, status, interval))
    return ValidationResult()
