"""Inclusive calendar-day ranges."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from .errors import InvalidRange


@dataclass(frozen=True)
class DateRange:
    """
    A closed range of calendar days, both ends included.

    A booking ending on day D makes D itself unavailable to anyone else
    (full-day turnover), so two ranges sharing a single boundary day overlap.
    """

    start: date
    end: date

    def __post_init__(self):
        if self.start is None or self.end is None or self.start > self.end:
            raise InvalidRange(self.start, self.end)

    def overlaps(self, other: "DateRange") -> bool:
        return overlaps(self, other)

    def contains(self, day: date) -> bool:
        return contains(self, day)

    def days(self) -> Iterator[date]:
        """Every day in the range, in increasing order."""
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1


def overlaps(a, b) -> bool:
    """True if the ranges share at least one calendar day."""
    return a.start <= b.end and b.start <= a.end


def contains(span, day: date) -> bool:
    """True if ``day`` falls inside ``span`` (ends included)."""
    return span.start <= day <= span.end
