"""
Occupancy intervals: bookings and maintenance blocks in one shape.

Each source kind has its own adapter so nothing downstream has to inspect
which fields a record happens to carry.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

from .booking import Booking
from .date_range import DateRange, contains, overlaps
from .maintenance_block import MaintenanceBlock
from .status import BookingStatus


class OccupancyKind(Enum):
    RESERVATION = "reservation"
    MAINTENANCE = "maintenance"


@dataclass(frozen=True)
class OccupancyInterval:
    """Days of one car taken by a booking or a maintenance block."""

    car_id: str
    start: date
    end: date
    kind: OccupancyKind
    label: str
    source_id: Optional[str] = None
    booking_status: Optional[BookingStatus] = None

    @property
    def dates(self) -> DateRange:
        return DateRange(self.start, self.end)

    def contains(self, day: date) -> bool:
        return contains(self, day)

    def overlaps(self, other) -> bool:
        return overlaps(self, other)


def booking_label(booking: Booking) -> str:
    """Customer name, or Booked/Pending when the holder is unknown."""
    if booking.customer_name:
        return booking.customer_name
    if booking.status == BookingStatus.PENDING:
        return "Pending"
    return "Booked"


def from_booking(booking: Booking) -> OccupancyInterval:
    return OccupancyInterval(
        car_id=booking.car_id,
        start=booking.start_date,
        end=booking.end_date,
        kind=OccupancyKind.RESERVATION,
        label=booking_label(booking),
        source_id=booking.id,
        booking_status=booking.status,
    )


def from_maintenance_block(block: MaintenanceBlock) -> OccupancyInterval:
    return OccupancyInterval(
        car_id=block.car_id,
        start=block.start_date,
        end=block.end_date,
        kind=OccupancyKind.MAINTENANCE,
        label=block.reason or "Maintenance",
        source_id=block.id,
    )


def collect_intervals(
    bookings: Iterable[Booking], blocks: Iterable[MaintenanceBlock]
) -> List[OccupancyInterval]:
    """
    Project bookings and maintenance blocks into occupancy intervals.

    Only pending, confirmed and active bookings are kept; cancelled and
    completed ones never occupy a day. Maintenance blocks always do.
    Past intervals are kept as-is.
    """
    intervals = [from_booking(b) for b in bookings if b.occupies]
    intervals.extend(from_maintenance_block(m) for m in blocks)
    return intervals
