"""Status enums for day availability and booking lifecycle."""

from enum import Enum


class DayStatus(Enum):
    """Resolved availability of one car on one calendar day."""

    AVAILABLE = "available"
    RESERVED = "reserved"
    BLOCKED = "blocked"
    PAST = "past"


class BookingStatus(Enum):
    """Booking lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def occupies(self) -> bool:
        """True if a booking in this state holds its calendar days."""
        return self in OCCUPYING_STATUSES


OCCUPYING_STATUSES = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.ACTIVE}
)

# Transitions made by the booking/admin flow
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.ACTIVE, BookingStatus.CANCELLED},
    BookingStatus.ACTIVE: {BookingStatus.COMPLETED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}
