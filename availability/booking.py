"""Booking class - a customer hold on a car for a date range."""

from datetime import date
from typing import Optional

from .date_range import DateRange
from .errors import InvalidTransition
from .status import ALLOWED_TRANSITIONS, BookingStatus


class Booking:
    """A customer reservation of a car, both end days included."""

    def __init__(
        self,
        booking_id: str,
        car_id: str,
        start_date: date,
        end_date: date,
        status: BookingStatus = BookingStatus.PENDING,
        customer_name: Optional[str] = None,
    ):
        self.id = booking_id
        self.car_id = car_id
        self.dates = DateRange(start_date, end_date)
        self.status = BookingStatus(status)
        self.customer_name = customer_name

    @property
    def start_date(self) -> date:
        return self.dates.start

    @property
    def end_date(self) -> date:
        return self.dates.end

    @property
    def occupies(self) -> bool:
        """Whether this booking holds its days on the calendar."""
        return self.status.occupies

    def can_transition_to(self, status: BookingStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, status: BookingStatus) -> None:
        """Move to a new lifecycle state, enforcing allowed transitions."""
        status = BookingStatus(status)
        if not self.can_transition_to(status):
            raise InvalidTransition(self.status, status)
        self.status = status
