"""Rental policy limits applied by the booking flow."""

from dataclasses import dataclass
from datetime import date, timedelta

from .date_range import DateRange
from .errors import RentalPolicyError


@dataclass(frozen=True)
class RentalPolicy:
    """
    Limits on what customers may book.

    max_rental_days counts days between pick-up and drop-off
    (a same-day rental is 0). booking_horizon_days limits how far ahead
    the pick-up day may be.
    """

    max_rental_days: int = 90
    booking_horizon_days: int = 365

    def check(self, start: date, end: date, today: date) -> None:
        """Raise RentalPolicyError if the rental breaks a limit."""
        dates = DateRange(start, end)
        rental_days = (dates.end - dates.start).days
        if rental_days > self.max_rental_days:
            raise RentalPolicyError(
                f"Rentals are limited to {self.max_rental_days} days "
                f"(requested {rental_days})"
            )
        last_pickup = today + timedelta(days=self.booking_horizon_days)
        if dates.start > last_pickup:
            raise RentalPolicyError(
                f"Bookings can only be made up to {self.booking_horizon_days} days "
                f"ahead (latest pick-up {last_pickup.isoformat()})"
            )
