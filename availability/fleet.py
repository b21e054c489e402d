"""Fleet class - cars, bookings and maintenance blocks of one storefront."""

from datetime import date
from typing import Callable, List, Optional

from .booking import Booking
from .car import Car
from .date_range import DateRange
from .index import AvailabilityIndex
from .maintenance_block import MaintenanceBlock
from .policy import RentalPolicy


class Fleet:
    """
    In-memory record store for one fleet.

    ``list_bookings`` and ``list_maintenance_blocks`` are the queries the
    availability engine consumes. The mutating methods notify registered
    change listeners with the affected car id.
    """

    def __init__(
        self,
        cars: List[Car],
        bookings: Optional[List[Booking]] = None,
        maintenance_blocks: Optional[List[MaintenanceBlock]] = None,
        policy: Optional[RentalPolicy] = None,
    ):
        self.cars = cars
        self.bookings = bookings or []
        self.maintenance_blocks = maintenance_blocks or []
        self.policy = policy or RentalPolicy()
        self._listeners: List[Callable[[str], None]] = []
        self._index: Optional[AvailabilityIndex] = None

    # Lookups

    def get_car(self, car_id: str) -> Car:
        for car in self.cars:
            if car.id == car_id:
                return car
        raise KeyError(f"Unknown car '{car_id}'")

    def get_booking(self, booking_id: str) -> Booking:
        for booking in self.bookings:
            if booking.id == booking_id:
                return booking
        raise KeyError(f"Unknown booking '{booking_id}'")

    def get_maintenance_block(self, block_id: str) -> MaintenanceBlock:
        for block in self.maintenance_blocks:
            if block.id == block_id:
                return block
        raise KeyError(f"Unknown maintenance block '{block_id}'")

    @property
    def car_ids(self) -> List[str]:
        return [car.id for car in self.cars]

    def cars_sorted(self) -> List[Car]:
        """Cars ordered by fleet number."""
        return sorted(self.cars, key=lambda c: c.car_number)

    # Record store queries

    def list_bookings(
        self, car_id: str, window_start: date, window_end: date
    ) -> List[Booking]:
        """Bookings of a car overlapping the window, in any state."""
        window = DateRange(window_start, window_end)
        return [
            b for b in self.bookings
            if b.car_id == car_id and b.dates.overlaps(window)
        ]

    def list_maintenance_blocks(
        self, car_id: str, window_start: date, window_end: date
    ) -> List[MaintenanceBlock]:
        """Maintenance blocks of a car overlapping the window."""
        window = DateRange(window_start, window_end)
        return [
            m for m in self.maintenance_blocks
            if m.car_id == car_id and m.dates.overlaps(window)
        ]

    def bookings_overlapping(self, block: MaintenanceBlock) -> List[Booking]:
        """Occupying bookings that a maintenance block would cut into."""
        return [
            b for b in self.list_bookings(block.car_id, block.start_date, block.end_date)
            if b.occupies
        ]

    def upcoming_maintenance(self, today: date) -> List[MaintenanceBlock]:
        """Blocks not yet over, by start date."""
        blocks = [m for m in self.maintenance_blocks if m.end_date >= today]
        return sorted(blocks, key=lambda m: (m.start_date, m.car_id))

    # Mutations

    def add_change_listener(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def availability_index(self) -> AvailabilityIndex:
        """The fleet's availability index, invalidated on every change."""
        if self._index is None:
            self._index = AvailabilityIndex(self)
            self.add_change_listener(self._index.invalidate)
        return self._index

    def _changed(self, car_id: str) -> None:
        for listener in self._listeners:
            listener(car_id)

    def add_booking(self, booking: Booking) -> None:
        self.get_car(booking.car_id)
        self.bookings.append(booking)
        self._changed(booking.car_id)

    def set_booking_status(self, booking_id: str, status) -> Booking:
        booking = self.get_booking(booking_id)
        booking.transition_to(status)
        self._changed(booking.car_id)
        return booking

    def add_maintenance_block(self, block: MaintenanceBlock) -> None:
        self.get_car(block.car_id)
        self.maintenance_blocks.append(block)
        self._changed(block.car_id)

    def remove_maintenance_block(self, block_id: str) -> MaintenanceBlock:
        block = self.get_maintenance_block(block_id)
        self.maintenance_blocks.remove(block)
        self._changed(block.car_id)
        return block
