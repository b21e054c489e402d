"""
Rental car availability models and engine.

This package provides data models and the availability engine:
- DateRange: Inclusive calendar-day ranges and the overlap test
- Car, Booking, MaintenanceBlock: Fleet records
- OccupancyInterval: Bookings and blocks projected into one shape
- resolve_day_status: Per-day status (available, reserved, blocked, past)
- AvailabilityIndex: Cached per-car intervals over a query window
- validate_selection: First-conflict check of a proposed rental
- build_fleet_events: Multi-car event list for fleet calendars
- Fleet: Main aggregate and record store, loaded from YAML
"""

from .status import DayStatus, BookingStatus, OCCUPYING_STATUSES
from .errors import InvalidRange, StaleConflict, RentalPolicyError, InvalidTransition
from .date_range import DateRange, overlaps, contains
from .car import Car
from .booking import Booking
from .maintenance_block import MaintenanceBlock
from .occupancy import (
    OccupancyKind,
    OccupancyInterval,
    from_booking,
    from_maintenance_block,
    collect_intervals,
)
from .resolver import resolve_day_status, explain_day, day_statuses
from .index import AvailabilityIndex
from .validator import Conflict, ValidationResult, validate_selection
from .fleet_events import (
    FleetSummary,
    build_fleet_events,
    fleet_intervals,
    group_by_car,
    summarize_fleet,
)
from .policy import RentalPolicy
from .fleet import Fleet
from .loader import (
    load_fleet,
    commit_booking,
    update_booking_status,
    add_maintenance_block,
    delete_maintenance_block,
    new_id,
)

__all__ = [
    "DayStatus",
    "BookingStatus",
    "OCCUPYING_STATUSES",
    "InvalidRange",
    "StaleConflict",
    "RentalPolicyError",
    "InvalidTransition",
    "DateRange",
    "overlaps",
    "contains",
    "Car",
    "Booking",
    "MaintenanceBlock",
    "OccupancyKind",
    "OccupancyInterval",
    "from_booking",
    "from_maintenance_block",
    "collect_intervals",
    "resolve_day_status",
    "explain_day",
    "day_statuses",
    "AvailabilityIndex",
    "Conflict",
    "ValidationResult",
    "validate_selection",
    "FleetSummary",
    "build_fleet_events",
    "fleet_intervals",
    "group_by_car",
    "summarize_fleet",
    "RentalPolicy",
    "Fleet",
    "load_fleet",
    "commit_booking",
    "update_booking_status",
    "add_maintenance_block",
    "delete_maintenance_block",
    "new_id",
]
