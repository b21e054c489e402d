"""YAML loading and saving utilities for fleet data."""

import logging
import threading
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from dateutil.parser import isoparse

from .booking import Booking
from .car import Car
from .errors import StaleConflict
from .fleet import Fleet
from .maintenance_block import MaintenanceBlock
from .occupancy import collect_intervals
from .policy import RentalPolicy
from .status import BookingStatus
from .validator import validate_selection

logger = logging.getLogger(__name__)

# Serializes read-check-write cycles on fleet files within this process
_write_lock = threading.RLock()


def new_id(prefix: str) -> str:
    """Short random record id, e.g. 'bk-1a2b3c4d'."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def parse_date(value: Any) -> date:
    """Calendar date from a YAML date, an ISO date string or an ISO timestamp."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return isoparse(value).date()
    raise ValueError(f"Not a date: {value!r}")


def _parse_car(dct: Dict[str, Any]) -> Car:
    return Car(
        str(dct["id"]),
        dct["make"],
        dct["model"],
        dct["year"],
        str(dct["carNumber"]),
        dct.get("trim"),
    )


def _parse_booking(dct: Dict[str, Any]) -> Booking:
    return Booking(
        str(dct["id"]),
        str(dct["carId"]),
        parse_date(dct["startDate"]),
        parse_date(dct["endDate"]),
        BookingStatus(dct.get("status", "pending")),
        dct.get("customerName"),
    )


def _parse_block(dct: Dict[str, Any]) -> MaintenanceBlock:
    return MaintenanceBlock(
        str(dct["id"]),
        str(dct["carId"]),
        parse_date(dct["startDate"]),
        parse_date(dct["endDate"]),
        dct.get("reason"),
    )


def _parse_policy(dct: Dict[str, Any]) -> RentalPolicy:
    defaults = RentalPolicy()
    return RentalPolicy(
        max_rental_days=dct.get("maxRentalDays", defaults.max_rental_days),
        booking_horizon_days=dct.get(
            "bookingHorizonDays", defaults.booking_horizon_days
        ),
    )


def parse_fleet(data: Dict[str, Any]) -> Fleet:
    """Build a Fleet from the raw YAML mapping."""
    return Fleet(
        [_parse_car(c) for c in data.get("cars") or []],
        [_parse_booking(b) for b in data.get("bookings") or []],
        [_parse_block(m) for m in data.get("maintenanceBlocks") or []],
        _parse_policy(data.get("policy") or {}),
    )


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def load_fleet(filename: Union[str, Path]) -> Fleet:
    """Load a fleet from a YAML file."""
    return parse_fleet(_read_raw(filename))


def _booking_to_dict(booking: Booking) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": booking.id,
        "carId": booking.car_id,
        "startDate": booking.start_date.isoformat(),
        "endDate": booking.end_date.isoformat(),
        "status": booking.status.value,
    }
    if booking.customer_name is not None:
        d["customerName"] = booking.customer_name
    return d


def _block_to_dict(block: MaintenanceBlock) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": block.id,
        "carId": block.car_id,
        "startDate": block.start_date.isoformat(),
        "endDate": block.end_date.isoformat(),
    }
    if block.reason is not None:
        d["reason"] = block.reason
    return d


def _find_index(records: List[Dict[str, Any]], record_id: str, kind: str) -> int:
    for i, record in enumerate(records):
        if str(record.get("id")) == record_id:
            return i
    raise KeyError(f"Unknown {kind} '{record_id}'")


def commit_booking(
    filename: Union[str, Path], booking: Booking, today: date
) -> Booking:
    """
    Append a booking to a fleet file after re-checking its dates.

    The file is re-read and the selection validated against what it holds
    now. If another writer took any of the days since the caller last
    checked, StaleConflict is raised and nothing is written.
    """
    with _write_lock:
        data = _read_raw(filename)
        fleet = parse_fleet(data)
        fleet.get_car(booking.car_id)
        fleet.policy.check(booking.start_date, booking.end_date, today)

        intervals = collect_intervals(
            fleet.list_bookings(booking.car_id, booking.start_date, booking.end_date),
            fleet.list_maintenance_blocks(
                booking.car_id, booking.start_date, booking.end_date
            ),
        )
        result = validate_selection(
            booking.car_id, booking.start_date, booking.end_date, intervals, today
        )
        if not result.ok:
            logger.warning(
                "Rejected booking for car %s at commit: %s",
                booking.car_id, result.conflict.message,
            )
            raise StaleConflict(result.conflict)

        if data.get("bookings") is None:
            data["bookings"] = []
        data["bookings"].append(_booking_to_dict(booking))
        _write_raw(filename, data)

    logger.info(
        "Committed booking %s for car %s (%s..%s)",
        booking.id, booking.car_id, booking.start_date, booking.end_date,
    )
    return booking


def update_booking_status(
    filename: Union[str, Path], booking_id: str, status: BookingStatus
) -> Booking:
    """Move a booking to a new lifecycle state and save it."""
    with _write_lock:
        data = _read_raw(filename)
        fleet = parse_fleet(data)
        old_status = fleet.get_booking(booking_id).status
        booking = fleet.set_booking_status(booking_id, status)

        bookings = data["bookings"]
        bookings[_find_index(bookings, booking_id, "booking")]["status"] = (
            booking.status.value
        )
        _write_raw(filename, data)

    logger.info(
        "Booking %s: %s -> %s", booking_id, old_status.value, booking.status.value
    )
    return booking


def add_maintenance_block(
    filename: Union[str, Path], block: MaintenanceBlock
) -> List[Booking]:
    """
    Append a maintenance block to a fleet file.

    Blocks are never refused because of bookings. Returns the occupying
    bookings the new block overlaps so the caller can warn about them.
    """
    with _write_lock:
        data = _read_raw(filename)
        fleet = parse_fleet(data)
        fleet.add_maintenance_block(block)
        affected = fleet.bookings_overlapping(block)

        if data.get("maintenanceBlocks") is None:
            data["maintenanceBlocks"] = []
        data["maintenanceBlocks"].append(_block_to_dict(block))
        _write_raw(filename, data)

    logger.info(
        "Blocked car %s %s..%s (%s)",
        block.car_id, block.start_date, block.end_date, block.reason or "maintenance",
    )
    if affected:
        logger.warning(
            "Maintenance block %s overlaps %d booking(s): %s",
            block.id, len(affected), ", ".join(b.id for b in affected),
        )
    return affected


def delete_maintenance_block(
    filename: Union[str, Path], block_id: str
) -> MaintenanceBlock:
    """Remove a maintenance block from a fleet file."""
    with _write_lock:
        data = _read_raw(filename)
        fleet = parse_fleet(data)
        block = fleet.remove_maintenance_block(block_id)

        blocks = data["maintenanceBlocks"]
        del blocks[_find_index(blocks, block_id, "maintenance block")]
        _write_raw(filename, data)

    logger.info("Removed maintenance block %s from car %s", block_id, block.car_id)
    return block
