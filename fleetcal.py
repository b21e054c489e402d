#!/usr/bin/env python3
"""
Unified CLI for rental car availability.

Commands:
  cars      - List fleet cars and whether they are free today
  calendar  - Show day-by-day availability of one car
  check     - Check whether a date range can be booked
  book      - Book a car (dates are re-checked when saving)
  status    - Change a booking's lifecycle status
  fleet     - Show bookings and maintenance across several cars
  block     - Block a car for maintenance
  unblock   - Remove a maintenance block
"""

import argparse
import logging
import sys
from datetime import date, timedelta
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from availability import (
    Booking,
    BookingStatus,
    DayStatus,
    InvalidRange,
    InvalidTransition,
    MaintenanceBlock,
    OccupancyInterval,
    OccupancyKind,
    RentalPolicyError,
    StaleConflict,
    add_maintenance_block,
    build_fleet_events,
    commit_booking,
    day_statuses,
    delete_maintenance_block,
    fleet_intervals,
    load_fleet,
    new_id,
    resolve_day_status,
    summarize_fleet,
    update_booking_status,
    validate_selection,
)
from availability.loader import parse_date

# =============================================================================
# Formatting helpers
# =============================================================================


def format_date(day: Optional[date]) -> str:
    """Format a date for display."""
    return day.isoformat() if day is not None else "-"


def format_status(status: DayStatus) -> str:
    """Upper-case label for a day status."""
    return status.value.upper()


def format_event_kind(event: OccupancyInterval) -> str:
    """'maintenance', or 'booking (<status>)' for reservations."""
    if event.kind == OccupancyKind.MAINTENANCE:
        return "maintenance"
    return f"booking ({event.booking_status.value})"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _today(args) -> date:
    return args.today or date.today()


def _window(args, default_days: int = 30):
    start = args.start or _today(args)
    return start, start + timedelta(days=default_days - 1)


# =============================================================================
# Cars command
# =============================================================================


def cmd_cars(args):
    """List fleet cars and whether they are free today."""
    fleet = load_fleet(args.fleet_file)
    today = _today(args)
    index = fleet.availability_index()

    rows = []
    for car in fleet.cars_sorted():
        intervals = index.intervals(car.id, today, today)
        rows.append(
            [
                car.id,
                car.car_number,
                car.name,
                format_status(resolve_day_status(car.id, today, intervals, today)),
            ]
        )

    print(f"Cars: {len(fleet.cars)} (as of {today.isoformat()})")
    print()
    headers = ["ID", "Number", "Car", "Today"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Calendar command
# =============================================================================


def make_calendar_table(statuses, intervals) -> List[List[str]]:
    """Convert day statuses to table rows, naming the occupying event."""
    rows = []
    for day, status in statuses.items():
        detail = "-"
        if status in (DayStatus.BLOCKED, DayStatus.RESERVED):
            kind = (
                OccupancyKind.MAINTENANCE
                if status == DayStatus.BLOCKED
                else OccupancyKind.RESERVATION
            )
            for interval in intervals:
                if interval.kind == kind and interval.contains(day):
                    detail = interval.label
                    break
        rows.append([day.isoformat(), day.strftime("%a"), format_status(status), truncate(detail)])
    return rows


def cmd_calendar(args):
    """Show day-by-day availability of one car."""
    fleet = load_fleet(args.fleet_file)
    car = fleet.get_car(args.car_id)
    today = _today(args)
    start = args.start or today
    end = start + timedelta(days=args.days - 1)

    intervals = fleet.availability_index().intervals(car.id, start, end)
    statuses = day_statuses(car.id, start, end, intervals, today)

    print(f"Car: {car.label}")
    print(f"Window: {start.isoformat()} to {end.isoformat()}")
    free = sum(1 for s in statuses.values() if s == DayStatus.AVAILABLE)
    print(f"Available days: {free}/{len(statuses)}")
    print()

    headers = ["Date", "Day", "Status", "Detail"]
    print(tabulate(make_calendar_table(statuses, intervals), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Check and book commands
# =============================================================================


def cmd_check(args):
    """Check whether a date range can be booked."""
    fleet = load_fleet(args.fleet_file)
    car = fleet.get_car(args.car_id)
    today = _today(args)

    intervals = fleet.availability_index().intervals(car.id, args.from_date, args.to_date)
    result = validate_selection(car.id, args.from_date, args.to_date, intervals, today)

    print(f"Car: {car.label}")
    print(f"Dates: {args.from_date.isoformat()} to {args.to_date.isoformat()}")
    if result.ok:
        print("Available.")
        return 0
    print(f"Unavailable: {result.conflict.message}")
    return 1


def cmd_book(args):
    """Book a car. The dates are checked again when the booking is saved."""
    fleet = load_fleet(args.fleet_file)
    car = fleet.get_car(args.car_id)
    today = _today(args)

    intervals = fleet.availability_index().intervals(car.id, args.from_date, args.to_date)
    result = validate_selection(car.id, args.from_date, args.to_date, intervals, today)
    if not result.ok:
        print(f"Error: {result.conflict.message}")
        return 1

    booking = Booking(
        booking_id=new_id("bk"),
        car_id=car.id,
        start_date=args.from_date,
        end_date=args.to_date,
        status=BookingStatus(args.status),
        customer_name=args.customer,
    )

    print(f"Booking {car.label}:")
    print(f"  Dates:    {booking.start_date.isoformat()} to {booking.end_date.isoformat()}")
    print(f"  Status:   {booking.status.value}")
    if booking.customer_name:
        print(f"  Customer: {booking.customer_name}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    try:
        commit_booking(args.fleet_file, booking, today)
    except StaleConflict as e:
        print(f"Error: {e}. Please pick different dates.")
        return 1
    except RentalPolicyError as e:
        print(f"Error: {e}")
        return 1

    print(f"Booking saved: {booking.id}")
    return 0


def cmd_status(args):
    """Change a booking's lifecycle status."""
    try:
        booking = update_booking_status(
            args.fleet_file, args.booking_id, BookingStatus(args.new_status)
        )
    except InvalidTransition as e:
        print(f"Error: {e}")
        return 1
    print(f"Booking {booking.id} is now {booking.status.value}.")
    return 0


# =============================================================================
# Fleet command
# =============================================================================


def make_fleet_table(events: List[OccupancyInterval], fleet) -> List[List[str]]:
    """Convert fleet events to table rows."""
    rows = []
    for event in events:
        rows.append(
            [
                fleet.get_car(event.car_id).car_number,
                format_date(event.start),
                format_date(event.end),
                format_event_kind(event),
                truncate(event.label),
            ]
        )
    return rows


def cmd_fleet(args):
    """Show bookings and maintenance across several cars."""
    fleet = load_fleet(args.fleet_file)
    car_ids = list(dict.fromkeys(args.car or fleet.car_ids))
    for car_id in car_ids:
        fleet.get_car(car_id)

    start, end = _window(args, default_days=90)
    if args.end:
        end = args.end

    intervals = fleet_intervals(fleet.availability_index(), car_ids, start, end)
    events = build_fleet_events(car_ids, intervals)
    summary = summarize_fleet(events)

    print(f"Fleet: {len(car_ids)}/{len(fleet.cars)} cars")
    print(f"Window: {start.isoformat()} to {end.isoformat()}")
    print(
        f"Active bookings: {summary.active_bookings}  "
        f"Pending: {summary.pending_bookings}  "
        f"Maintenance: {summary.maintenance_blocks}  "
        f"Total events: {summary.total_events}"
    )
    print()

    if not events:
        print("No bookings or maintenance in this window.")
        return 0

    headers = ["Car", "Start", "End", "Type", "Label"]
    print(tabulate(make_fleet_table(events, fleet), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Maintenance commands
# =============================================================================


def cmd_block(args):
    """Block a car for maintenance."""
    fleet = load_fleet(args.fleet_file)
    car = fleet.get_car(args.car_id)

    block = MaintenanceBlock(
        block_id=new_id("mb"),
        car_id=car.id,
        start_date=args.from_date,
        end_date=args.to_date,
        reason=args.reason,
    )

    print(f"Blocking {car.label}:")
    print(f"  Dates:  {block.start_date.isoformat()} to {block.end_date.isoformat()}")
    if block.reason:
        print(f"  Reason: {block.reason}")
    print()

    if args.dry_run:
        affected = fleet.bookings_overlapping(block)
        print("(dry run - no changes made)")
    else:
        affected = add_maintenance_block(args.fleet_file, block)
        print(f"Maintenance block saved: {block.id}")

    if affected:
        print()
        print(f"Warning: {len(affected)} booking(s) overlap this block:")
        for booking in affected:
            print(
                f"  {booking.id} {booking.start_date.isoformat()} to "
                f"{booking.end_date.isoformat()} ({booking.status.value})"
            )
    return 0


def cmd_unblock(args):
    """Remove a maintenance block."""
    block = delete_maintenance_block(args.fleet_file, args.block_id)
    print(f"Removed maintenance block {block.id} from car {block.car_id}.")
    return 0


# =============================================================================
# Main
# =============================================================================


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date: '{value}' (use YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Rental car availability",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/fleet.yaml cars
  %(prog)s data/fleet.yaml calendar car-1 --from 2025-03-01 --days 14
  %(prog)s data/fleet.yaml check car-1 2025-03-12 2025-03-13
  %(prog)s data/fleet.yaml book car-1 2025-03-20 2025-03-22 --customer "Jane Doe"
  %(prog)s data/fleet.yaml status bk-1a2b3c4d confirmed
  %(prog)s data/fleet.yaml fleet --car car-1 --car car-2
  %(prog)s data/fleet.yaml block car-2 2025-04-01 2025-04-03 --reason "Brake service"
  %(prog)s data/fleet.yaml unblock mb-5e6f7a8b
""",
    )
    parser.add_argument("fleet_file", type=Path, help="Path to fleet YAML file")
    parser.add_argument(
        "--today",
        type=_date_arg,
        help="Treat this date as today (YYYY-MM-DD, default: system date)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("cars", help="List fleet cars")

    calendar_parser = subparsers.add_parser(
        "calendar", help="Show day-by-day availability of one car"
    )
    calendar_parser.add_argument("car_id", help="Car ID")
    calendar_parser.add_argument(
        "--from", dest="start", type=_date_arg, help="First day (default: today)"
    )
    calendar_parser.add_argument(
        "--days", type=int, default=30, help="Number of days to show (default: 30)"
    )

    check_parser = subparsers.add_parser(
        "check", help="Check whether a date range can be booked"
    )
    book_parser = subparsers.add_parser("book", help="Book a car")
    block_parser = subparsers.add_parser("block", help="Block a car for maintenance")
    for sub in (check_parser, book_parser, block_parser):
        sub.add_argument("car_id", help="Car ID")
        sub.add_argument("from_date", type=_date_arg, help="First day (YYYY-MM-DD)")
        sub.add_argument("to_date", type=_date_arg, help="Last day, included (YYYY-MM-DD)")

    book_parser.add_argument("--customer", type=str, help="Customer name")
    book_parser.add_argument(
        "--status",
        choices=["pending", "confirmed"],
        default="pending",
        help="Initial booking status (default: pending)",
    )
    book_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be booked without saving"
    )

    block_parser.add_argument("--reason", type=str, help="Reason for the block")
    block_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be blocked without saving"
    )

    status_parser = subparsers.add_parser("status", help="Change a booking's status")
    status_parser.add_argument("booking_id", help="Booking ID")
    status_parser.add_argument(
        "new_status", choices=[s.value for s in BookingStatus], help="New status"
    )

    fleet_parser = subparsers.add_parser(
        "fleet", help="Show bookings and maintenance across cars"
    )
    fleet_parser.add_argument(
        "--car", action="append", help="Car ID to include (repeatable, default: all)"
    )
    fleet_parser.add_argument(
        "--from", dest="start", type=_date_arg, help="First day (default: today)"
    )
    fleet_parser.add_argument(
        "--to", dest="end", type=_date_arg, help="Last day (default: 90 days on)"
    )

    unblock_parser = subparsers.add_parser("unblock", help="Remove a maintenance block")
    unblock_parser.add_argument("block_id", help="Maintenance block ID")

    return parser


COMMANDS = {
    "cars": cmd_cars,
    "calendar": cmd_calendar,
    "check": cmd_check,
    "book": cmd_book,
    "status": cmd_status,
    "fleet": cmd_fleet,
    "block": cmd_block,
    "unblock": cmd_unblock,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Validate fleet file exists
    if not args.fleet_file.exists():
        print(f"Error: File not found: {args.fleet_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        return 1
    except InvalidRange as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
