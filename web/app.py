"""Flask web application for rental car availability."""

import calendar
import os
from datetime import date, timedelta
from pathlib import Path

from dateutil.relativedelta import relativedelta
from flask import Flask, render_template, request, redirect, url_for, flash, abort

from availability import (
    Booking,
    BookingStatus,
    DayStatus,
    InvalidRange,
    InvalidTransition,
    MaintenanceBlock,
    OccupancyKind,
    RentalPolicyError,
    StaleConflict,
    add_maintenance_block,
    build_fleet_events,
    commit_booking,
    day_statuses,
    delete_maintenance_block,
    fleet_intervals,
    group_by_car,
    load_fleet,
    new_id,
    resolve_day_status,
    summarize_fleet,
    update_booking_status,
    validate_selection,
)
from availability.loader import parse_date

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
app.config["FLEET_FILE"] = os.environ.get(
    "FLEET_FILE", str(Path(__file__).parent.parent / "data" / "example-fleet.yaml")
)
# Fixed "today" for demos and tests; None means the system date
app.config.setdefault("TODAY", None)


def fleet_path() -> Path:
    return Path(app.config["FLEET_FILE"])


def get_today() -> date:
    return app.config["TODAY"] or date.today()


def get_fleet_or_404(car_id=None):
    """Load the fleet, and optionally check a car exists in it."""
    fleet = load_fleet(fleet_path())
    if car_id is not None:
        try:
            fleet.get_car(car_id)
        except KeyError:
            abort(404)
    return fleet


def parse_form_date(value):
    """Date from a form/query value, or None when blank or malformed."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError:
        return None


def day_status_color(status: DayStatus) -> str:
    """Get Tailwind color classes for a calendar day."""
    colors = {
        DayStatus.AVAILABLE: "bg-green-100 text-green-800",
        DayStatus.RESERVED: "bg-red-100 text-red-800",
        DayStatus.BLOCKED: "bg-orange-100 text-orange-800",
        DayStatus.PAST: "bg-gray-100 text-gray-400",
    }
    return colors.get(status, "bg-gray-100 text-gray-800")


def event_color(event) -> str:
    """Get Tailwind color classes for a booking or maintenance event."""
    if event.kind == OccupancyKind.MAINTENANCE:
        return "bg-orange-500 text-white"
    colors = {
        BookingStatus.PENDING: "bg-purple-500 text-white",
        BookingStatus.CONFIRMED: "bg-blue-500 text-white",
        BookingStatus.ACTIVE: "bg-green-500 text-white",
    }
    return colors.get(event.booking_status, "bg-gray-500 text-white")


def format_day(value) -> str:
    """Format a date for display."""
    if value is None:
        return "—"
    return value.strftime("%b %d, %Y")


app.jinja_env.filters["day_status_color"] = day_status_color
app.jinja_env.filters["event_color"] = event_color
app.jinja_env.filters["format_day"] = format_day


@app.route("/")
def index():
    """Dashboard showing every car and its status today."""
    fleet = get_fleet_or_404()
    today = get_today()
    availability = fleet.availability_index()

    cars = []
    for car in fleet.cars_sorted():
        intervals = availability.intervals(car.id, today, today)
        cars.append({
            "car": car,
            "status": resolve_day_status(car.id, today, intervals, today),
        })

    counts = {
        status: sum(1 for c in cars if c["status"] == status) for status in DayStatus
    }
    return render_template(
        "index.html", cars=cars, counts=counts, today=today, DayStatus=DayStatus
    )


def month_grid(month_start: date):
    """Calendar weeks of a month plus the previous and next month keys."""
    weeks = calendar.Calendar(firstweekday=6).monthdatescalendar(
        month_start.year, month_start.month
    )
    prev_month = (month_start - relativedelta(months=1)).strftime("%Y-%m")
    next_month = (month_start + relativedelta(months=1)).strftime("%Y-%m")
    return weeks, prev_month, next_month


@app.route("/car/<car_id>")
def car_calendar(car_id: str):
    """Month calendar for one car."""
    fleet = get_fleet_or_404(car_id)
    car = fleet.get_car(car_id)
    today = get_today()

    month_start = today.replace(day=1)
    month_arg = request.args.get("month")
    if month_arg:
        parsed = parse_form_date(f"{month_arg}-01")
        if parsed is not None:
            month_start = parsed

    try:
        weeks, prev_month, next_month = month_grid(month_start)
    except (ValueError, OverflowError):
        # Grid or navigation runs past the supported date range
        month_start = today.replace(day=1)
        weeks, prev_month, next_month = month_grid(month_start)
    grid_start, grid_end = weeks[0][0], weeks[-1][-1]

    intervals = fleet.availability_index().intervals(car.id, grid_start, grid_end)
    statuses = day_statuses(car.id, grid_start, grid_end, intervals, today)
    events = sorted(intervals, key=lambda i: (i.start, i.kind.value))

    return render_template(
        "car.html",
        car=car,
        weeks=weeks,
        statuses=statuses,
        events=events,
        month_start=month_start,
        prev_month=prev_month,
        next_month=next_month,
        today=today,
        OccupancyKind=OccupancyKind,
    )


def _selection_from_form():
    start = parse_form_date(request.form.get("start_date"))
    end = parse_form_date(request.form.get("end_date"))
    return start, end


@app.route("/car/<car_id>/check", methods=["POST"])
def check_selection(car_id: str):
    """Handle a date-range check from the car calendar."""
    fleet = get_fleet_or_404(car_id)
    start, end = _selection_from_form()
    today = get_today()

    try:
        intervals = fleet.availability_index().intervals(car_id, start, end)
        result = validate_selection(car_id, start, end, intervals, today)
    except InvalidRange as e:
        flash(str(e), "error")
        return redirect(url_for("car_calendar", car_id=car_id))

    if result.ok:
        flash(
            f"Available: {format_day(start)} to {format_day(end)}", "success"
        )
    else:
        flash(f"Unavailable: {result.conflict.message}", "error")
    return redirect(url_for("car_calendar", car_id=car_id, month=start.strftime("%Y-%m")))


@app.route("/car/<car_id>/book", methods=["POST"])
def book_car(car_id: str):
    """Handle booking form submission; dates are re-checked on commit."""
    get_fleet_or_404(car_id)
    start, end = _selection_from_form()
    customer_name = request.form.get("customer_name") or None

    try:
        booking = Booking(
            booking_id=new_id("bk"),
            car_id=car_id,
            start_date=start,
            end_date=end,
            status=BookingStatus.PENDING,
            customer_name=customer_name,
        )
        commit_booking(fleet_path(), booking, get_today())
    except InvalidRange as e:
        flash(str(e), "error")
        return redirect(url_for("car_calendar", car_id=car_id))
    except StaleConflict as e:
        app.logger.info("Booking for %s rejected at commit: %s", car_id, e)
        flash(
            f"Those dates just became unavailable ({e.conflict.message}). "
            "Please pick different dates.",
            "error",
        )
        return redirect(url_for("car_calendar", car_id=car_id))
    except RentalPolicyError as e:
        flash(str(e), "error")
        return redirect(url_for("car_calendar", car_id=car_id))

    flash(
        f"Booking requested: {format_day(start)} to {format_day(end)}", "success"
    )
    return redirect(url_for("car_calendar", car_id=car_id, month=start.strftime("%Y-%m")))


@app.route("/booking/<booking_id>/status", methods=["POST"])
def change_booking_status(booking_id: str):
    """Admin action: move a booking through its lifecycle."""
    try:
        status = BookingStatus(request.form.get("status", ""))
        booking = update_booking_status(fleet_path(), booking_id, status)
    except KeyError:
        abort(404)
    except (ValueError, InvalidTransition) as e:
        flash(str(e), "error")
        return redirect(request.referrer or url_for("fleet_calendar"))

    flash(f"Booking {booking.id} is now {booking.status.value}", "success")
    return redirect(request.referrer or url_for("fleet_calendar"))


@app.route("/fleet")
def fleet_calendar():
    """Multi-car calendar with a car filter."""
    fleet = get_fleet_or_404()
    today = get_today()

    # Selected cars from query string (can be multiple); all by default
    selected = request.args.getlist("car") or fleet.car_ids
    selected = [c for c in dict.fromkeys(selected) if c in fleet.car_ids]

    start = parse_form_date(request.args.get("from")) or today
    end = parse_form_date(request.args.get("to")) or start + timedelta(days=89)
    if end < start:
        flash("End date cannot be before start date", "error")
        end = start

    events = build_fleet_events(
        selected, fleet_intervals(fleet.availability_index(), selected, start, end)
    )
    rows = group_by_car(selected, events)

    return render_template(
        "fleet.html",
        fleet=fleet,
        cars={car.id: car for car in fleet.cars},
        selected=selected,
        rows=rows,
        summary=summarize_fleet(events),
        start=start,
        end=end,
        BookingStatus=BookingStatus,
    )


@app.route("/maintenance")
def maintenance_blocks():
    """Maintenance block editor: upcoming blocks and an add form."""
    fleet = get_fleet_or_404()
    return render_template(
        "maintenance.html",
        fleet=fleet,
        cars={car.id: car for car in fleet.cars},
        blocks=fleet.upcoming_maintenance(get_today()),
        today=get_today(),
    )


@app.route("/maintenance", methods=["POST"])
def add_block():
    """Handle the add maintenance block form."""
    car_id = request.form.get("car_id")
    start, end = _selection_from_form()
    reason = request.form.get("reason") or None

    if not car_id or start is None or end is None:
        flash("Please fill in all required fields", "error")
        return redirect(url_for("maintenance_blocks"))

    try:
        block = MaintenanceBlock(new_id("mb"), car_id, start, end, reason)
        affected = add_maintenance_block(fleet_path(), block)
    except InvalidRange:
        flash("End date cannot be before start date", "error")
        return redirect(url_for("maintenance_blocks"))
    except KeyError:
        flash(f"Unknown car '{car_id}'", "error")
        return redirect(url_for("maintenance_blocks"))

    flash("Maintenance block added", "success")
    if affected:
        flash(
            f"This block overlaps {len(affected)} booking(s): "
            + ", ".join(b.id for b in affected),
            "warning",
        )
    return redirect(url_for("maintenance_blocks"))


@app.route("/maintenance/<block_id>/delete", methods=["POST"])
def delete_block(block_id: str):
    """Handle maintenance block deletion."""
    try:
        delete_maintenance_block(fleet_path(), block_id)
    except KeyError:
        abort(404)
    flash("Maintenance block deleted", "success")
    return redirect(url_for("maintenance_blocks"))


if __name__ == "__main__":
    app.run(debug=True)
