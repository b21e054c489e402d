"""MaintenanceBlock class for administrative unavailability windows."""

from datetime import date
from typing import Optional

from .date_range import DateRange


class MaintenanceBlock:
    """An admin-created window during which a car cannot be rented."""

    def __init__(
        self,
        block_id: str,
        car_id: str,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ):
        self.id = block_id
        self.car_id = car_id
        self.dates = DateRange(start_date, end_date)
        self.reason = reason

    @property
    def start_date(self) -> date:
        return self.dates.start

    @property
    def end_date(self) -> date:
        return self.dates.end
