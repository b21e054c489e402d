"""Car class - a rentable fleet vehicle."""

from typing import Optional


class Car:
    """A fleet car that customers can book and admins can block."""

    def __init__(
        self,
        car_id: str,
        make: str,
        model: str,
        year: int,
        car_number: str,
        trim: Optional[str] = None,
    ):
        self.id = car_id
        self.make = make
        self.model = model
        self.year = year
        self.car_number = car_number
        self.trim = trim

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        base = f"{self.year} {self.make} {self.model}"
        return f"{base} {self.trim}" if self.trim else base

    @property
    def label(self) -> str:
        """Fleet label: car number followed by the vehicle name."""
        return f"{self.car_number} - {self.name}"
