"""Per-car cache of occupancy intervals over a query window."""

import logging
import threading
from datetime import date
from typing import Dict, List, Tuple

from .date_range import DateRange
from .occupancy import OccupancyInterval, collect_intervals

logger = logging.getLogger(__name__)


class AvailabilityIndex:
    """
    Occupancy intervals of a car for a window, fetched from a record store.

    The store must provide ``list_bookings(car_id, start, end)`` and
    ``list_maintenance_blocks(car_id, start, end)``. Results are cached per
    (car, window) until ``invalidate(car_id)`` is called, which the store
    should do on every write to that car's bookings or blocks.
    """

    def __init__(self, store):
        self.store = store
        self._cache: Dict[Tuple[str, date, date], List[OccupancyInterval]] = {}
        self._lock = threading.Lock()

    def intervals(
        self, car_id: str, window_start: date, window_end: date
    ) -> List[OccupancyInterval]:
        """All intervals of ``car_id`` touching [window_start, window_end]."""
        window = DateRange(window_start, window_end)
        key = (car_id, window.start, window.end)
        with self._lock:
            cached = self._cache.get(key)
            if cached is None:
                cached = self._build(car_id, window)
                self._cache[key] = cached
        return list(cached)

    def _build(self, car_id: str, window: DateRange) -> List[OccupancyInterval]:
        bookings = self.store.list_bookings(car_id, window.start, window.end)
        blocks = self.store.list_maintenance_blocks(car_id, window.start, window.end)
        # The store's own filtering is not relied upon
        intervals = [
            i
            for i in collect_intervals(bookings, blocks)
            if i.car_id == car_id and i.overlaps(window)
        ]
        logger.debug(
            "Indexed %d intervals for car %s (%s..%s)",
            len(intervals), car_id, window.start, window.end,
        )
        return intervals

    def invalidate(self, car_id: str) -> None:
        """Drop every cached window of one car."""
        with self._lock:
            for key in [k for k in self._cache if k[0] == car_id]:
                del self._cache[key]

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
