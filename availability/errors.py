"""Exceptions raised by the availability engine and the record store."""


class InvalidRange(ValueError):
    """A date range with a missing date or a start after its end."""

    def __init__(self, start, end):
        self.start = start
        self.end = end
        if start is None or end is None:
            message = "Both start and end dates are required"
        else:
            message = f"Start date {start} is after end date {end}"
        super().__init__(message)


class StaleConflict(Exception):
    """
    Commit-time rejection: the dates were free when checked but have been
    taken since. Callers should ask the user to pick different dates and
    re-run the selection check against fresh data.
    """

    def __init__(self, conflict):
        self.conflict = conflict
        super().__init__(f"Dates just became unavailable: {conflict.message}")


class RentalPolicyError(ValueError):
    """A requested rental breaks the fleet's rental policy."""


class InvalidTransition(ValueError):
    """A booking status change not allowed by the lifecycle."""

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change booking status from {current.value} to {requested.value}"
        )
