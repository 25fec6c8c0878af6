"""
Exception types raised by the engine and the glue around it.
Nothing here is retryable: callers decide whether to retry with other input.
"""
from datetime import date
from typing import Iterable, Optional


class NamazTimerError(Exception):
    """Base class for all namaz_timer errors."""


class InvalidInputError(NamazTimerError, ValueError):
    """Latitude/longitude missing, non-numeric or out of range."""


class NoSolarSolutionError(NamazTimerError):
    """The sun never reaches one or more target elevations on this date (polar day/night)."""

    def __init__(
        self,
        events: Iterable[str],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        on_date: Optional[date] = None,
    ):
        self.events = tuple(events)
        self.latitude = latitude
        self.longitude = longitude
        self.on_date = on_date
        where = f" at ({latitude}, {longitude})" if latitude is not None else ""
        when = f" on {on_date.isoformat()}" if on_date else ""
        super().__init__(f"No solar solution for {', '.join(self.events)}{where}{when}")


class MalformedBaseTimesError(NamazTimerError, ValueError):
    """Base times missing a required key or not in chronological order."""


class TimingSourceError(NamazTimerError):
    """A remote timing source failed or returned an unusable payload."""
