"""
Wall-clock time of day with minute precision.

Every offset in the schedule (sunrise + 20, dhuhr - 15, fajr + 1440, ...) goes
through ClockTime.add_minutes, which normalizes into a single day.
"""
import math
import re
from collections import namedtuple
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60
SECONDS_PER_DAY = MINUTES_PER_DAY * 60

# "05:10", "05:10:33", "05:10 (PKT)", "5:10 AM", "12:41 pm"
_TIME_RE = re.compile(
    r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*(AM|PM)?\s*(?:\([^)]*\))?\s*$",
    re.IGNORECASE,
)


class ClockTime(namedtuple("ClockTime", ["hour", "minute"])):
    """Hour/minute on an implicit date. Tuple ordering equals minute-of-day ordering."""

    __slots__ = ()

    def __new__(cls, hour: int, minute: int = 0):
        hour, minute = int(hour), int(minute)
        if not 0 <= hour <= 23:
            raise ValueError(f"hour must be in 0..23, got {hour}")
        if not 0 <= minute <= 59:
            raise ValueError(f"minute must be in 0..59, got {minute}")
        return super().__new__(cls, hour, minute)

    @classmethod
    def from_minutes(cls, total_minutes: int) -> "ClockTime":
        """Normalize any minute count (negative or past midnight) into one day."""
        total = int(total_minutes) % MINUTES_PER_DAY
        return cls(total // 60, total % 60)

    @classmethod
    def from_fractional_hours(cls, value: float) -> "ClockTime":
        """Floor a fractional hour (e.g. 12.6834) to hour and minute, wrapping into one day."""
        hours = math.floor(value)
        minutes = math.floor((value - hours) * 60)
        return cls.from_minutes(hours * 60 + minutes)

    @classmethod
    def parse(cls, text: str) -> "ClockTime":
        """Parse 24-hour or 12-hour clock text; a trailing "(TZ)" label is ignored."""
        m = _TIME_RE.match(str(text))
        if not m:
            raise ValueError(f"Unrecognized time format: {text!r}")
        hour, minute = int(m.group(1)), int(m.group(2))
        period = m.group(4)
        if period:
            if not 1 <= hour <= 12:
                raise ValueError(f"12-hour time out of range: {text!r}")
            period = period.upper()
            if period == "PM" and hour != 12:
                hour += 12
            elif period == "AM" and hour == 12:
                hour = 0
        return cls(hour, minute)

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def add_minutes(self, minutes: int) -> "ClockTime":
        return ClockTime.from_minutes(self.minute_of_day + int(minutes))

    def subtract_minutes(self, minutes: int) -> "ClockTime":
        return self.add_minutes(-int(minutes))

    def minutes_until(self, other: "ClockTime") -> int:
        """Forward distance to other, 0..1439 (rolls into the next day)."""
        return (other.minute_of_day - self.minute_of_day) % MINUTES_PER_DAY

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    def on(self, on_date: date, days: int = 0) -> datetime:
        """Attach to a calendar date, optionally shifted by whole days."""
        return datetime.combine(on_date, self.to_time()) + timedelta(days=days)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


TimeLike = Union[ClockTime, time, datetime, str]


def to_clock_time(value: TimeLike) -> ClockTime:
    """Coerce ClockTime, datetime.time, datetime or clock text to ClockTime (seconds dropped)."""
    if isinstance(value, ClockTime):
        return value
    if isinstance(value, datetime):
        return ClockTime(value.hour, value.minute)
    if isinstance(value, time):
        return ClockTime(value.hour, value.minute)
    if isinstance(value, str):
        return ClockTime.parse(value)
    raise TypeError(f"Cannot interpret {type(value).__name__} as a clock time")


def seconds_of_day(value: TimeLike) -> int:
    """Seconds since midnight, keeping the seconds of time/datetime values."""
    if isinstance(value, (datetime, time)):
        return value.hour * 3600 + value.minute * 60 + value.second
    return to_clock_time(value).minute_of_day * 60


def local_utc_offset(on_date: Optional[date] = None) -> float:
    """Hours this machine's wall clock is ahead of UTC at noon on on_date (default today)."""
    on_date = on_date or datetime.now().date()
    offset = datetime.combine(on_date, time(12, 0)).astimezone().utcoffset()
    return offset.total_seconds() / 3600 if offset else 0.0
