from datetime import date

from namaz_timer.core.clock import ClockTime
from namaz_timer.engine.types import BaseTimes
from namaz_timer.sources.base import BaseTimesProvider

DAY = date(2024, 3, 20)

# POSIX TZ rules; no tz database needed
SYDNEY_TZ = "AEST-10AEDT,M10.1.0,M4.1.0/3"
KARACHI_TZ = "PKT-5"

BASE = {
    "fajr": "05:10",
    "sunrise": "06:21",
    "dhuhr": "12:41",
    "asr": "16:05",
    "maghrib": "18:50",
    "isha": "20:05",
}


def make_base_times(on_date=DAY, **overrides):
    times = dict(BASE)
    times.update(overrides)
    return BaseTimes.from_mapping(times, on_date, source="fixture")


def hm(text):
    return ClockTime.parse(text)


class FakeProvider(BaseTimesProvider):
    """Returns fixed base times and records every call."""

    name = "fake"

    def __init__(self, base=None, error=None):
        super().__init__({})
        self.base = base or BASE
        self.error = error
        self.calls = []

    def get_base_times(self, coordinate, on_date, force_fetch=False):
        self.calls.append((coordinate, on_date, force_fetch))
        if self.error:
            raise self.error
        return BaseTimes.from_mapping(self.base, on_date, source=self.name)
