from .builder import ScheduleBuilder
from .query import active_entries, countdown, current_prayer, next_entry
from .solar import SolarTimeCalculator
from .types import (
    BASE_KEYS,
    ENTRY_ORDER,
    OBLIGATORY_KEYS,
    BaseTimes,
    Countdown,
    GeoCoordinate,
    Schedule,
    ScheduleEntry,
)

__all__ = [
    "BASE_KEYS",
    "ENTRY_ORDER",
    "OBLIGATORY_KEYS",
    "BaseTimes",
    "Countdown",
    "GeoCoordinate",
    "Schedule",
    "ScheduleBuilder",
    "ScheduleEntry",
    "SolarTimeCalculator",
    "active_entries",
    "countdown",
    "current_prayer",
    "next_entry",
]
