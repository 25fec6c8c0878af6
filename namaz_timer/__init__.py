"""Daily prayer times and Hanafi-style observance windows."""
from namaz_timer.core.clock import ClockTime
from namaz_timer.core.errors import (
    InvalidInputError,
    MalformedBaseTimesError,
    NamazTimerError,
    NoSolarSolutionError,
    TimingSourceError,
)
from namaz_timer.engine import (
    BaseTimes,
    Countdown,
    GeoCoordinate,
    Schedule,
    ScheduleBuilder,
    ScheduleEntry,
    SolarTimeCalculator,
    active_entries,
    countdown,
    current_prayer,
    next_entry,
)

__version__ = "0.1.0"
