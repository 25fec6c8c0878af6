"""
Derive the four secondary times and the ten start/end windows from BaseTimes.
"""
import logging
from typing import Dict, Tuple

from namaz_timer.core.clock import MINUTES_PER_DAY, ClockTime
from namaz_timer.engine.types import ENTRY_ORDER, BaseTimes, Schedule, ScheduleEntry

# Display offsets, minutes
ISHRAQ_AFTER_SUNRISE = 20
CHASHT_AFTER_SUNRISE = 150
ZAWAL_BEFORE_DHUHR = 15
TAHAJUD_TIME = ClockTime(3, 0)

# Window offsets, minutes
FAJR_WINDOW_LEAD = 15
SUNRISE_WINDOW_HALF_WIDTH = 5
ISHRAQ_WINDOW = (20, 80)  # after sunrise
CHASHT_WINDOW = (150, 210)  # after sunrise
ZAWAL_WINDOW = (-20, -5)  # around dhuhr
TAHAJUD_AFTER_ISHA = 60


class ScheduleBuilder:
    """Turns any valid BaseTimes into a Schedule. Stateless; safe to share."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def display_times(self, base: BaseTimes) -> Dict[str, ClockTime]:
        sunrise = base["sunrise"]
        times = base.as_dict()
        times["ishraq"] = sunrise.add_minutes(ISHRAQ_AFTER_SUNRISE)
        times["chasht"] = sunrise.add_minutes(CHASHT_AFTER_SUNRISE)
        times["zawal"] = base["dhuhr"].subtract_minutes(ZAWAL_BEFORE_DHUHR)
        times["tahajud"] = TAHAJUD_TIME
        return times

    def windows(self, base: BaseTimes) -> Dict[str, Tuple[ClockTime, ClockTime]]:
        fajr, sunrise, dhuhr = base["fajr"], base["sunrise"], base["dhuhr"]
        asr, maghrib, isha = base["asr"], base["maghrib"], base["isha"]
        return {
            "fajr": (fajr.subtract_minutes(FAJR_WINDOW_LEAD), sunrise),
            "sunrise": (
                sunrise.subtract_minutes(SUNRISE_WINDOW_HALF_WIDTH),
                sunrise.add_minutes(SUNRISE_WINDOW_HALF_WIDTH),
            ),
            "ishraq": (sunrise.add_minutes(ISHRAQ_WINDOW[0]), sunrise.add_minutes(ISHRAQ_WINDOW[1])),
            "chasht": (sunrise.add_minutes(CHASHT_WINDOW[0]), sunrise.add_minutes(CHASHT_WINDOW[1])),
            "zawal": (dhuhr.add_minutes(ZAWAL_WINDOW[0]), dhuhr.add_minutes(ZAWAL_WINDOW[1])),
            "dhuhr": (dhuhr, asr),
            "asr": (asr, maghrib),
            "maghrib": (maghrib, isha),
            # Both end at the next day's fajr
            "isha": (isha, fajr.add_minutes(MINUTES_PER_DAY)),
            "tahajud": (isha.add_minutes(TAHAJUD_AFTER_ISHA), fajr),
        }

    def build(self, base_times: BaseTimes) -> Schedule:
        """Validate base_times and return the ten-entry Schedule. Raises MalformedBaseTimesError."""
        base_times.validate()
        shown = self.display_times(base_times)
        windows = self.windows(base_times)
        entries = [
            ScheduleEntry(key, shown[key], windows[key][0], windows[key][1])
            for key in ENTRY_ORDER
        ]
        self.logger.debug(f"Built schedule for {base_times.date} from {base_times.source or 'unknown'} source")
        return Schedule(base_times.date, entries, source=base_times.source)
