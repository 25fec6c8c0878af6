"""
Queries against a built Schedule for a caller-supplied "now".

now may be a ClockTime, datetime.time or datetime.datetime. Only the countdown
looks at seconds; entry selection works on minute-of-day.
"""
from typing import List

from namaz_timer.core.clock import SECONDS_PER_DAY, TimeLike, seconds_of_day, to_clock_time
from namaz_timer.engine.types import OBLIGATORY_KEYS, Countdown, Schedule, ScheduleEntry


def next_entry(schedule: Schedule, now: TimeLike) -> ScheduleEntry:
    """First entry (fixed order) whose display time is strictly after now; else the first entry, tomorrow."""
    current = to_clock_time(now).minute_of_day
    for entry in schedule:
        if entry.display_time.minute_of_day > current:
            return entry
    return schedule[0]


def countdown(entry: ScheduleEntry, now: TimeLike) -> Countdown:
    """Time from now until entry's display time, rolled to tomorrow unless strictly later today."""
    diff = entry.display_time.minute_of_day * 60 - seconds_of_day(now)
    if diff <= 0:
        diff += SECONDS_PER_DAY
    return Countdown(hours=diff // 3600, minutes=(diff % 3600) // 60, total_seconds=diff)


def current_prayer(schedule: Schedule, now: TimeLike) -> ScheduleEntry:
    """The obligatory prayer whose period holds now.

    Each prayer runs until the next one starts; isha runs until tomorrow's fajr,
    so it is also the answer before today's fajr.
    """
    current = to_clock_time(now)
    prayers = [schedule[key] for key in OBLIGATORY_KEYS]
    for prayer, following in zip(prayers, prayers[1:]):
        if prayer.display_time <= current < following.display_time:
            return prayer
    return schedule["isha"]


def active_entries(schedule: Schedule, now: TimeLike) -> List[ScheduleEntry]:
    """Entries whose [start, end) window contains now, in fixed order."""
    current = to_clock_time(now)
    return [entry for entry in schedule if entry.contains(current)]
