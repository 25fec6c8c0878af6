"""
Plain-text rendering helpers for the CLI and API. No locale handling.
"""
from typing import Dict

from namaz_timer.core.clock import ClockTime
from namaz_timer.engine.types import Countdown

ENTRY_INFO: Dict[str, Dict[str, str]] = {
    "fajr": {"name": "Fajr", "description": "Dawn prayer"},
    "sunrise": {"name": "Sunrise", "description": "Sunrise time"},
    "ishraq": {"name": "Ishraq", "description": "Post-sunrise prayer"},
    "chasht": {"name": "Chasht (Duha)", "description": "Morning voluntary prayer"},
    "zawal": {"name": "Zawal", "description": "Sun at zenith"},
    "dhuhr": {"name": "Dhuhr", "description": "Noon prayer"},
    "asr": {"name": "Asr", "description": "Afternoon prayer"},
    "maghrib": {"name": "Maghrib", "description": "Sunset prayer"},
    "isha": {"name": "Isha", "description": "Night prayer"},
    "tahajud": {"name": "Tahajud", "description": "Night voluntary prayer"},
}


def display_name(key: str) -> str:
    return ENTRY_INFO.get(key, {}).get("name", key.title())


def format_clock(clock: ClockTime, hour12: bool = True) -> str:
    """'05:10 AM' style (two-digit hour) or 24-hour '17:10'."""
    if not hour12:
        return str(clock)
    period = "AM" if clock.hour < 12 else "PM"
    hour = clock.hour % 12 or 12
    return f"{hour:02d}:{clock.minute:02d} {period}"


def format_countdown(remaining: Countdown) -> str:
    return f"{remaining.hours}h {remaining.minutes}m remaining"
