"""
Value types shared by the calculator, the schedule builder and the timing sources.
All of them are immutable; a new Schedule is built whenever location or date changes.
"""
import math
from collections import namedtuple
from datetime import date
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from namaz_timer.core.clock import ClockTime, to_clock_time
from namaz_timer.core.errors import InvalidInputError, MalformedBaseTimesError

# Base solar events, in their natural (and required) chronological order
BASE_KEYS = ("fajr", "sunrise", "dhuhr", "asr", "maghrib", "isha")

# Fixed order of the full day cycle
ENTRY_ORDER = (
    "fajr",
    "sunrise",
    "ishraq",
    "chasht",
    "zawal",
    "dhuhr",
    "asr",
    "maghrib",
    "isha",
    "tahajud",
)

# The five obligatory prayers
OBLIGATORY_KEYS = ("fajr", "dhuhr", "asr", "maghrib", "isha")


class GeoCoordinate(namedtuple("GeoCoordinate", ["latitude", "longitude"])):
    """Latitude/longitude in degrees. Construction rejects out-of-range values."""

    __slots__ = ()

    def __new__(cls, latitude: Any, longitude: Any):
        try:
            lat = float(latitude)
            lon = float(longitude)
        except (TypeError, ValueError):
            raise InvalidInputError(
                f"Latitude and longitude must be numbers, got {latitude!r}, {longitude!r}"
            ) from None
        if math.isnan(lat) or math.isnan(lon):
            raise InvalidInputError("Latitude and longitude must not be NaN")
        if not -90 <= lat <= 90:
            raise InvalidInputError(f"Latitude must be between -90 and 90, got {lat}")
        if not -180 <= lon <= 180:
            raise InvalidInputError(f"Longitude must be between -180 and 180, got {lon}")
        return super().__new__(cls, lat, lon)

    def rounded(self, precision: int = 2) -> Tuple[float, float]:
        """Key used for caching: coordinates closer than the precision share results."""
        return round(self.latitude, precision), round(self.longitude, precision)


class BaseTimes:
    """The six base events for one date, keyed by name.

    Times may come from the astronomical calculator or from a remote source;
    the schedule builder only relies on validate().
    """

    def __init__(self, on_date: date, times: Mapping[str, ClockTime], source: Optional[str] = None):
        self.date = on_date
        self.source = source
        self._times: Dict[str, ClockTime] = dict(times)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], on_date: date, source: Optional[str] = None) -> "BaseTimes":
        """Build from a loose mapping ("Fajr": "05:10 (PKT)", "sunrise": time(6, 21), ...).

        Keys are matched case-insensitively and extra keys ("Sunset", "Imsak") are ignored.
        Missing keys are left out so validate() reports them.
        """
        times = {}
        for raw_key, value in mapping.items():
            key = str(raw_key).strip().lower()
            if key not in BASE_KEYS or value is None:
                continue
            try:
                times[key] = to_clock_time(value)
            except (TypeError, ValueError) as e:
                raise MalformedBaseTimesError(f"Unreadable time for {key}: {value!r} ({e})") from e
        return cls(on_date, times, source=source)

    def __getitem__(self, key: str) -> ClockTime:
        return self._times[key]

    def __contains__(self, key: str) -> bool:
        return key in self._times

    def __iter__(self) -> Iterator[str]:
        return (k for k in BASE_KEYS if k in self._times)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseTimes):
            return NotImplemented
        return self.date == other.date and self._times == other._times

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={self._times[k]}" for k in self)
        return f"BaseTimes({self.date}, {body})"

    def get(self, key: str, default: Optional[ClockTime] = None) -> Optional[ClockTime]:
        return self._times.get(key, default)

    def as_dict(self) -> Dict[str, ClockTime]:
        return {k: self._times[k] for k in self}

    def validate(self) -> "BaseTimes":
        """Require all six keys, strictly increasing. Returns self for chaining."""
        missing = [k for k in BASE_KEYS if k not in self._times]
        if missing:
            raise MalformedBaseTimesError(f"Base times missing: {', '.join(missing)}")
        for earlier, later in zip(BASE_KEYS, BASE_KEYS[1:]):
            if not self._times[earlier] < self._times[later]:
                raise MalformedBaseTimesError(
                    f"Base times out of order: {earlier} {self._times[earlier]} "
                    f"is not before {later} {self._times[later]}"
                )
        return self


class ScheduleEntry(namedtuple("ScheduleEntry", ["key", "display_time", "window_start", "window_end"])):
    """One named observance: when to show it and the [start, end) window it may be performed in."""

    __slots__ = ()

    @property
    def crosses_midnight(self) -> bool:
        """True when the window ends on the following calendar day."""
        return self.window_end < self.window_start

    def contains(self, now: Union[ClockTime, Any]) -> bool:
        """Half-open membership test that follows the window across midnight."""
        clock = to_clock_time(now)
        if self.crosses_midnight:
            return clock >= self.window_start or clock < self.window_end
        return self.window_start <= clock < self.window_end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "time": str(self.display_time),
            "start": str(self.window_start),
            "end": str(self.window_end),
            "ends_next_day": self.crosses_midnight,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScheduleEntry":
        return cls(
            key=data["key"],
            display_time=ClockTime.parse(data["time"]),
            window_start=ClockTime.parse(data["start"]),
            window_end=ClockTime.parse(data["end"]),
        )


class Schedule:
    """The ten entries for one date, in ENTRY_ORDER."""

    def __init__(self, on_date: date, entries: List[ScheduleEntry], source: Optional[str] = None):
        keys = tuple(e.key for e in entries)
        if keys != ENTRY_ORDER:
            raise ValueError(f"Schedule entries must follow {ENTRY_ORDER}, got {keys}")
        self.date = on_date
        self.source = source
        self._entries: Tuple[ScheduleEntry, ...] = tuple(entries)
        self._by_key = {e.key: e for e in self._entries}

    def __getitem__(self, item: Union[str, int]) -> ScheduleEntry:
        if isinstance(item, str):
            return self._by_key[item]
        return self._entries[item]

    def __iter__(self) -> Iterator[ScheduleEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return self.date == other.date and self._entries == other._entries

    def __repr__(self) -> str:
        return f"Schedule({self.date}, {len(self._entries)} entries, source={self.source!r})"

    @property
    def entries(self) -> Tuple[ScheduleEntry, ...]:
        return self._entries

    def keys(self) -> Tuple[str, ...]:
        return ENTRY_ORDER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "source": self.source,
            "entries": [e.to_dict() for e in self._entries],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Schedule":
        return cls(
            on_date=date.fromisoformat(data["date"]),
            entries=[ScheduleEntry.from_dict(e) for e in data["entries"]],
            source=data.get("source"),
        )


# Time left until an entry; total_seconds keeps the truncated seconds for callers that tick per second
Countdown = namedtuple("Countdown", ["hours", "minutes", "total_seconds"])
