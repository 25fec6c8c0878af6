"""
Astronomical computation of the six base prayer times.

Low-precision solar position (Julian day, declination, equation of time) and the
hour angle for each target elevation. Results are floored to the minute.
"""
import logging
import math
from datetime import date
from typing import Dict, List, Optional, Tuple

from namaz_timer.core.clock import ClockTime, local_utc_offset
from namaz_timer.core.errors import NoSolarSolutionError
from namaz_timer.engine.types import BaseTimes, GeoCoordinate


J2000 = 2451545.0
OBLIQUITY_DEG = 23.439

# Target solar elevations in degrees
FAJR_ANGLE = -18.0
SUNRISE_ANGLE = -0.833  # refraction + solar radius
MAGHRIB_ANGLE = -0.833
ISHA_ANGLE = -17.0

# Asr starts when an object's shadow equals its noon shadow plus this many object lengths
ASR_SHADOW_FACTOR = 1.0


def julian_day(on_date: date) -> int:
    """Julian Day Number of a Gregorian date (integer arithmetic)."""
    a = (14 - on_date.month) // 12
    y = on_date.year + 4800 - a
    m = on_date.month + 12 * a - 3
    return (
        on_date.day
        + (153 * m + 2) // 5
        + 365 * y
        + y // 4
        - y // 100
        + y // 400
        - 32045
    )


def solar_position(jd: float) -> Tuple[float, float]:
    """Return (declination in radians, equation of time in minutes) for a Julian day."""
    n = jd - J2000
    mean_longitude = 280.460 + 0.9856474 * n
    mean_anomaly = math.radians(357.528 + 0.9856003 * n)
    ecliptic_longitude = math.radians(
        mean_longitude
        + 1.915 * math.sin(mean_anomaly)
        + 0.020 * math.sin(2 * mean_anomaly)
    )
    obliquity = math.radians(OBLIQUITY_DEG)

    declination = math.asin(math.sin(obliquity) * math.sin(ecliptic_longitude))
    right_ascension = math.degrees(
        math.atan2(
            math.cos(obliquity) * math.sin(ecliptic_longitude),
            math.cos(ecliptic_longitude),
        )
    )
    # L grows without bound; only its difference to RA modulo a full turn matters
    difference = (mean_longitude - right_ascension + 180.0) % 360.0 - 180.0
    equation_of_time = 4.0 * difference
    return declination, equation_of_time


def hour_angle(latitude_rad: float, declination: float, elevation_deg: float) -> Optional[float]:
    """Hour angle in hours for the sun at elevation_deg, or None if it never gets there."""
    denominator = math.cos(latitude_rad) * math.cos(declination)
    if abs(denominator) < 1e-12:
        return None
    cos_h = (
        math.sin(math.radians(elevation_deg))
        - math.sin(latitude_rad) * math.sin(declination)
    ) / denominator
    if cos_h < -1.0 or cos_h > 1.0:
        return None
    return math.degrees(math.acos(cos_h)) / 15.0


def asr_elevation(latitude_rad: float, declination: float) -> float:
    """Solar elevation (degrees) at which Asr begins."""
    return math.degrees(
        math.atan(1.0 / (ASR_SHADOW_FACTOR + math.tan(abs(latitude_rad - declination))))
    )


class SolarTimeCalculator:
    """Pure function of (latitude, longitude, date) -> BaseTimes.

    utc_offset (hours) moves the UTC-referenced solar noon onto the caller's wall
    clock. When it is None the machine's own offset on the computed date is used,
    so results follow the device clock across daylight-saving changes.
    """

    def __init__(self, utc_offset: Optional[float] = None):
        self.utc_offset = None if utc_offset is None else float(utc_offset)
        self.logger = logging.getLogger(self.__class__.__name__)

    def offset_for(self, on_date: date) -> float:
        if self.utc_offset is not None:
            return self.utc_offset
        return local_utc_offset(on_date)

    def solar_noon(self, longitude: float, equation_of_time: float, utc_offset: float = 0.0) -> float:
        return 12.0 + utc_offset - longitude / 15.0 - equation_of_time / 60.0

    def compute_hours(self, latitude: float, longitude: float, on_date: date) -> Dict[str, float]:
        """Fractional-hour results before flooring. Raises NoSolarSolutionError."""
        coordinate = GeoCoordinate(latitude, longitude)
        lat_rad = math.radians(coordinate.latitude)
        declination, eq_time = solar_position(julian_day(on_date))
        noon = self.solar_noon(coordinate.longitude, eq_time, self.offset_for(on_date))

        targets = [
            ("fajr", FAJR_ANGLE, -1),
            ("sunrise", SUNRISE_ANGLE, -1),
            ("asr", asr_elevation(lat_rad, declination), 1),
            ("maghrib", MAGHRIB_ANGLE, 1),
            ("isha", ISHA_ANGLE, 1),
        ]
        hours = {"dhuhr": noon}
        failed: List[str] = []
        for name, elevation, direction in targets:
            h = hour_angle(lat_rad, declination, elevation)
            if h is None:
                failed.append(name)
                continue
            hours[name] = noon + direction * h

        if failed:
            self.logger.warning(
                f"No solar solution for {failed} at ({coordinate.latitude}, {coordinate.longitude}) on {on_date}"
            )
            raise NoSolarSolutionError(failed, coordinate.latitude, coordinate.longitude, on_date)
        return hours

    def compute(self, latitude: float, longitude: float, on_date: date) -> BaseTimes:
        hours = self.compute_hours(latitude, longitude, on_date)
        times = {name: ClockTime.from_fractional_hours(value) for name, value in hours.items()}
        self.logger.debug(f"Computed base times for ({latitude}, {longitude}) on {on_date}: {times}")
        return BaseTimes(on_date, times, source="astronomical")
