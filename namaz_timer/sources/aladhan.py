from datetime import date
from typing import Any, Dict, Optional

import requests

from namaz_timer.core.cache_helper import CacheHelper
from namaz_timer.core.errors import TimingSourceError
from namaz_timer.engine.types import BASE_KEYS, BaseTimes, GeoCoordinate

from .base import BaseTimesProvider


class AladhanProvider(BaseTimesProvider):
    """Base times from api.aladhan.com, already in the location's local wall clock"""

    name = "aladhan"

    DEFAULT_BASE_URL = "https://api.aladhan.com/v1"

    # API timing key -> our key
    PRAYER_NAMES = {
        "Fajr": "fajr",
        "Sunrise": "sunrise",
        "Dhuhr": "dhuhr",
        "Asr": "asr",
        "Maghrib": "maghrib",
        "Isha": "isha",
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.base_url = (self.config.get("base_url") or self.DEFAULT_BASE_URL).rstrip("/")
        self.method = int(self.config.get("method", 2))
        self.school = int(self.config.get("school", 0))
        self.timeout = float(self.config.get("timeout", 10))
        self.precision = int(self.config.get("coordinate_precision", 2))
        self.cache_helper = CacheHelper(
            self.config.get("cache_dir"),
            "aladhan",
            max_age_days=self.config.get("cache_max_age_days", CacheHelper.DEFAULT_MAX_AGE_DAYS),
        )

    def _cache_key(self, coordinate: GeoCoordinate, on_date: date) -> str:
        lat, lon = coordinate.rounded(self.precision)
        return f"timings_{lat}_{lon}_{on_date.isoformat()}_m{self.method}_s{self.school}"

    def get_base_times(self, coordinate: GeoCoordinate, on_date: date, force_fetch: bool = False) -> BaseTimes:
        cache_key = self._cache_key(coordinate, on_date)

        if not force_fetch:
            cached = self.cache_helper.get_cached_content(cache_key)
            if cached:
                self.logger.info(f"Got timings from cache: {cache_key}")
                return BaseTimes.from_mapping(cached, on_date, source=self.name).validate()

        timings = self._fetch_timings(coordinate, on_date)
        base_times = BaseTimes.from_mapping(timings, on_date, source=self.name).validate()

        # Only cache what validated
        self.cache_helper.save_to_cache(cache_key, {k: str(v) for k, v in base_times.as_dict().items()})
        return base_times

    def _fetch_timings(self, coordinate: GeoCoordinate, on_date: date) -> Dict[str, str]:
        url = f"{self.base_url}/timings/{on_date.strftime('%d-%m-%Y')}"
        params = {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
            "method": self.method,
            "school": self.school,
        }

        self.logger.info(f"Making API request to {url} with params {params}")
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except ValueError as e:
            # requests' JSONDecodeError is also a RequestException
            self.logger.error(f"AlAdhan returned invalid JSON: {e}")
            raise TimingSourceError("AlAdhan returned invalid JSON") from e
        except requests.RequestException as e:
            self.logger.error(f"Error fetching prayer times: {e}")
            raise TimingSourceError(f"AlAdhan request failed: {e}") from e

        if not isinstance(data, dict):
            self.logger.error(f"AlAdhan returned unexpected payload: {data!r}")
            raise TimingSourceError("AlAdhan returned unexpected payload")
        if data.get("code") != 200 or not isinstance(data.get("data"), dict):
            status = data.get("status", "Unknown")
            self.logger.error(f"AlAdhan API error: {status}")
            raise TimingSourceError(f"AlAdhan API error: {status}")

        timings = data["data"].get("timings") or {}
        result = {
            key: timings[api_name]
            for api_name, key in self.PRAYER_NAMES.items()
            if api_name in timings
        }
        missing = [k for k in BASE_KEYS if k not in result]
        if missing:
            self.logger.warning(f"AlAdhan response missing timings: {missing}")
        self.logger.debug(f"AlAdhan timings for {on_date}: {result}")
        return result

    @property
    def cache_tag(self) -> str:
        return f"{self.name}:m{self.method}:s{self.school}"
