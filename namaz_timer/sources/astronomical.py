from datetime import date
from typing import Any, Dict, Optional

from namaz_timer.core.clock import local_utc_offset
from namaz_timer.engine.solar import SolarTimeCalculator
from namaz_timer.engine.types import BaseTimes, GeoCoordinate

from .base import BaseTimesProvider


class AstronomicalProvider(BaseTimesProvider):
    """Computes base times locally; no network, no cache."""

    name = "astronomical"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        offset = self.config.get("utc_offset")
        # null or "local": follow this machine's clock
        if offset is None or str(offset).strip().lower() == "local":
            offset = None
        self.calculator = SolarTimeCalculator(utc_offset=offset)

    def get_base_times(self, coordinate: GeoCoordinate, on_date: date, force_fetch: bool = False) -> BaseTimes:
        return self.calculator.compute(coordinate.latitude, coordinate.longitude, on_date)

    @property
    def cache_tag(self) -> str:
        if self.calculator.utc_offset is None:
            return f"{self.name}:local{local_utc_offset():+g}"
        return f"{self.name}:utc{self.calculator.utc_offset:+g}"
