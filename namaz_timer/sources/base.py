"""
Base interface for timing sources. Any source that can produce BaseTimes for a
(coordinate, date) is interchangeable in front of the ScheduleBuilder.
"""
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, Optional

from namaz_timer.engine.types import BaseTimes, GeoCoordinate


class BaseTimesProvider(ABC):
    """Base class for base-time sources"""

    name = "base"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def get_base_times(self, coordinate: GeoCoordinate, on_date: date, force_fetch: bool = False) -> BaseTimes:
        """Return the six base times for coordinate on on_date.
        Args:
            force_fetch: If True, bypass any cache the source keeps
        Raises:
            NoSolarSolutionError, MalformedBaseTimesError, TimingSourceError
        """
        pass

    @property
    def cache_tag(self) -> str:
        """Label stored with persisted schedules; differs whenever results would differ."""
        return self.name
