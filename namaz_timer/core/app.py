import logging
import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from namaz_timer.core.clock import TimeLike
from namaz_timer.core.config import Config
from namaz_timer.core.errors import InvalidInputError
from namaz_timer.engine.builder import ScheduleBuilder
from namaz_timer.engine.query import countdown, next_entry
from namaz_timer.engine.types import Countdown, GeoCoordinate, Schedule, ScheduleEntry
from namaz_timer.sources import BaseTimesProvider, get_provider

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


class NamazTimerApp:
    """Wires config, logging, the timing source, the builder and persistence together.

    The engine underneath is pure; everything stateful (config, DB) lives here.
    """

    def __init__(self, config_path: Optional[str] = None, config: Optional[Config] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config = config or Config(config_path=config_path)

        self._setup_logging()

        self.builder = ScheduleBuilder()
        self.source_name = self.config.get("source", "backend", "astronomical")
        self.provider = self._create_provider(self.source_name)
        self.precision = int(self.config.get("cache", "coordinate_precision", 2))

        self.persist = bool(self.config.get("database", "enabled", True))
        if self.persist:
            from .db import init_db
            init_db(self.config.data)

    def _setup_logging(self) -> None:
        """Configure logging to write to stdout and, when configured, a file"""
        logging_config = self.config.section("logging")
        root_logger = logging.getLogger()
        level = getattr(logging, str(logging_config.get("level", "INFO")).upper(), logging.INFO)
        root_logger.setLevel(level)

        formatter = logging.Formatter(LOG_FORMAT)

        if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
                   for h in root_logger.handlers):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        log_file = logging_config.get("file")
        if log_file:
            path = Path(log_file).expanduser()
            # FileHandler stores the absolute path in baseFilename
            if not any(isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(path)
                       for h in root_logger.handlers):
                path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(path)
                file_handler.setFormatter(formatter)
                root_logger.addHandler(file_handler)

        logging.debug("Namaz timer logging configured")

    def _create_provider(self, source_name: str) -> BaseTimesProvider:
        """Create timing source based on configuration"""
        provider_config: Dict[str, Any] = dict(self.config.section("source"))
        provider_config["utc_offset"] = self.config.get("location", "utc_offset")
        provider_config.setdefault("cache_dir", self.config.get("cache", "directory"))
        provider_config.setdefault("coordinate_precision", self.config.get("cache", "coordinate_precision", 2))
        provider_config.setdefault("cache_max_age_days", self.config.get("cache", "max_age_days"))
        provider = get_provider(source_name, provider_config)
        if provider is None:
            raise ValueError(f"Unknown timing source: {source_name}")
        return provider

    def default_coordinate(self) -> GeoCoordinate:
        location = self.config.section("location")
        if location.get("latitude") is None or location.get("longitude") is None:
            raise InvalidInputError("Latitude and longitude must be configured")
        return GeoCoordinate(location["latitude"], location["longitude"])

    def get_schedule(
        self,
        coordinate: Optional[GeoCoordinate] = None,
        on_date: Optional[date] = None,
        force_fetch: bool = False,
    ) -> Schedule:
        """Stored schedule for (coordinate, date) if any, otherwise compute, build and store."""
        coordinate = coordinate or self.default_coordinate()
        on_date = on_date or datetime.now().date()

        if self.persist and not force_fetch:
            from namaz_timer.persistence.service import load_schedule
            stored = load_schedule(coordinate, on_date, self.provider.cache_tag, self.precision)
            if stored is not None:
                self.logger.debug(f"Using stored schedule for {on_date}")
                return stored

        self.logger.info(f"Building {self.source_name} schedule for {coordinate} on {on_date}")
        base_times = self.provider.get_base_times(coordinate, on_date, force_fetch=force_fetch)
        schedule = self.builder.build(base_times)

        if self.persist:
            from namaz_timer.persistence.service import save_schedule
            save_schedule(schedule, coordinate, self.provider.cache_tag, self.precision)
        return schedule

    def next_entry(
        self,
        now: Optional[TimeLike] = None,
        coordinate: Optional[GeoCoordinate] = None,
        on_date: Optional[date] = None,
    ) -> Tuple[ScheduleEntry, Countdown]:
        now = now or datetime.now()
        if on_date is None and isinstance(now, datetime):
            on_date = now.date()
        schedule = self.get_schedule(coordinate, on_date)
        entry = next_entry(schedule, now)
        return entry, countdown(entry, now)
