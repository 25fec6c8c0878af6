"""
FastAPI server exposing schedules built by a NamazTimerApp.
Endpoints live under /api/schedule. Docs when running: http://<host>:<port>/docs
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict

from namaz_timer.core.clock import ClockTime
from namaz_timer.core.errors import (
    InvalidInputError,
    MalformedBaseTimesError,
    NoSolarSolutionError,
    TimingSourceError,
)
from namaz_timer.engine.formatting import ENTRY_INFO, format_countdown
from namaz_timer.engine.query import active_entries, countdown, current_prayer, next_entry
from namaz_timer.engine.types import GeoCoordinate, Schedule, ScheduleEntry

logger = logging.getLogger(__name__)


class EntryResponse(BaseModel):
    key: str
    name: str
    description: str
    time: str
    start: str
    end: str
    ends_next_day: bool


class ScheduleResponse(BaseModel):
    date: date
    source: Optional[str] = None
    latitude: float
    longitude: float
    entries: List[EntryResponse]


class NextEntryResponse(BaseModel):
    entry: EntryResponse
    hours: int
    minutes: int
    total_seconds: int
    remaining: str


class CurrentResponse(BaseModel):
    current: EntryResponse
    active: List[EntryResponse]


class ScheduleRecordResponse(BaseModel):
    """Pydantic view of ScheduleRecord for API; serializes from ORM."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    schedule_date: Optional[date] = None
    source: Optional[str] = None
    computed_at: Optional[datetime] = None
    data: Optional[Dict[str, Any]] = None


def _entry_response(entry: ScheduleEntry) -> EntryResponse:
    info = ENTRY_INFO.get(entry.key, {})
    return EntryResponse(
        name=info.get("name", entry.key.title()),
        description=info.get("description", ""),
        **entry.to_dict(),
    )


def _parse_now(now: Optional[str]) -> Tuple[Optional[date], Any]:
    """'HH:MM' (12 or 24 hour) or an ISO datetime; None means the server clock."""
    if not now:
        current = datetime.now()
        return current.date(), current
    try:
        return None, ClockTime.parse(now)
    except ValueError:
        pass
    try:
        current = datetime.fromisoformat(now)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unrecognized time: {now}") from None
    return current.date(), current


def create_app(namaz_app: Any) -> FastAPI:
    """Create FastAPI app with routes that use the given NamazTimerApp instance."""
    app = FastAPI(title="Namaz Timer API", description="Daily prayer schedules with Hanafi-style windows")

    def _coordinate(latitude: Optional[float], longitude: Optional[float]) -> GeoCoordinate:
        if latitude is None and longitude is None:
            return namaz_app.default_coordinate()
        if latitude is None or longitude is None:
            raise InvalidInputError("latitude and longitude must be given together")
        return GeoCoordinate(latitude, longitude)

    def _schedule(
        latitude: Optional[float],
        longitude: Optional[float],
        on_date: Optional[date],
        force: bool = False,
    ) -> Tuple[GeoCoordinate, Schedule]:
        try:
            coordinate = _coordinate(latitude, longitude)
            return coordinate, namaz_app.get_schedule(coordinate, on_date, force_fetch=force)
        except (InvalidInputError, NoSolarSolutionError) as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        except (TimingSourceError, MalformedBaseTimesError) as e:
            logger.error(f"Timing source failed: {e}")
            raise HTTPException(status_code=502, detail=str(e)) from e

    @app.get("/api/schedule", response_model=ScheduleResponse)
    def get_schedule(
        latitude: Optional[float] = Query(None),
        longitude: Optional[float] = Query(None),
        on_date: Optional[date] = Query(None, alias="date"),
        force: bool = Query(False),
    ) -> ScheduleResponse:
        """Ten entries with display times and windows for one date."""
        coordinate, schedule = _schedule(latitude, longitude, on_date, force)
        return ScheduleResponse(
            date=schedule.date,
            source=schedule.source,
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            entries=[_entry_response(e) for e in schedule],
        )

    @app.get("/api/schedule/next", response_model=NextEntryResponse)
    def get_next(
        latitude: Optional[float] = Query(None),
        longitude: Optional[float] = Query(None),
        now: Optional[str] = Query(None),
    ) -> NextEntryResponse:
        """Next entry after now and the countdown to it."""
        on_date, current = _parse_now(now)
        _, schedule = _schedule(latitude, longitude, on_date)
        entry = next_entry(schedule, current)
        remaining = countdown(entry, current)
        return NextEntryResponse(
            entry=_entry_response(entry),
            hours=remaining.hours,
            minutes=remaining.minutes,
            total_seconds=remaining.total_seconds,
            remaining=format_countdown(remaining),
        )

    @app.get("/api/schedule/current", response_model=CurrentResponse)
    def get_current(
        latitude: Optional[float] = Query(None),
        longitude: Optional[float] = Query(None),
        now: Optional[str] = Query(None),
    ) -> CurrentResponse:
        """Obligatory prayer in progress and every window that contains now."""
        on_date, current = _parse_now(now)
        _, schedule = _schedule(latitude, longitude, on_date)
        return CurrentResponse(
            current=_entry_response(current_prayer(schedule, current)),
            active=[_entry_response(e) for e in active_entries(schedule, current)],
        )

    @app.get("/api/schedule/latest", response_model=ScheduleRecordResponse)
    def get_latest() -> ScheduleRecordResponse:
        """Return the most recently stored schedule record (ORM serialized via Pydantic)."""
        if not namaz_app.persist:
            raise HTTPException(status_code=404, detail="Schedule storage is disabled")
        from namaz_timer.persistence.service import get_latest_schedule_record

        record = get_latest_schedule_record()
        if record is None:
            raise HTTPException(status_code=404, detail="No stored schedule available")
        return ScheduleRecordResponse.model_validate(record)

    return app


def run_api_server(namaz_app: Any) -> None:
    """Serve the API with uvicorn on api.host / api.port (blocks)."""
    import uvicorn

    host = namaz_app.config.get("api", "host", "127.0.0.1")
    port = int(namaz_app.config.get("api", "port", 8765))
    fastapi_app = create_app(namaz_app)
    logger.info(f"API server listening at http://{host}:{port} (docs at /docs)")
    uvicorn.run(fastapi_app, host=host, port=port)
