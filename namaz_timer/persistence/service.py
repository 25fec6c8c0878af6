"""
Service layer: save and load schedules from DB.
"""
import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import delete, select

from namaz_timer.core.db import session_scope
from namaz_timer.engine.types import GeoCoordinate, Schedule
from namaz_timer.persistence.models import ScheduleRecord

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 2


def _key_filter(coordinate: GeoCoordinate, schedule_date: date, source: str, precision: int):
    lat, lon = coordinate.rounded(precision)
    return (
        ScheduleRecord.latitude == lat,
        ScheduleRecord.longitude == lon,
        ScheduleRecord.schedule_date == schedule_date,
        ScheduleRecord.source == source,
    )


def save_schedule(
    schedule: Schedule,
    coordinate: GeoCoordinate,
    source: str,
    precision: int = DEFAULT_PRECISION,
) -> None:
    """Replace the stored schedule for this coordinate/date/source."""
    computed_at = datetime.now(timezone.utc).replace(tzinfo=None)
    lat, lon = coordinate.rounded(precision)
    with session_scope() as session:
        session.execute(
            delete(ScheduleRecord).where(*_key_filter(coordinate, schedule.date, source, precision))
        )
        session.add(
            ScheduleRecord(
                latitude=lat,
                longitude=lon,
                schedule_date=schedule.date,
                source=source,
                computed_at=computed_at,
                data=schedule.to_dict(),
            )
        )
    logger.debug(f"Saved {source} schedule for ({lat}, {lon}) on {schedule.date}")


def load_schedule(
    coordinate: GeoCoordinate,
    schedule_date: date,
    source: str,
    precision: int = DEFAULT_PRECISION,
) -> Optional[Schedule]:
    """Return the stored schedule for this key, or None. A corrupt row is logged and treated as missing."""
    with session_scope() as session:
        row = (
            session.execute(
                select(ScheduleRecord)
                .where(*_key_filter(coordinate, schedule_date, source, precision))
                .order_by(ScheduleRecord.computed_at.desc())
                .limit(1)
            )
            .scalars().first()
        )
        data = row.data if row else None
    if data is None:
        return None
    try:
        return Schedule.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Stored schedule for {schedule_date} is unreadable, recomputing: {e}")
        return None


def get_latest_schedule_record() -> Optional[ScheduleRecord]:
    """Return the most recently computed ScheduleRecord (for API serialization)."""
    with session_scope() as session:
        return (
            session.execute(
                select(ScheduleRecord)
                .order_by(ScheduleRecord.computed_at.desc(), ScheduleRecord.id.desc())
                .limit(1)
            )
            .scalars().first()
        )
