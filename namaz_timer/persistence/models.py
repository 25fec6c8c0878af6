"""
SQLAlchemy models for computed schedules: one row per (rounded coordinate, date, source).
"""
from sqlalchemy import JSON, Column, Date, DateTime, Float, Integer, String

from namaz_timer.core.db import Base


class ScheduleRecord(Base):
    """One built schedule. data is Schedule.to_dict(): {date, source, entries: [{key, time, start, end}]}."""
    __tablename__ = "schedule_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    latitude = Column(Float, nullable=False, index=True)  # rounded to cache.coordinate_precision
    longitude = Column(Float, nullable=False, index=True)
    schedule_date = Column(Date, nullable=False, index=True)
    source = Column(String(64), nullable=False)
    computed_at = Column(DateTime(timezone=False), nullable=False, index=True)
    data = Column(JSON, nullable=False)
