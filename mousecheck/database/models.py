"""SQLAlchemy ORM models for MouseCheck."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Float
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class WindowRecord(Base):
    """One closed allowing window and how it was judged."""

    __tablename__ = "windows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    start_time = Column(DateTime, nullable=False, default=datetime.now)
    end_time = Column(DateTime, nullable=True)
    allowing_duration = Column(Float, nullable=False)     # seconds
    prohibiting_duration = Column(Float, nullable=False)
    click_count = Column(Integer, nullable=False, default=0)
    outcome = Column(String(20), nullable=False)  # success | no_event | multiple_events
    first_click_ms = Column(Float, nullable=True)  # latency from window open

    def __repr__(self) -> str:
        return (
            f"<WindowRecord id={self.id} outcome={self.outcome} "
            f"clicks={self.click_count}>"
        )
