"""Calendar event ORM model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from artist_hub.database import Base, UTCDateTime, utcnow


def new_event_id() -> str:
    """Generate an opaque event identifier."""
    return uuid.uuid4().hex


class Event(Base):
    """A gig, session or other dated entry on an artist's calendar."""

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_user_calendar", "user_id", "date", "start_time"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_event_id)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(100))
    date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)  # HH:MM
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)  # HH:MM
    location: Mapped[str | None] = mapped_column(String(150), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)
