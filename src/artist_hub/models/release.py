"""Release ORM model and lifecycle statuses."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from artist_hub.database import Base, UTCDateTime, utcnow


class ReleaseStatus(StrEnum):
    """Lifecycle status of a release."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    EXISTING = "existing"
    TAKEDOWN_REQUESTED = "takedown_requested"


# Statuses from which a takedown may be requested
LIVE_STATUSES = frozenset(
    {ReleaseStatus.PROCESSING, ReleaseStatus.COMPLETED, ReleaseStatus.EXISTING}
)


def new_release_id() -> str:
    """Generate an opaque release identifier."""
    return uuid.uuid4().hex


class Release(Base):
    """A music release owned by one artist account."""

    __tablename__ = "releases"
    __table_args__ = (
        Index("ix_releases_user_listing", "user_id", "release_date", "created_at"),
        CheckConstraint(
            "(status = 'takedown_requested') = (takedown_requested_at IS NOT NULL)",
            name="ck_releases_takedown_timestamp",
        ),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_release_id)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(100))
    artist: Mapped[str] = mapped_column(String(100))
    release_date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    artwork_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    tracks: Mapped[list[str]] = mapped_column(JSON, default=list)
    spotify_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    upload_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=ReleaseStatus.PROCESSING)
    previous_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    takedown_requested_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_takedown_pending(self) -> bool:
        return self.status == ReleaseStatus.TAKEDOWN_REQUESTED
