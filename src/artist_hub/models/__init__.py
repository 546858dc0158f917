"""SQLAlchemy ORM models."""

from artist_hub.models.event import Event
from artist_hub.models.profile import Profile
from artist_hub.models.release import LIVE_STATUSES, Release, ReleaseStatus
from artist_hub.models.user import User

__all__ = [
    "LIVE_STATUSES",
    "Event",
    "Profile",
    "Release",
    "ReleaseStatus",
    "User",
]
