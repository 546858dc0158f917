"""Display-name resolution for the current identity."""

import logging
from collections.abc import Awaitable, Callable, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.models.profile import Profile
from artist_hub.models.user import User

logger = logging.getLogger(__name__)

UNKNOWN_ARTIST = "Unknown Artist"

NameLookup = Callable[[], Awaitable[str | None]]


async def first_non_empty(lookups: Iterable[NameLookup], default: str) -> str:
    """Evaluate lookups in order and return the first non-blank result.

    Later lookups are never awaited once an earlier one produces a value.
    """
    for lookup in lookups:
        value = await lookup()
        if value and value.strip():
            return value.strip()
    return default


def email_local_part(email: str | None) -> str | None:
    """Return the part of an email address before the ``@``."""
    if not email:
        return None
    return email.split("@", 1)[0] or None


async def get_profile(db: AsyncSession, user_id: int) -> Profile | None:
    """Load the profile row for a user, if one exists."""
    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return result.scalar_one_or_none()


async def resolve_artist_name(db: AsyncSession, user: User, explicit: str | None = None) -> str:
    """Resolve the artist display name for a new release.

    Priority: explicit input, profile name, identity display name, email
    local-part, then ``"Unknown Artist"``.
    """

    async def from_input() -> str | None:
        return explicit

    async def from_profile() -> str | None:
        profile = await get_profile(db, user.id)
        return profile.name if profile else None

    async def from_display_name() -> str | None:
        return user.display_name

    async def from_email() -> str | None:
        return email_local_part(user.email)

    name = await first_non_empty(
        (from_input, from_profile, from_display_name, from_email),
        default=UNKNOWN_ARTIST,
    )
    logger.debug("Resolved artist name for user %s: %s", user.id, name)
    return name
