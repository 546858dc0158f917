"""Artist calendar events.

Events are private to their owner. As with releases, reads without an
identity return nothing and writes raise ``AuthenticationRequiredError``.
"""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.database import utcnow
from artist_hub.models.event import Event
from artist_hub.models.user import User
from artist_hub.schemas.event import EventCreate, EventUpdate
from artist_hub.services.errors import EventNotFoundError
from artist_hub.services.releases import backing_store, require_identity

logger = logging.getLogger(__name__)


async def get_owned_event(db: AsyncSession, user_id: int, event_id: str) -> Event:
    """Load an event by ``(user_id, event_id)``.

    Raises:
        EventNotFoundError: If the user has no such event.
    """
    with backing_store("load event"):
        result = await db.execute(
            select(Event).where(Event.id == event_id, Event.user_id == user_id)
        )
        event = result.scalar_one_or_none()
    if event is None:
        raise EventNotFoundError()
    return event


async def list_events(db: AsyncSession, user: User | None) -> list[Event]:
    """List the user's events, earliest date first.

    Events on the same day are ordered by start time, with all-day events
    (no start time) first.
    """
    if user is None:
        return []

    with backing_store("list events"):
        result = await db.execute(
            select(Event)
            .where(Event.user_id == user.id)
            .order_by(Event.date.asc(), Event.start_time.asc(), Event.created_at.asc())
        )
        return list(result.scalars().all())


async def get_event(db: AsyncSession, user: User | None, event_id: str) -> Event:
    if user is None:
        raise EventNotFoundError()
    return await get_owned_event(db, user.id, event_id)


async def create_event(
    db: AsyncSession,
    user: User | None,
    data: EventCreate,
    *,
    now: datetime | None = None,
) -> Event:
    """Add an event to the user's calendar."""
    user = require_identity(user)
    now = now or utcnow()

    event = Event(
        user_id=user.id,
        title=data.title,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        location=data.location,
        description=data.description,
        created_at=now,
        updated_at=now,
    )
    with backing_store("create event"):
        db.add(event)
        await db.flush()

    logger.info("Event %s added for user %s on %s", event.id, user.id, event.date)
    return event


async def update_event(
    db: AsyncSession,
    user: User | None,
    event_id: str,
    patch: EventUpdate,
    *,
    now: datetime | None = None,
) -> Event:
    """Apply the fields present in ``patch`` to one of the user's events."""
    user = require_identity(user)
    event = await get_owned_event(db, user.id, event_id)

    for field, value in patch.changes().items():
        setattr(event, field, value)
    event.updated_at = now or utcnow()

    with backing_store("update event"):
        await db.flush()

    logger.info("Event %s updated for user %s", event.id, user.id)
    return event


async def remove_event(db: AsyncSession, user: User | None, event_id: str) -> None:
    """Delete one of the user's events."""
    user = require_identity(user)
    event = await get_owned_event(db, user.id, event_id)

    with backing_store("remove event"):
        await db.delete(event)
        await db.flush()

    logger.info("Event %s removed for user %s", event_id, user.id)
