"""Calendar event API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.database import get_db
from artist_hub.schemas.event import EventCreate, EventListResponse, EventResponse, EventUpdate
from artist_hub.services import events as event_service
from artist_hub.utils.security import OptionalUser

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventListResponse)
async def list_events(
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> EventListResponse:
    """List the caller's events, earliest first.

    Anonymous callers get an empty list.
    """
    events = await event_service.list_events(db, current_user)
    return EventListResponse(
        total=len(events),
        results=[EventResponse.model_validate(event) for event in events],
    )


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    current_user: OptionalUser,
    event_data: EventCreate,
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    """Add an event to the caller's calendar. Requires authentication."""
    event = await event_service.create_event(db, current_user, event_data)
    return EventResponse.model_validate(event)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    event = await event_service.get_event(db, current_user, event_id)
    return EventResponse.model_validate(event)


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    current_user: OptionalUser,
    event_data: EventUpdate,
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    """Update an event.

    Only the fields sent are changed; ``null`` clears the times, location or
    description. Requires authentication.
    """
    event = await event_service.update_event(db, current_user, event_id, event_data)
    return EventResponse.model_validate(event)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    current_user: OptionalUser,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Remove an event from the caller's calendar. Requires authentication."""
    await event_service.remove_event(db, current_user, event_id)
