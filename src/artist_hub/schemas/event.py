"""Pydantic schemas for calendar event endpoints."""

import re
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artist_hub.services.dates import normalize_release_date
from artist_hub.services.errors import ReleaseValidationError

_TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def _validate_event_date(v: Any) -> str:
    if not isinstance(v, date | datetime | str):
        raise ValueError("An event date is required")
    try:
        return normalize_release_date(v)
    except ReleaseValidationError:
        raise ValueError(f"Invalid event date: {v!r}") from None


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _validate_time(v: Any) -> str | None:
    if v is None or (isinstance(v, str) and not v.strip()):
        return None
    match = _TIME_PATTERN.match(v.strip()) if isinstance(v, str) else None
    if match is None:
        raise ValueError("Invalid time format (HH:MM)")
    hour, minute = match.groups()
    return f"{int(hour):02d}:{minute}"


class EventCreate(BaseModel):
    """Schema for adding an event to the caller's calendar."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3, max_length=100, description="Event title")
    date: str = Field(description="Event date (YYYY-MM-DD)")
    start_time: str | None = Field(default=None, description="Start time (HH:MM)")
    end_time: str | None = Field(default=None, description="End time (HH:MM)")
    location: str | None = Field(default=None, max_length=150, description="Venue or address")
    description: str | None = Field(default=None, max_length=1000, description="Notes")

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> str:
        """Normalize the event date to YYYY-MM-DD."""
        return _validate_event_date(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_time(cls, v: Any) -> str | None:
        """Normalize times to zero-padded HH:MM."""
        return _validate_time(v)

    @field_validator("location", "description", mode="before")
    @classmethod
    def empty_as_none(cls, v: Any) -> Any:
        """Treat blank text as no value."""
        return _blank_to_none(v)


class EventUpdate(BaseModel):
    """Schema for updating an event.

    Only fields present in the request are changed. Optional fields can be
    cleared by sending null.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=3, max_length=100)
    date: str | None = Field(default=None, description="Event date (YYYY-MM-DD)")
    start_time: str | None = Field(default=None, description="Start time (HH:MM)")
    end_time: str | None = Field(default=None, description="End time (HH:MM)")
    location: str | None = Field(default=None, max_length=150)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("title", "date", mode="before")
    @classmethod
    def required_when_present(cls, v: Any) -> Any:
        """Title and date can be changed but never removed."""
        if v is None:
            raise ValueError("This field cannot be cleared")
        return v

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        """Normalize the event date to YYYY-MM-DD."""
        return _validate_event_date(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def validate_time(cls, v: Any) -> str | None:
        """Normalize times to zero-padded HH:MM."""
        return _validate_time(v)

    @field_validator("location", "description", mode="before")
    @classmethod
    def empty_as_none(cls, v: Any) -> Any:
        """Treat blank text as no value."""
        return _blank_to_none(v)

    def changes(self) -> dict[str, Any]:
        """Fields sent in the request, with their validated values."""
        return {field: getattr(self, field) for field in self.model_fields_set}


class EventResponse(BaseModel):
    """Response schema for an event."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Event ID")
    user_id: int = Field(description="Owner user ID")
    title: str = Field(description="Event title")
    date: str = Field(description="Event date (YYYY-MM-DD)")
    start_time: str | None = Field(default=None, description="Start time (HH:MM)")
    end_time: str | None = Field(default=None, description="End time (HH:MM)")
    location: str | None = Field(default=None, description="Venue or address")
    description: str | None = Field(default=None, description="Notes")
    created_at: datetime = Field(description="When the event was added")
    updated_at: datetime = Field(description="When the event was last updated")


class EventListResponse(BaseModel):
    """Events on the caller's calendar, earliest first."""

    total: int = Field(description="Number of events")
    results: list[EventResponse] = Field(default_factory=list, description="Events")
