"""Pydantic schemas for release API endpoints."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from artist_hub.models.release import ReleaseStatus
from artist_hub.services.dates import normalize_release_date
from artist_hub.services.errors import ReleaseValidationError

MAX_TRACK_NAME_LENGTH = 100


def _validate_release_date(v: Any) -> str:
    if not isinstance(v, date | datetime | str):
        raise ValueError("A release date is required")
    try:
        return normalize_release_date(v)
    except ReleaseValidationError as e:
        raise ValueError(str(e)) from None


def _validate_tracks(v: list[str]) -> list[str]:
    tracks = []
    for position, name in enumerate(v, start=1):
        name = name.strip()
        if not name:
            raise ValueError(f"Track {position} name cannot be empty")
        if len(name) > MAX_TRACK_NAME_LENGTH:
            raise ValueError(f"Track {position} name is too long")
        tracks.append(name)
    return tracks


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class ReleaseUploadCreate(BaseModel):
    """Schema for registering a newly uploaded release."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=2, max_length=100, description="Release title")
    release_date: str = Field(description="Release date (YYYY-MM-DD)")
    archive_name: str | None = Field(
        default=None, max_length=255, description="Name of the uploaded release archive"
    )

    @field_validator("release_date", mode="before")
    @classmethod
    def validate_release_date(cls, v: Any) -> str:
        """Normalize the release date to YYYY-MM-DD."""
        return _validate_release_date(v)


class ExistingReleaseCreate(BaseModel):
    """Schema for adding a release that is already live."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=2, max_length=100, description="Release title")
    artist: str | None = Field(
        default=None,
        min_length=2,
        max_length=100,
        description="Artist name (defaults to the profile name)",
    )
    release_date: str = Field(description="Release date (YYYY-MM-DD)")
    tracks: list[str] = Field(min_length=1, description="Ordered track names")
    artwork_url: str | None = Field(default=None, max_length=1000, description="Artwork URL")
    spotify_link: HttpUrl | None = Field(default=None, description="Spotify link")

    @field_validator("release_date", mode="before")
    @classmethod
    def validate_release_date(cls, v: Any) -> str:
        """Normalize the release date to YYYY-MM-DD."""
        return _validate_release_date(v)

    @field_validator("tracks")
    @classmethod
    def validate_tracks(cls, v: list[str]) -> list[str]:
        """Validate each track has a name."""
        return _validate_tracks(v)

    @field_validator("artist", "artwork_url", "spotify_link", mode="before")
    @classmethod
    def empty_as_missing(cls, v: Any) -> Any:
        """Treat blank optional strings as omitted."""
        return _blank_to_none(v)


class ReleaseUpdate(BaseModel):
    """Schema for updating a release.

    Only fields present in the request are changed. ``artwork_url`` may only
    be set to null, which clears the artwork; new artwork is uploaded as a file.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=2, max_length=100)
    artist: str | None = Field(default=None, min_length=2, max_length=100)
    release_date: str | None = Field(default=None, description="Release date (YYYY-MM-DD)")
    tracks: list[str] | None = Field(default=None, min_length=1)
    spotify_link: HttpUrl | None = Field(default=None)
    artwork_url: str | None = Field(default=None, description="Set to null to clear artwork")

    @field_validator("release_date", mode="before")
    @classmethod
    def validate_release_date(cls, v: Any) -> str | None:
        """Normalize the release date to YYYY-MM-DD."""
        if v is None:
            return None
        return _validate_release_date(v)

    @field_validator("tracks")
    @classmethod
    def validate_tracks(cls, v: list[str] | None) -> list[str] | None:
        """Validate each track has a name."""
        if v is None:
            return None
        return _validate_tracks(v)

    @field_validator("spotify_link", mode="before")
    @classmethod
    def empty_link_as_none(cls, v: Any) -> Any:
        """Treat a blank link as removing it."""
        return _blank_to_none(v)

    @field_validator("artwork_url")
    @classmethod
    def validate_artwork_url(cls, v: str | None) -> str | None:
        """Artwork can only be cleared through a patch."""
        if v is not None:
            raise ValueError("Artwork can only be replaced by uploading a file")
        return v

    @property
    def clears_artwork(self) -> bool:
        """Whether the patch explicitly sets artwork to null."""
        return "artwork_url" in self.model_fields_set and self.artwork_url is None


class ReleaseResponse(BaseModel):
    """Response schema for a release."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Release ID")
    user_id: int = Field(description="Owner user ID")
    title: str = Field(description="Release title")
    artist: str = Field(description="Artist name")
    release_date: str = Field(description="Release date (YYYY-MM-DD)")
    artwork_url: str | None = Field(default=None, description="Stored artwork reference")
    display_artwork_url: str = Field(description="Artwork to display (placeholder if none)")
    tracks: list[str] = Field(default_factory=list, description="Ordered track names")
    spotify_link: str | None = Field(default=None, description="Spotify link")
    status: ReleaseStatus = Field(description="Lifecycle status")
    takedown_requested_at: datetime | None = Field(
        default=None, description="When the takedown was requested"
    )
    takedown_cancel_deadline: datetime | None = Field(
        default=None, description="Last moment the takedown can be cancelled"
    )
    can_cancel_takedown: bool = Field(
        default=False, description="Whether the takedown can still be cancelled"
    )
    created_at: datetime = Field(description="When the release was created")
    updated_at: datetime = Field(description="When the release was last updated")


class ReleaseListResponse(BaseModel):
    """Paginated response for listing releases."""

    model_config = ConfigDict(extra="ignore")

    total: int = Field(description="Total number of releases")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Number of items per page")
    results: list[ReleaseResponse] = Field(default_factory=list, description="Releases")


class ReleaseSummary(BaseModel):
    """Release counts per lifecycle status."""

    total: int = Field(default=0, description="Total number of releases")
    by_status: dict[ReleaseStatus, int] = Field(
        default_factory=dict, description="Number of releases in each status"
    )


class LatestArtworkResponse(BaseModel):
    """Artwork of the most recently created release."""

    artwork_url: str | None = Field(default=None, description="Artwork URL, if any")
