"""Pydantic schemas for request/response validation."""

from artist_hub.schemas.profile import ProfileResponse, ProfileUpdate
from artist_hub.schemas.release import (
    ExistingReleaseCreate,
    LatestArtworkResponse,
    ReleaseListResponse,
    ReleaseResponse,
    ReleaseSummary,
    ReleaseUpdate,
    ReleaseUploadCreate,
)
from artist_hub.schemas.user import Token, UserCreate, UserLogin, UserResponse

__all__ = [
    # Profile schemas
    "ProfileResponse",
    "ProfileUpdate",
    # Release schemas
    "ExistingReleaseCreate",
    "LatestArtworkResponse",
    "ReleaseListResponse",
    "ReleaseResponse",
    "ReleaseSummary",
    "ReleaseUpdate",
    "ReleaseUploadCreate",
    # User schemas
    "Token",
    "UserCreate",
    "UserLogin",
    "UserResponse",
]
