"""Pydantic schemas for the artist profile endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdate(BaseModel):
    """Schema for creating or replacing the caller's profile."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=2, max_length=100, description="Artist name")
    bio: str | None = Field(default=None, max_length=2000, description="Short biography")
    phone_number: str | None = Field(default=None, max_length=32, description="Contact number")
    image_url: str | None = Field(default=None, max_length=500, description="Profile image URL")


class ProfileResponse(BaseModel):
    """The caller's public artist profile."""

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(description="Artist name")
    email: str = Field(description="Account email address")
    bio: str | None = Field(default=None, description="Short biography")
    phone_number: str | None = Field(default=None, description="Contact number")
    image_url: str | None = Field(default=None, description="Profile image URL")
    updated_at: datetime | None = Field(
        default=None, description="Last update (null if the profile was never saved)"
    )
