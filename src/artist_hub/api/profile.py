"""Artist profile API endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from artist_hub.database import get_db, utcnow
from artist_hub.models.profile import Profile
from artist_hub.models.user import User
from artist_hub.schemas.profile import ProfileResponse, ProfileUpdate
from artist_hub.services.identity import email_local_part, get_profile
from artist_hub.utils.security import CurrentUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])

DEFAULT_PROFILE_NAME = "User"


def profile_to_response(user: User, profile: Profile | None) -> ProfileResponse:
    """Build the profile view, falling back to account data for missing fields."""
    fallback_name = user.display_name or email_local_part(user.email) or DEFAULT_PROFILE_NAME
    if profile is None:
        return ProfileResponse(name=fallback_name, email=user.email)

    return ProfileResponse(
        name=profile.name or fallback_name,
        email=user.email,
        bio=profile.bio,
        phone_number=profile.phone_number,
        image_url=profile.image_url,
        updated_at=profile.updated_at,
    )


@router.get("", response_model=ProfileResponse)
async def read_profile(
    current_user: CurrentUser,
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Get the caller's artist profile.

    When no profile has been saved yet, one is synthesized from the account.
    Requires authentication.
    """
    profile = await get_profile(db, current_user.id)
    return profile_to_response(current_user, profile)


@router.put("", response_model=ProfileResponse)
async def save_profile(
    current_user: CurrentUser,
    profile_data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Create or replace the caller's artist profile.

    The profile name becomes the default artist name for new releases.
    Requires authentication.
    """
    profile = await get_profile(db, current_user.id)
    if profile is None:
        profile = Profile(user_id=current_user.id)
        db.add(profile)

    profile.name = profile_data.name
    profile.bio = profile_data.bio
    profile.phone_number = profile_data.phone_number
    profile.image_url = profile_data.image_url
    profile.updated_at = utcnow()

    await db.flush()
    logger.info("Profile saved for user %s", current_user.id)
    return profile_to_response(current_user, profile)
