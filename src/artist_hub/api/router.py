"""Main API router aggregation."""

from fastapi import APIRouter

from artist_hub.api.auth import router as auth_router
from artist_hub.api.events import router as events_router
from artist_hub.api.profile import router as profile_router
from artist_hub.api.releases import router as releases_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(events_router)
api_router.include_router(profile_router)
api_router.include_router(releases_router)
