"""API routers."""

from artist_hub.api.router import api_router

__all__ = ["api_router"]
