"""API routers for the dish nutrition application."""

from dishnutrition.routers.estimates import router as estimates_router

__all__ = [
    "estimates_router",
]
