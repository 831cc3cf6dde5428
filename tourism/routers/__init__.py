"""API routers package."""

from tourism.routers import auth, guides

__all__ = [
    "auth",
    "guides",
]
