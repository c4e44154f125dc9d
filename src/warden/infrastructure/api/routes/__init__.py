"""API routes for Warden."""

from warden.infrastructure.api.routes.auth_router import router as auth_router
from warden.infrastructure.api.routes.health_router import router as health_router

__all__ = [
    "auth_router",
    "health_router",
]
