"""API route modules."""

from renewals.api.routes.catalog import router as catalog_router
from renewals.api.routes.health import router as health_router
from renewals.api.routes.preferences import router as preferences_router
from renewals.api.routes.reminders import router as reminders_router

__all__ = [
    "health_router",
    "preferences_router",
    "reminders_router",
    "catalog_router",
]
