"""
API route handlers for the Rentals API.
Provides organized routing for different API endpoints.
"""

from .auth import router as auth_router
from .owners import router as owners_router
from .admin import router as admin_router
from .properties import router as properties_router
from .reservations import router as reservations_router
from .catalog import router as catalog_router
from .upload import router as upload_router

__all__ = [
    "auth_router",
    "owners_router",
    "admin_router",
    "properties_router",
    "reservations_router",
    "catalog_router",
    "upload_router"
]
