"""
Service layer for business logic implementation.
Contains services for authentication, accounts, listings, catalog, reservations, uploads and error handling.
"""

from .auth import AuthService, AuthenticatedAccount
from .owner import OwnerService
from .admin import AdminService
from .property import PropertyService
from .catalog import CatalogService
from .reservation import ReservationService
from .upload import UploadService
from .maintenance import MaintenanceService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "AuthenticatedAccount",
    "OwnerService",
    "AdminService",
    "PropertyService",
    "CatalogService",
    "ReservationService",
    "UploadService",
    "MaintenanceService",
    "ErrorHandlerService"
]
