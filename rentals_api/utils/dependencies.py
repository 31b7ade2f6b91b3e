"""
FastAPI dependency injection utilities for authentication and service construction.
Provides reusable dependencies for route protection and account extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.database import get_db
from rentals_api.services.auth import AuthService, AuthenticatedAccount
from rentals_api.services.property import PropertyService
from rentals_api.services.owner import OwnerService
from rentals_api.services.admin import AdminService
from rentals_api.services.catalog import CatalogService
from rentals_api.services.reservation import ReservationService
from rentals_api.services.upload import UploadService
from rentals_api.services.maintenance import MaintenanceService
from rentals_api.utils.exceptions import (
    APIException,
    UnauthorizedError,
    InsufficientPermissionsError
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_owner_service(db: AsyncSession = Depends(get_db)) -> OwnerService:
    return OwnerService(db)


async def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


async def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


async def get_reservation_service(db: AsyncSession = Depends(get_db)) -> ReservationService:
    return ReservationService(db)


async def get_upload_service() -> UploadService:
    return UploadService()


async def get_maintenance_service(db: AsyncSession = Depends(get_db)) -> MaintenanceService:
    return MaintenanceService(db)


async def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthenticatedAccount:
    """
    Get the owner or administrator behind the bearer token.

    Raises:
        UnauthorizedError: If no token provided or token is invalid
        TokenExpiredError: If token is expired
        InactiveAccountError: If the account is deactivated
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    try:
        return await auth_service.get_current_account(credentials.credentials)
    except APIException:
        raise
    except Exception as e:
        raise UnauthorizedError(f"Authentication failed: {str(e)}")


async def get_current_owner(
    account: AuthenticatedAccount = Depends(get_current_account)
) -> AuthenticatedAccount:
    """
    Raises:
        InsufficientPermissionsError: If the token does not belong to an owner
    """
    if not account.is_owner:
        raise InsufficientPermissionsError("access owner resources")
    return account


async def get_current_admin(
    account: AuthenticatedAccount = Depends(get_current_account)
) -> AuthenticatedAccount:
    """
    Raises:
        InsufficientPermissionsError: If the token does not belong to an administrator
    """
    if not account.is_admin:
        raise InsufficientPermissionsError("access admin resources")
    return account


# Optional authentication dependency (public endpoints that show more to the listing's manager)
async def get_optional_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[AuthenticatedAccount]:
    """Account behind a valid token, otherwise None."""
    if not credentials:
        return None

    try:
        return await auth_service.get_current_account(credentials.credentials)
    except Exception:
        # Invalid or expired tokens fall back to anonymous access
        return None
