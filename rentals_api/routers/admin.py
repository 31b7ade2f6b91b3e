"""
Administrator endpoints: admin accounts, owner management, listing approval and debug views.
Every route requires an administrator token.
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Path, Query, status
from rentals_api.config import settings
from rentals_api.models.property import PropertyStatus
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.services.admin import AdminService
from rentals_api.services.property import PropertyService
from rentals_api.services.maintenance import MaintenanceService
from rentals_api.schemas.user import AdminCreate, AdminResponse, AdminListResponse, StatusUpdate
from rentals_api.schemas.owner import (
    OwnerResponse,
    OwnerAdminResponse,
    OwnerListResponse,
    OwnerBulkRequest,
    OwnerBulkStatusRequest,
    BulkOperationResponse
)
from rentals_api.schemas.property import PropertyDetailResponse, PropertyListResponse, PropertyStatusUpdate
from rentals_api.schemas.error import error_responses
from rentals_api.utils.dependencies import (
    get_admin_service,
    get_property_service,
    get_maintenance_service,
    get_current_admin
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Administration"])


# Administrator accounts

@router.post(
    "/users",
    response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create administrator",
    responses=error_responses(401, 403, 409, 422)
)
async def create_admin(
    user_data: AdminCreate,
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    user = await admin_service.create_admin(user_data)
    return AdminResponse.model_validate(user.to_dict())


@router.get(
    "/users",
    response_model=AdminListResponse,
    status_code=status.HTTP_200_OK,
    summary="List administrators",
    responses=error_responses(401, 403)
)
async def list_admins(
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminListResponse:
    users = await admin_service.list_admins()
    return AdminListResponse(
        users=[AdminResponse.model_validate(user.to_dict()) for user in users],
        total=len(users)
    )


@router.patch(
    "/users/{user_id}/status",
    response_model=AdminResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate or deactivate an administrator",
    responses=error_responses(401, 403, 404, 422)
)
async def set_admin_status(
    status_data: StatusUpdate,
    user_id: int = Path(..., ge=1, description="Administrator ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    user = await admin_service.set_admin_active(user_id, status_data.is_active, current_admin.account)
    return AdminResponse.model_validate(user.to_dict())


# Owners

@router.get(
    "/owners",
    response_model=OwnerListResponse,
    status_code=status.HTTP_200_OK,
    summary="List owners",
    description="Every owner with the number of listings they registered",
    responses=error_responses(401, 403)
)
async def list_owners(
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> OwnerListResponse:
    rows = await admin_service.list_owners()
    return OwnerListResponse(
        owners=[
            OwnerAdminResponse.model_validate({**owner.to_dict(), "property_count": count})
            for owner, count in rows
        ],
        total=len(rows)
    )


@router.patch(
    "/owners/{owner_id}/status",
    response_model=OwnerResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate or deactivate an owner",
    responses=error_responses(401, 403, 404, 422)
)
async def set_owner_status(
    status_data: StatusUpdate,
    owner_id: str = Path(..., min_length=1, max_length=50, description="Owner ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> OwnerResponse:
    owner = await admin_service.set_owner_active(owner_id, status_data.is_active)
    return OwnerResponse.model_validate(owner.to_dict())


@router.post(
    "/owners/bulk-status",
    response_model=BulkOperationResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate or deactivate several owners",
    responses=error_responses(401, 403, 422)
)
async def bulk_set_owner_status(
    request_data: OwnerBulkStatusRequest,
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> BulkOperationResponse:
    affected = await admin_service.bulk_set_owner_active(request_data.owner_ids, request_data.is_active)
    status_text = "activated" if request_data.is_active else "deactivated"
    return BulkOperationResponse(affected=affected, message=f"{affected} owners {status_text}")


@router.delete(
    "/owners/{owner_id}",
    response_model=BulkOperationResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an owner",
    description="Delete an owner account. Their listings are kept without an owner.",
    responses=error_responses(401, 403, 404)
)
async def delete_owner(
    owner_id: str = Path(..., min_length=1, max_length=50, description="Owner ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> BulkOperationResponse:
    await admin_service.delete_owner(owner_id)
    return BulkOperationResponse(affected=1, message="Owner deleted")


@router.post(
    "/owners/bulk-delete",
    response_model=BulkOperationResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete several owners",
    responses=error_responses(401, 403, 422)
)
async def bulk_delete_owners(
    request_data: OwnerBulkRequest,
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    admin_service: AdminService = Depends(get_admin_service)
) -> BulkOperationResponse:
    affected = await admin_service.bulk_delete_owners(request_data.owner_ids)
    return BulkOperationResponse(affected=affected, message=f"{affected} owners deleted")


# Listings

@router.get(
    "/properties",
    response_model=PropertyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List every property",
    description="All listings, pending ones included, optionally filtered by status",
    responses=error_responses(401, 403, 422)
)
async def list_all_properties(
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="active or pending"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Number of properties per page"
    ),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    properties, total = await property_service.list_all_properties(status_filter, page=page, page_size=page_size)
    return PropertyListResponse.from_page(properties, total, page, page_size)


@router.patch(
    "/properties/{property_id}/status",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Approve or hide a property",
    responses=error_responses(401, 403, 404, 422)
)
async def set_property_status(
    status_data: PropertyStatusUpdate,
    property_id: str = Path(..., min_length=1, max_length=50, description="Property ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    property_obj = await property_service.update_status(property_id, status_data.status)
    return PropertyDetailResponse.model_validate(property_obj.to_dict())


# Debug

@router.get(
    "/debug/database",
    status_code=status.HTTP_200_OK,
    summary="Database statistics",
    description="Connectivity and row counts of every table",
    responses=error_responses(401, 403)
)
async def debug_database(
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    maintenance_service: MaintenanceService = Depends(get_maintenance_service)
) -> Dict[str, Any]:
    connected = await maintenance_service.check_connection()
    table_counts = await maintenance_service.table_counts() if connected else {}

    return {
        "connected": connected,
        "environment": settings.environment,
        "tables": table_counts,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get(
    "/debug/classes",
    status_code=status.HTTP_200_OK,
    summary="Property class usage",
    description="Every class with the number of tagged listings, and the active listings with their class names",
    responses=error_responses(401, 403)
)
async def debug_classes(
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    maintenance_service: MaintenanceService = Depends(get_maintenance_service)
) -> Dict[str, Any]:
    return await maintenance_service.class_report()
