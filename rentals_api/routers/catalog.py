"""
Lookup table endpoints for amenities and property classes.
Reads are public and return active entries; writes require an administrator.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, Query, status
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.services.catalog import CatalogService
from rentals_api.schemas.catalog import (
    AmenityCreate,
    AmenityUpdate,
    AmenityResponse,
    AmenityGroup,
    PropertyClassCreate,
    PropertyClassUpdate,
    PropertyClassResponse
)
from rentals_api.schemas.user import StatusUpdate
from rentals_api.schemas.error import error_responses
from rentals_api.utils.dependencies import get_catalog_service, get_current_admin, get_optional_account
from rentals_api.utils.exceptions import InsufficientPermissionsError


router = APIRouter(tags=["Catalog"])


def _check_inactive_access(include_inactive: bool, account) -> None:
    if include_inactive and (account is None or not account.is_admin):
        raise InsufficientPermissionsError("list inactive entries")


# Amenities

@router.get(
    "/amenities",
    response_model=List[AmenityResponse],
    status_code=status.HTTP_200_OK,
    summary="List amenities",
    description="Active amenities ordered by category and name. Administrators may include inactive ones."
)
async def list_amenities(
    include_inactive: bool = Query(False, description="Include deactivated entries (admin only)"),
    account=Depends(get_optional_account),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> List[AmenityResponse]:
    _check_inactive_access(include_inactive, account)
    amenities = await catalog_service.list_amenities(include_inactive=include_inactive)
    return [AmenityResponse.model_validate(amenity.to_dict()) for amenity in amenities]


@router.get(
    "/amenities/grouped",
    response_model=List[AmenityGroup],
    status_code=status.HTTP_200_OK,
    summary="Amenities by category"
)
async def list_amenities_grouped(
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> List[AmenityGroup]:
    grouped = await catalog_service.list_amenities_by_category()
    return [
        AmenityGroup(
            category=category,
            amenities=[AmenityResponse.model_validate(amenity.to_dict()) for amenity in amenities]
        )
        for category, amenities in grouped.items()
    ]


@router.post(
    "/amenities",
    response_model=AmenityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create amenity",
    responses=error_responses(401, 403, 409, 422)
)
async def create_amenity(
    amenity_data: AmenityCreate,
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> AmenityResponse:
    amenity = await catalog_service.create_amenity(amenity_data)
    return AmenityResponse.model_validate(amenity.to_dict())


@router.put(
    "/amenities/{amenity_id}",
    response_model=AmenityResponse,
    status_code=status.HTTP_200_OK,
    summary="Update amenity",
    responses=error_responses(401, 403, 404, 409, 422)
)
async def update_amenity(
    amenity_data: AmenityUpdate,
    amenity_id: int = Path(..., ge=1, description="Amenity ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> AmenityResponse:
    amenity = await catalog_service.update_amenity(amenity_id, amenity_data)
    return AmenityResponse.model_validate(amenity.to_dict())


@router.patch(
    "/amenities/{amenity_id}/status",
    response_model=AmenityResponse,
    status_code=status.HTTP_200_OK,
    summary="Deactivate or reactivate amenity",
    responses=error_responses(401, 403, 404, 422)
)
async def set_amenity_status(
    status_data: StatusUpdate,
    amenity_id: int = Path(..., ge=1, description="Amenity ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> AmenityResponse:
    amenity = await catalog_service.set_amenity_active(amenity_id, status_data.is_active)
    return AmenityResponse.model_validate(amenity.to_dict())


# Property classes

@router.get(
    "/property-classes",
    response_model=List[PropertyClassResponse],
    status_code=status.HTTP_200_OK,
    summary="List property classes",
    description="Active classes ordered by name. Administrators may include inactive ones."
)
async def list_property_classes(
    include_inactive: bool = Query(False, description="Include deactivated entries (admin only)"),
    account=Depends(get_optional_account),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> List[PropertyClassResponse]:
    _check_inactive_access(include_inactive, account)
    classes = await catalog_service.list_classes(include_inactive=include_inactive)
    return [PropertyClassResponse.model_validate(property_class.to_dict()) for property_class in classes]


@router.post(
    "/property-classes",
    response_model=PropertyClassResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property class",
    responses=error_responses(401, 403, 409, 422)
)
async def create_property_class(
    class_data: PropertyClassCreate,
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> PropertyClassResponse:
    property_class = await catalog_service.create_class(class_data)
    return PropertyClassResponse.model_validate(property_class.to_dict())


@router.put(
    "/property-classes/{class_id}",
    response_model=PropertyClassResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property class",
    responses=error_responses(401, 403, 404, 409, 422)
)
async def update_property_class(
    class_data: PropertyClassUpdate,
    class_id: int = Path(..., ge=1, description="Property class ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> PropertyClassResponse:
    property_class = await catalog_service.update_class(class_id, class_data)
    return PropertyClassResponse.model_validate(property_class.to_dict())


@router.patch(
    "/property-classes/{class_id}/status",
    response_model=PropertyClassResponse,
    status_code=status.HTTP_200_OK,
    summary="Deactivate or reactivate property class",
    responses=error_responses(401, 403, 404, 422)
)
async def set_property_class_status(
    status_data: StatusUpdate,
    class_id: int = Path(..., ge=1, description="Property class ID"),
    current_admin: AuthenticatedAccount = Depends(get_current_admin),
    catalog_service: CatalogService = Depends(get_catalog_service)
) -> PropertyClassResponse:
    property_class = await catalog_service.set_class_active(class_id, status_data.is_active)
    return PropertyClassResponse.model_validate(property_class.to_dict())
