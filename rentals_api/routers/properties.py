"""
Property listing API endpoints: the public catalog, the aggregate create/update/delete,
homepage curation by class, availability calendars and guest reservations.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from fastapi.responses import Response
from typing import Optional
from datetime import date
from rentals_api.config import settings
from rentals_api.models.booking import ReservationStatus
from rentals_api.repositories.property import ListingFilters
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.services.property import PropertyService
from rentals_api.services.reservation import ReservationService
from rentals_api.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyDetailResponse,
    PropertyListResponse,
    PropertySummaryResponse,
    FeaturedPropertiesResponse
)
from rentals_api.schemas.reservation import (
    AvailabilityUpdate,
    AvailabilityCalendarResponse,
    AvailabilityCheckResponse,
    ReservationCreate,
    ReservationResponse,
    ReservationListResponse
)
from rentals_api.schemas.error import error_responses
from rentals_api.utils.dependencies import (
    get_current_account,
    get_optional_account,
    get_property_service,
    get_reservation_service
)
from rentals_api.utils.exceptions import APIException, BadRequestError


router = APIRouter(prefix="/properties", tags=["Properties"])

PROPERTY_ID_PATH = Path(..., min_length=1, max_length=50, description="Property ID")


@router.post(
    "",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description=(
        "Create a listing together with its pricing, location, images, amenities, classes, "
        "nearby places, apartments, house rules and payment methods. Owners create pending "
        "listings, administrators create active ones."
    ),
    responses=error_responses(400, 401, 422)
)
async def create_property(
    property_data: PropertyCreate,
    account: AuthenticatedAccount = Depends(get_current_account),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    """
    Create a new property listing.

    Raises:
        ValidationError: If an amenity or class id does not exist
        BadRequestError: If the write fails
    """
    property_obj = await property_service.create_property(property_data, account)
    return PropertyDetailResponse.model_validate(property_obj.to_dict())


@router.get(
    "",
    response_model=PropertyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List active properties",
    description="Public catalog of active listings with optional filters"
)
async def list_properties(
    city: Optional[str] = Query(None, description="City, case-insensitive partial match"),
    property_style: Optional[str] = Query(None, description="Property style, case-insensitive"),
    popular_destination: Optional[str] = Query(None, description="Popular destination"),
    class_name: Optional[str] = Query(None, description="Property class name"),
    min_guests: Optional[int] = Query(None, ge=1, le=100, description="Minimum guest capacity"),
    allows_pets: Optional[bool] = Query(None, description="Pet-friendly listings only"),

    # Pagination
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Number of properties per page"
    ),

    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    try:
        filters = ListingFilters(
            city=city,
            property_style=property_style,
            popular_destination=popular_destination,
            class_name=class_name,
            min_guests=min_guests,
            allows_pets=allows_pets
        )
        properties, total_count = await property_service.list_active_properties(
            filters, page=page, page_size=page_size
        )
        return PropertyListResponse.from_page(properties, total_count, page, page_size)

    except APIException:
        raise
    except Exception as e:
        raise BadRequestError(f"Failed to search properties: {str(e)}")


@router.get(
    "/featured/{class_name}",
    response_model=FeaturedPropertiesResponse,
    status_code=status.HTTP_200_OK,
    summary="Properties by class",
    description="Active listings tagged with a property class, newest first. Used by the homepage banners."
)
async def get_featured_properties(
    class_name: str = Path(..., min_length=1, max_length=100, description="Property class name"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum number of listings"),
    property_service: PropertyService = Depends(get_property_service)
) -> FeaturedPropertiesResponse:
    properties = await property_service.get_properties_by_class(class_name, limit=limit)
    return FeaturedPropertiesResponse(
        class_name=class_name,
        properties=[PropertySummaryResponse.model_validate(prop.to_summary_dict()) for prop in properties],
        total=len(properties)
    )


@router.get(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property details",
    description="Full listing. Pending listings are visible only to their owner and to administrators.",
    responses=error_responses(404)
)
async def get_property(
    property_id: str = PROPERTY_ID_PATH,
    account: Optional[AuthenticatedAccount] = Depends(get_optional_account),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    property_obj = await property_service.get_property(property_id, account)
    return PropertyDetailResponse.model_validate(property_obj.to_dict())


@router.put(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description=(
        "Update root fields and sections. A supplied list replaces the stored one, "
        "an omitted section is left untouched."
    ),
    responses=error_responses(400, 401, 403, 404, 422)
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: str = PROPERTY_ID_PATH,
    account: AuthenticatedAccount = Depends(get_current_account),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    """
    Update property details.

    Raises:
        PropertyNotFoundError: If property doesn't exist
        PropertyOwnershipError: If an owner edits someone else's listing
        ValidationError: If update data is invalid
    """
    updated_property = await property_service.update_property(property_id, property_data, account)
    return PropertyDetailResponse.model_validate(updated_property.to_dict())


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Delete a listing with every related row and its stored images.",
    responses=error_responses(401, 403, 404)
)
async def delete_property(
    property_id: str = PROPERTY_ID_PATH,
    account: AuthenticatedAccount = Depends(get_current_account),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    await property_service.delete_property(property_id, account)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Availability

@router.get(
    "/{property_id}/availability",
    response_model=AvailabilityCalendarResponse,
    status_code=status.HTTP_200_OK,
    summary="Availability calendar",
    description="Stored calendar days between two dates, inclusive. Days without an entry are available.",
    responses=error_responses(404, 422)
)
async def get_availability(
    property_id: str = PROPERTY_ID_PATH,
    start_date: date = Query(..., description="First day (YYYY-MM-DD)"),
    end_date: date = Query(..., description="Last day (YYYY-MM-DD)"),
    reservation_service: ReservationService = Depends(get_reservation_service)
) -> AvailabilityCalendarResponse:
    days = await reservation_service.get_calendar(property_id, start_date, end_date)
    return AvailabilityCalendarResponse(
        property_id=property_id,
        start_date=start_date,
        end_date=end_date,
        days=[day.to_dict() for day in days]
    )


@router.put(
    "/{property_id}/availability",
    response_model=AvailabilityCalendarResponse,
    status_code=status.HTTP_200_OK,
    summary="Set availability",
    description="Insert or overwrite calendar days (available flag, special price, notes).",
    responses=error_responses(401, 403, 404, 422)
)
async def set_availability(
    availability: AvailabilityUpdate,
    property_id: str = PROPERTY_ID_PATH,
    account: AuthenticatedAccount = Depends(get_current_account),
    reservation_service: ReservationService = Depends(get_reservation_service)
) -> AvailabilityCalendarResponse:
    days = await reservation_service.set_availability(property_id, availability, account)
    dates = [day.date for day in availability.days]
    return AvailabilityCalendarResponse(
        property_id=property_id,
        start_date=min(dates),
        end_date=max(dates),
        days=[day.to_dict() for day in days]
    )


@router.get(
    "/{property_id}/availability/check",
    response_model=AvailabilityCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Check a stay",
    description="Whether the dates are free, and the price of the stay when they are.",
    responses=error_responses(404, 422)
)
async def check_availability(
    property_id: str = PROPERTY_ID_PATH,
    check_in_date: date = Query(..., description="Check-in day (YYYY-MM-DD)"),
    check_out_date: date = Query(..., description="Check-out day (YYYY-MM-DD)"),
    reservation_service: ReservationService = Depends(get_reservation_service)
) -> AvailabilityCheckResponse:
    result = await reservation_service.check_availability(property_id, check_in_date, check_out_date)
    return AvailabilityCheckResponse(
        property_id=property_id,
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        nights=result.nights,
        available=result.available,
        reason=result.reason,
        total_amount=float(result.total_amount) if result.total_amount is not None else None
    )


# Reservations

@router.post(
    "/{property_id}/reservations",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a reservation",
    description="Public. Creates a pending reservation priced from the calendar and the daily rate.",
    responses=error_responses(400, 404, 409, 422)
)
async def create_reservation(
    reservation_data: ReservationCreate,
    property_id: str = PROPERTY_ID_PATH,
    reservation_service: ReservationService = Depends(get_reservation_service)
) -> ReservationResponse:
    """
    Raises:
        BusinessRuleViolationError: If guests or stay length break the listing rules
        DatesUnavailableError: If the dates are taken or blocked
    """
    reservation = await reservation_service.create_reservation(property_id, reservation_data)
    return ReservationResponse.model_validate(reservation.to_dict())


@router.get(
    "/{property_id}/reservations",
    response_model=ReservationListResponse,
    status_code=status.HTTP_200_OK,
    summary="List reservations",
    responses=error_responses(401, 403, 404)
)
async def list_reservations(
    property_id: str = PROPERTY_ID_PATH,
    status_filter: Optional[ReservationStatus] = Query(None, alias="status", description="Reservation status"),
    account: AuthenticatedAccount = Depends(get_current_account),
    reservation_service: ReservationService = Depends(get_reservation_service)
) -> ReservationListResponse:
    reservations = await reservation_service.list_reservations(property_id, account, status=status_filter)
    return ReservationListResponse(
        reservations=[ReservationResponse.model_validate(reservation.to_dict()) for reservation in reservations],
        total=len(reservations)
    )
