"""
Reservation workflow endpoints for listing owners and administrators.
"""

from fastapi import APIRouter, Depends, Path, status
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.services.reservation import ReservationService
from rentals_api.schemas.reservation import ReservationStatusUpdate, ReservationResponse
from rentals_api.schemas.error import error_responses
from rentals_api.utils.dependencies import get_current_account, get_reservation_service


router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.patch(
    "/{reservation_id}/status",
    response_model=ReservationResponse,
    status_code=status.HTTP_200_OK,
    summary="Update reservation status",
    description="Confirm, cancel or complete a reservation. Confirming re-checks the dates.",
    responses=error_responses(401, 403, 404, 409, 422)
)
async def update_reservation_status(
    status_data: ReservationStatusUpdate,
    reservation_id: int = Path(..., ge=1, description="Reservation ID"),
    account: AuthenticatedAccount = Depends(get_current_account),
    reservation_service: ReservationService = Depends(get_reservation_service)
) -> ReservationResponse:
    """
    Raises:
        NotFoundError: If the reservation does not exist
        PropertyOwnershipError: If the listing belongs to another owner
        DatesUnavailableError: If confirming would double-book the listing
    """
    reservation = await reservation_service.update_status(reservation_id, status_data, account)
    return ReservationResponse.model_validate(reservation.to_dict())
