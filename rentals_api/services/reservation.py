"""
Reservation service: availability calendar, availability checks, pricing and reservation workflow.
"""

from typing import Optional, List, Dict, Any
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.repositories.booking import AvailabilityRepository, ReservationRepository
from rentals_api.models.booking import PropertyAvailability, Reservation, ReservationStatus, PaymentStatus
from rentals_api.models.property import Property
from rentals_api.schemas.reservation import ReservationCreate, ReservationStatusUpdate, AvailabilityUpdate
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.services.property import PropertyService
from rentals_api.utils.exceptions import (
    APIException,
    NotFoundError,
    ValidationError,
    BusinessRuleViolationError,
    DatesUnavailableError,
    BadRequestError,
)
import logging

logger = logging.getLogger(__name__)

MAX_CALENDAR_DAYS = 366


class AvailabilityResult:
    """Outcome of an availability check for a stay."""

    def __init__(
        self,
        available: bool,
        nights: int,
        total_amount: Optional[Decimal] = None,
        reason: Optional[str] = None
    ):
        self.available = available
        self.nights = nights
        self.total_amount = total_amount
        self.reason = reason


class ReservationService:
    """
    Availability and reservations of a listing.
    A stay runs from check-in to check-out; the nights are the days in [check_in, check_out).
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.availability_repo = AvailabilityRepository(db_session)
        self.reservation_repo = ReservationRepository(db_session)
        self.property_service = PropertyService(db_session)

    async def get_calendar(self, property_id: str, start_date: date, end_date: date) -> List[PropertyAvailability]:
        """Stored calendar days of a visible listing between two dates, inclusive."""
        self._validate_calendar_range(start_date, end_date)
        await self.property_service.get_property(property_id)
        return await self.availability_repo.get_range(property_id, start_date, end_date)

    async def set_availability(
        self,
        property_id: str,
        availability: AvailabilityUpdate,
        account: AuthenticatedAccount
    ) -> List[PropertyAvailability]:
        """Insert or overwrite calendar days of a listing the account manages."""
        await self.property_service.get_manageable_property(property_id, account)

        try:
            days = await self.availability_repo.upsert(
                property_id,
                [day.model_dump() for day in availability.days]
            )
            logger.info(f"Availability updated by {account.role.value} {account.id}: {len(days)} days of {property_id}")
            return days
        except Exception as e:
            logger.error(f"Failed to set availability for property {property_id}: {e}")
            raise BadRequestError(f"Failed to update availability: {str(e)}")

    async def check_availability(self, property_id: str, check_in_date: date, check_out_date: date) -> AvailabilityResult:
        """
        A stay is available when no confirmed reservation overlaps it and no
        calendar day among its nights is blocked.
        """
        property_obj = await self.property_service.get_property(property_id)
        return await self._evaluate_stay(property_obj, check_in_date, check_out_date)

    async def create_reservation(self, property_id: str, reservation_data: ReservationCreate) -> Reservation:
        """
        Create a pending reservation for a visible listing.

        Raises:
            BusinessRuleViolationError: If guests or stay length break the listing rules
            DatesUnavailableError: If the dates are taken or blocked
        """
        property_obj = await self.property_service.get_property(property_id)
        check_in, check_out = reservation_data.check_in_date, reservation_data.check_out_date

        if reservation_data.number_of_guests > property_obj.max_guests:
            raise BusinessRuleViolationError(
                "max_guests",
                f"This property accepts at most {property_obj.max_guests} guests"
            )

        result = await self._evaluate_stay(property_obj, check_in, check_out)

        if result.nights < property_obj.minimum_stay:
            raise BusinessRuleViolationError(
                "minimum_stay",
                f"Minimum stay is {property_obj.minimum_stay} nights"
            )

        if property_obj.maximum_stay is not None and result.nights > property_obj.maximum_stay:
            raise BusinessRuleViolationError(
                "maximum_stay",
                f"Maximum stay is {property_obj.maximum_stay} days"
            )

        if not result.available:
            raise DatesUnavailableError(result.reason or "Property is not available for the selected dates")

        if result.total_amount is None:
            raise BusinessRuleViolationError("pricing", "This property has no daily rate")

        try:
            create_data = reservation_data.model_dump()
            create_data.update({
                "property_id": property_id,
                "total_amount": result.total_amount,
                "status": ReservationStatus.PENDING,
                "payment_status": PaymentStatus.PENDING,
            })
            reservation = await self.reservation_repo.create(create_data)

            logger.info(
                f"Reservation {reservation.id} created for property {property_id}: "
                f"{check_in} to {check_out}, total {result.total_amount}"
            )
            return reservation

        except Exception as e:
            logger.error(f"Failed to create reservation for property {property_id}: {e}")
            raise BadRequestError(f"Failed to create reservation: {str(e)}")

    async def list_reservations(
        self,
        property_id: str,
        account: AuthenticatedAccount,
        status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        await self.property_service.get_manageable_property(property_id, account)
        return await self.reservation_repo.list_for_property(property_id, status=status)

    async def update_status(
        self,
        reservation_id: int,
        status_data: ReservationStatusUpdate,
        account: AuthenticatedAccount
    ) -> Reservation:
        """
        Change a reservation's status (and optionally its payment status).
        Confirming re-checks the dates against the other confirmed reservations.
        """
        try:
            reservation = await self.reservation_repo.get_by_id(reservation_id)
            if reservation is None:
                raise NotFoundError("Reservation", reservation_id)

            await self.property_service.get_manageable_property(reservation.property_id, account)

            if status_data.status == ReservationStatus.CONFIRMED and reservation.status != ReservationStatus.CONFIRMED:
                if await self.reservation_repo.has_confirmed_overlap(
                    reservation.property_id,
                    reservation.check_in_date,
                    reservation.check_out_date,
                    exclude_id=reservation.id
                ):
                    raise DatesUnavailableError("Dates overlap with another confirmed reservation")

            if status_data.payment_status is not None:
                reservation.payment_status = status_data.payment_status

            updated = await self.reservation_repo.set_status(reservation, status_data.status)
            logger.info(f"Reservation {reservation_id} set to {status_data.status.value} by {account.role.value} {account.id}")
            return updated

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update reservation {reservation_id}: {e}")
            raise BadRequestError(f"Failed to update reservation: {str(e)}")

    # Private helper methods

    async def _evaluate_stay(self, property_obj: Property, check_in: date, check_out: date) -> AvailabilityResult:
        if check_out <= check_in:
            raise ValidationError("check_out_date must be after check_in_date")

        nights = (check_out - check_in).days
        if nights > MAX_CALENDAR_DAYS:
            raise ValidationError(f"A stay cannot be longer than {MAX_CALENDAR_DAYS} nights")

        if await self.reservation_repo.has_confirmed_overlap(property_obj.id, check_in, check_out):
            return AvailabilityResult(False, nights, reason="Dates overlap with a confirmed reservation")

        calendar = {
            day.date: day
            for day in await self.availability_repo.get_range(property_obj.id, check_in, check_out - timedelta(days=1))
        }

        blocked = sorted(day for day, entry in calendar.items() if not entry.is_available)
        if blocked:
            return AvailabilityResult(
                False,
                nights,
                reason=f"Property is not available on {blocked[0].isoformat()}"
            )

        return AvailabilityResult(True, nights, total_amount=self._price_stay(property_obj, check_in, nights, calendar))

    @staticmethod
    def _price_stay(
        property_obj: Property,
        check_in: date,
        nights: int,
        calendar: Dict[date, Any]
    ) -> Optional[Decimal]:
        """Sum of each night's special price, falling back to the daily rate."""
        if property_obj.pricing is None:
            return None

        daily_rate = Decimal(property_obj.pricing.daily_rate)
        total = Decimal("0")
        for offset in range(nights):
            entry = calendar.get(check_in + timedelta(days=offset))
            if entry is not None and entry.special_price is not None:
                total += Decimal(entry.special_price)
            else:
                total += daily_rate
        return total.quantize(Decimal("0.01"))

    @staticmethod
    def _validate_calendar_range(start_date: date, end_date: date) -> None:
        if end_date < start_date:
            raise ValidationError("end_date cannot be before start_date")
        if (end_date - start_date).days >= MAX_CALENDAR_DAYS:
            raise ValidationError(f"Calendar range cannot exceed {MAX_CALENDAR_DAYS} days")
