"""
Repositories for the availability calendar and guest reservations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from rentals_api.repositories.base import BaseRepository
from rentals_api.models.booking import PropertyAvailability, Reservation, ReservationStatus
from datetime import date
from typing import Optional, List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class AvailabilityRepository:
    """Calendar rows are keyed by (property_id, date), so this does not extend BaseRepository."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_range(self, property_id: str, start_date: date, end_date: date) -> List[PropertyAvailability]:
        """Stored calendar rows between start_date and end_date, both inclusive."""
        query = (
            select(PropertyAvailability)
            .where(
                PropertyAvailability.property_id == property_id,
                PropertyAvailability.date >= start_date,
                PropertyAvailability.date <= end_date,
            )
            .order_by(PropertyAvailability.date)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def upsert(self, property_id: str, entries: List[Dict[str, Any]]) -> List[PropertyAvailability]:
        """
        Insert or overwrite calendar days in one transaction.

        Args:
            property_id: Listing the days belong to
            entries: Dicts with date, is_available and optional special_price/notes
        """
        try:
            saved = []
            for entry in entries:
                day = await self.db.get(PropertyAvailability, (property_id, entry["date"]))
                if day is None:
                    day = PropertyAvailability(property_id=property_id, date=entry["date"])
                    self.db.add(day)
                day.is_available = entry.get("is_available", True)
                day.special_price = entry.get("special_price")
                day.notes = entry.get("notes")
                saved.append(day)

            await self.db.commit()
            logger.info(f"Saved {len(saved)} availability days for property {property_id}")
            return saved
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to save availability for property {property_id}: {e}")
            raise


class ReservationRepository(BaseRepository[Reservation]):
    """Repository for guest reservations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Reservation, db)

    async def list_for_property(
        self,
        property_id: str,
        status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        query = select(Reservation).where(Reservation.property_id == property_id)
        if status is not None:
            query = query.where(Reservation.status == status)
        result = await self.db.execute(query.order_by(Reservation.check_in_date, Reservation.id))
        return list(result.scalars().all())

    async def has_confirmed_overlap(
        self,
        property_id: str,
        check_in_date: date,
        check_out_date: date,
        exclude_id: Optional[int] = None
    ) -> bool:
        """
        Whether a confirmed reservation touches the requested dates.

        Ranges are compared inclusively, so a stay that starts on another
        stay's check-out day counts as an overlap.
        """
        query = select(func.count(Reservation.id)).where(
            Reservation.property_id == property_id,
            Reservation.status == ReservationStatus.CONFIRMED,
            Reservation.check_in_date <= check_out_date,
            Reservation.check_out_date >= check_in_date,
        )
        if exclude_id is not None:
            query = query.where(Reservation.id != exclude_id)

        result = await self.db.execute(query)
        return (result.scalar() or 0) > 0

    async def set_status(self, reservation: Reservation, status: ReservationStatus) -> Reservation:
        reservation_id = reservation.id
        try:
            reservation.status = status
            await self.db.commit()
            await self.db.refresh(reservation)
            logger.info(f"Reservation {reservation_id} is now {status.value}")
            return reservation
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update reservation {reservation_id}: {e}")
            raise
