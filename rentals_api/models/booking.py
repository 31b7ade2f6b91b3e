"""
Availability calendar and reservation models.
Both reference properties only through foreign keys; ON DELETE CASCADE removes them with the listing.
"""

from sqlalchemy import String, Text, Integer, Boolean, Numeric, Date, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from rentals_api.database import Base
from rentals_api.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin, TimestampMixin, string_enum
import datetime
from decimal import Decimal
from typing import Optional
import enum


class ReservationStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class PropertyAvailability(CreatedAtMixin, Base):
    """
    One calendar day of a listing.
    A missing row means the day is available at the regular daily rate.
    """

    __tablename__ = "property_availability"

    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True
    )

    date: Mapped[datetime.date] = mapped_column(Date, primary_key=True)

    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    special_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=True,
        comment="Overrides the daily rate for this date"
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "is_available": self.is_available,
            "special_price": float(self.special_price) if self.special_price is not None else None,
            "notes": self.notes,
        }


class Reservation(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """Guest reservation request for a listing."""

    __tablename__ = "reservations"

    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_email: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    check_in_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    check_out_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False)

    total_amount: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)

    status: Mapped[ReservationStatus] = mapped_column(
        string_enum(ReservationStatus),
        nullable=False,
        default=ReservationStatus.PENDING
    )

    payment_status: Mapped[PaymentStatus] = mapped_column(
        string_enum(PaymentStatus),
        nullable=False,
        default=PaymentStatus.PENDING
    )

    special_requests: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def nights(self) -> int:
        return (self.check_out_date - self.check_in_date).days

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "property_id": self.property_id,
            "user_id": self.user_id,
            "guest_name": self.guest_name,
            "guest_email": self.guest_email,
            "guest_phone": self.guest_phone,
            "check_in_date": self.check_in_date.isoformat(),
            "check_out_date": self.check_out_date.isoformat(),
            "number_of_guests": self.number_of_guests,
            "total_amount": float(self.total_amount),
            "status": self.status.value,
            "payment_status": self.payment_status.value,
            "special_requests": self.special_requests,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


reservation_dates_index = Index(
    "idx_reservations_property_dates",
    Reservation.property_id,
    Reservation.status,
    Reservation.check_in_date,
    Reservation.check_out_date
)
