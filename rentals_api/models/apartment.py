"""
Apartment units of a listing and the bed layout of each room.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from rentals_api.database import Base
from rentals_api.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin, TimestampMixin
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from rentals_api.models.property import Property


def _flag() -> Mapped[bool]:
    return mapped_column(Boolean, nullable=False, default=False)


def _count() -> Mapped[int]:
    return mapped_column(Integer, nullable=False, default=0)


class PropertyApartment(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """A rentable unit inside a listing (a building may offer several)."""

    __tablename__ = "property_apartments"

    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_bathrooms: Mapped[int] = _count()

    has_living_room: Mapped[bool] = _flag()
    living_room_has_sofa_bed: Mapped[bool] = _flag()
    has_kitchen: Mapped[bool] = _flag()
    kitchen_has_stove: Mapped[bool] = _flag()
    kitchen_has_fridge: Mapped[bool] = _flag()
    kitchen_has_minibar: Mapped[bool] = _flag()
    has_balcony: Mapped[bool] = _flag()
    balcony_has_sea_view: Mapped[bool] = _flag()
    has_crib: Mapped[bool] = _flag()

    property_rel: Mapped["Property"] = relationship(back_populates="apartments")

    rooms: Mapped[List["ApartmentRoom"]] = relationship(
        back_populates="apartment",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ApartmentRoom.room_number"
    )

    FLAG_FIELDS = (
        "has_living_room", "living_room_has_sofa_bed", "has_kitchen", "kitchen_has_stove",
        "kitchen_has_fridge", "kitchen_has_minibar", "has_balcony", "balcony_has_sea_view",
        "has_crib",
    )

    def to_dict(self) -> dict:
        result = {"id": self.id, "name": self.name, "total_bathrooms": self.total_bathrooms}
        result.update({name: getattr(self, name) for name in self.FLAG_FIELDS})
        result["rooms"] = [room.to_dict() for room in self.rooms]
        return result


class ApartmentRoom(IntegerPrimaryKeyMixin, CreatedAtMixin, Base):
    """Bedroom of an apartment with its bed counts."""

    __tablename__ = "apartment_rooms"

    apartment_id: Mapped[int] = mapped_column(
        ForeignKey("property_apartments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    room_number: Mapped[int] = mapped_column(Integer, nullable=False)
    double_beds: Mapped[int] = _count()
    large_beds: Mapped[int] = _count()
    extra_large_beds: Mapped[int] = _count()
    single_beds: Mapped[int] = _count()
    sofa_beds: Mapped[int] = _count()

    apartment: Mapped[PropertyApartment] = relationship(back_populates="rooms")

    BED_FIELDS = ("double_beds", "large_beds", "extra_large_beds", "single_beds", "sofa_beds")

    @property
    def total_beds(self) -> int:
        return sum(getattr(self, name) or 0 for name in self.BED_FIELDS)

    def to_dict(self) -> dict:
        result = {"room_number": self.room_number}
        result.update({name: getattr(self, name) for name in self.BED_FIELDS})
        return result
