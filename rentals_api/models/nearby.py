"""
Nearby points of interest of a listing.
Places, beaches, airports and restaurants share the same shape: a name and a free-text distance.
"""

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, declared_attr
from rentals_api.database import Base
from rentals_api.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin


class NearbyMixin(IntegerPrimaryKeyMixin, CreatedAtMixin):
    """Columns shared by every nearby-point table."""

    @declared_attr
    def property_id(cls) -> Mapped[str]:
        return mapped_column(
            ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    distance: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Human readable distance, e.g. '2,5 km'"
    )

    def to_dict(self) -> dict:
        return {"name": self.name, "distance": self.distance}


class PropertyNearbyPlace(NearbyMixin, Base):
    __tablename__ = "property_nearby_places"


class PropertyNearbyBeach(NearbyMixin, Base):
    __tablename__ = "property_nearby_beaches"


class PropertyNearbyAirport(NearbyMixin, Base):
    __tablename__ = "property_nearby_airports"


class PropertyNearbyRestaurant(NearbyMixin, Base):
    __tablename__ = "property_nearby_restaurants"
