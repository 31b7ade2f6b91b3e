"""
Property model, the root of the listing aggregate.
Owns pricing, location, images, amenity and class links, nearby points, apartments,
house rules and payment methods. Every child row is removed together with the property.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from rentals_api.database import Base
from rentals_api.models.mixins import NanoidPrimaryKeyMixin, TimestampMixin, string_enum
from decimal import Decimal
import enum
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rentals_api.models.owner import Owner
    from rentals_api.models.image import PropertyImage
    from rentals_api.models.catalog import Amenity, PropertyClass, PropertyAmenity, PropertyPropertyClass
    from rentals_api.models.details import (
        PropertyPricing, PropertyLocation, PropertyHouseRules, PropertyPaymentMethods
    )
    from rentals_api.models.nearby import (
        PropertyNearbyPlace, PropertyNearbyBeach, PropertyNearbyAirport, PropertyNearbyRestaurant
    )
    from rentals_api.models.apartment import PropertyApartment


class PropertyStatus(str, enum.Enum):
    """Listing status. Only active listings are visible to the public."""
    ACTIVE = "active"
    PENDING = "pending"


# Children owned by the aggregate: deleted with the property and replaced wholesale on update.
_OWNED = dict(cascade="all, delete-orphan", lazy="selectin")


class Property(NanoidPrimaryKeyMixin, TimestampMixin, Base):
    """
    Rental listing registered by an owner or an administrator.
    """

    __tablename__ = "properties"

    owner_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("owners.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Owner of the listing; null once the owner account is removed"
    )

    # Basic information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Listing title"
    )

    short_description: Mapped[str] = mapped_column(Text, nullable=False)
    full_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    about_building: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Capacity and attributes
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False)
    parking_spaces: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    area_m2: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=8, scale=2),
        nullable=True,
        comment="Area in square meters"
    )

    allows_pets: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    property_style: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)

    property_class: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="Normal",
        comment="Free-text class label; curation uses the property_classes links"
    )

    bed_types: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Stay rules
    minimum_stay: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        comment="Minimum stay in nights"
    )

    maximum_stay: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Maximum stay in days"
    )

    check_in_time: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    check_out_time: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    pet_policy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancellation_policy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    external_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    status: Mapped[PropertyStatus] = mapped_column(
        string_enum(PropertyStatus),
        nullable=False,
        default=PropertyStatus.PENDING,
        index=True,
        comment="Listing status - active or pending approval"
    )

    # Relationships
    owner: Mapped[Optional["Owner"]] = relationship(lazy="selectin")

    pricing: Mapped[Optional["PropertyPricing"]] = relationship(
        back_populates="property_rel", uselist=False, **_OWNED
    )
    location: Mapped[Optional["PropertyLocation"]] = relationship(
        back_populates="property_rel", uselist=False, **_OWNED
    )
    house_rules: Mapped[Optional["PropertyHouseRules"]] = relationship(
        back_populates="property_rel", uselist=False, **_OWNED
    )
    payment_methods: Mapped[Optional["PropertyPaymentMethods"]] = relationship(
        back_populates="property_rel", uselist=False, **_OWNED
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        back_populates="property_rel",
        order_by="PropertyImage.display_order",
        **_OWNED
    )

    amenity_links: Mapped[List["PropertyAmenity"]] = relationship(back_populates="property_rel", **_OWNED)
    class_links: Mapped[List["PropertyPropertyClass"]] = relationship(back_populates="property_rel", **_OWNED)

    nearby_places: Mapped[List["PropertyNearbyPlace"]] = relationship(**_OWNED)
    nearby_beaches: Mapped[List["PropertyNearbyBeach"]] = relationship(**_OWNED)
    nearby_airports: Mapped[List["PropertyNearbyAirport"]] = relationship(**_OWNED)
    nearby_restaurants: Mapped[List["PropertyNearbyRestaurant"]] = relationship(**_OWNED)

    apartments: Mapped[List["PropertyApartment"]] = relationship(back_populates="property_rel", **_OWNED)

    NEARBY_KINDS = ("nearby_places", "nearby_beaches", "nearby_airports", "nearby_restaurants")

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title[:30]}, status={self.status})>"

    @property
    def is_active(self) -> bool:
        return self.status == PropertyStatus.ACTIVE

    @property
    def main_image(self) -> Optional["PropertyImage"]:
        """The cover image, falling back to the first image in display order."""
        for image in self.images:
            if image.is_main:
                return image
        return self.images[0] if self.images else None

    @property
    def amenities(self) -> List["Amenity"]:
        return [link.amenity for link in self.amenity_links]

    @property
    def classes(self) -> List["PropertyClass"]:
        return [link.property_class for link in self.class_links]

    def to_summary_dict(self) -> dict:
        """Card data for listings: root fields, price, city and cover image."""
        main_image = self.main_image
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "short_description": self.short_description,
            "max_guests": self.max_guests,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "allows_pets": self.allows_pets,
            "property_style": self.property_style,
            "status": self.status.value,
            "daily_rate": float(self.pricing.daily_rate) if self.pricing else None,
            "monthly_rent": float(self.pricing.monthly_rent) if self.pricing else None,
            "city": self.location.city if self.location else None,
            "neighborhood": self.location.neighborhood if self.location else None,
            "popular_destination": self.location.popular_destination if self.location else None,
            "main_image_url": main_image.image_url if main_image else None,
            "class_names": [property_class.name for property_class in self.classes],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_dict(self) -> dict:
        """Full aggregate as returned by the listing detail endpoint."""
        result = {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "short_description": self.short_description,
            "full_description": self.full_description,
            "about_building": self.about_building,
            "max_guests": self.max_guests,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "parking_spaces": self.parking_spaces,
            "area_m2": float(self.area_m2) if self.area_m2 is not None else None,
            "allows_pets": self.allows_pets,
            "property_style": self.property_style,
            "property_class": self.property_class,
            "bed_types": self.bed_types,
            "minimum_stay": self.minimum_stay,
            "maximum_stay": self.maximum_stay,
            "check_in_time": self.check_in_time,
            "check_out_time": self.check_out_time,
            "pet_policy": self.pet_policy,
            "cancellation_policy": self.cancellation_policy,
            "external_link": self.external_link,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "owner": self.owner.to_public_dict() if self.owner else None,
            "pricing": self.pricing.to_dict() if self.pricing else None,
            "location": self.location.to_dict() if self.location else None,
            "house_rules": self.house_rules.to_dict() if self.house_rules else None,
            "payment_methods": self.payment_methods.to_dict() if self.payment_methods else None,
            "images": [image.to_dict() for image in self.images],
            "amenities": [amenity.to_dict() for amenity in self.amenities],
            "classes": [property_class.to_dict() for property_class in self.classes],
            "apartments": [apartment.to_dict() for apartment in self.apartments],
        }
        for kind in self.NEARBY_KINDS:
            result[kind] = [point.to_dict() for point in getattr(self, kind)]
        return result


status_created_index = Index(
    "idx_properties_status_created",
    Property.status,
    Property.created_at.desc()
)

owner_status_index = Index(
    "idx_properties_owner_status",
    Property.owner_id,
    Property.status
)
