"""
Lookup tables shared by all listings: amenities and property classes.
Both use a unique name and an is_active flag for soft deletion.
"""

from sqlalchemy import String, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from rentals_api.database import Base
from rentals_api.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin, TimestampMixin
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rentals_api.models.property import Property


class Amenity(IntegerPrimaryKeyMixin, CreatedAtMixin, Base):
    """
    Reusable facility or feature attachable to properties.
    Categories group amenities on the listing page (comum, apartamento, edificio, localizacao).
    """

    __tablename__ = "amenities"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Amenity name - must be unique"
    )

    category: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        index=True,
        comment="Display group for the amenity"
    )

    icon: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Icon identifier used by the front end"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Soft delete flag"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "icon": self.icon,
            "description": self.description,
            "is_active": self.is_active,
        }


class PropertyClass(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """
    Curation tag such as "Imóvel em Destaque".
    The home page banners are filled with the active properties tagged with a class.
    """

    __tablename__ = "property_classes"

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Class name - must be unique"
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Soft delete flag"
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
        }


class PropertyAmenity(CreatedAtMixin, Base):
    """Junction row linking a property to an amenity."""

    __tablename__ = "property_amenities"

    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True
    )

    amenity_id: Mapped[int] = mapped_column(
        ForeignKey("amenities.id", ondelete="CASCADE"),
        primary_key=True
    )

    property_rel: Mapped["Property"] = relationship(back_populates="amenity_links")

    amenity: Mapped[Amenity] = relationship(lazy="selectin")


class PropertyPropertyClass(CreatedAtMixin, Base):
    """Junction row linking a property to a property class."""

    __tablename__ = "property_property_classes"

    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True
    )

    class_id: Mapped[int] = mapped_column(
        ForeignKey("property_classes.id", ondelete="CASCADE"),
        primary_key=True
    )

    property_rel: Mapped["Property"] = relationship(back_populates="class_links")

    property_class: Mapped[PropertyClass] = relationship(lazy="selectin")


amenity_category_name_index = Index(
    "idx_amenities_category_name",
    Amenity.category,
    Amenity.name
)

property_class_links_index = Index(
    "idx_property_property_classes_class",
    PropertyPropertyClass.class_id
)
