"""
PropertyImage model.
Stores the public URL of each listing photo with its ordering and main-image flag.
"""

from sqlalchemy import String, Integer, Boolean, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from rentals_api.database import Base
from rentals_api.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from rentals_api.models.property import Property


class PropertyImage(IntegerPrimaryKeyMixin, CreatedAtMixin, Base):
    """
    Photo of a listing.
    The first image of a write becomes the main image; display_order follows submission order.
    """

    __tablename__ = "property_images"

    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    image_url: Mapped[str] = mapped_column(
        String(1000),
        nullable=False,
        comment="Public URL of the image"
    )

    alt_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Position in the gallery"
    )

    is_main: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether this is the cover image"
    )

    property_rel: Mapped["Property"] = relationship(back_populates="images")

    def __repr__(self) -> str:
        return f"<PropertyImage(id={self.id}, property_id={self.property_id}, is_main={self.is_main})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "image_url": self.image_url,
            "alt_text": self.alt_text,
            "display_order": self.display_order,
            "is_main": self.is_main,
        }


property_images_order_index = Index(
    "idx_property_images_property_order",
    PropertyImage.property_id,
    PropertyImage.display_order
)
