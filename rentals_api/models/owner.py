"""
Owner account model.
Owners are the landlords who register and manage their own property listings.
"""

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from rentals_api.database import Base
from rentals_api.models.mixins import NanoidPrimaryKeyMixin, TimestampMixin
from rentals_api.utils.auth import hash_password, verify_password
from typing import Optional


class Owner(NanoidPrimaryKeyMixin, TimestampMixin, Base):
    """
    Property owner account.

    Properties reference their owner with ON DELETE SET NULL, so removing an
    owner detaches the listings instead of deleting them.
    """

    __tablename__ = "owners"

    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Owner's full name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login email - must be unique"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    instagram: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the owner may sign in and manage listings"
    )

    def __repr__(self) -> str:
        return f"<Owner(id={self.id}, email={self.email})>"

    def set_password(self, password: str) -> None:
        self.hashed_password = hash_password(password)

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    def to_public_dict(self) -> dict:
        """Contact details shown next to a listing."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "instagram": self.instagram,
            "website": self.website,
            "profile_image": self.profile_image,
        }

    def to_dict(self) -> dict:
        result = self.to_public_dict()
        result.update({
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        })
        return result
