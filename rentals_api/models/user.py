"""
Administrator account model.
Administrators curate featured classes, approve listings and manage owner accounts.
"""

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from rentals_api.database import Base
from rentals_api.models.mixins import IntegerPrimaryKeyMixin, TimestampMixin
from rentals_api.utils.auth import hash_password, verify_password
from email_validator import validate_email, EmailNotValidError
from typing import Optional


class User(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """
    Administrator account used to sign in to the back office.
    Reservations may reference a user; deleting one keeps the reservation.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Administrator display name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login email - must be unique"
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Whether the administrator may sign in"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Returns:
            Normalized, lower-cased email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    def set_password(self, password: str) -> None:
        self.hashed_password = hash_password(password)

    def verify_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    def to_dict(self) -> dict:
        """Convert administrator to dictionary (excluding the password hash)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
