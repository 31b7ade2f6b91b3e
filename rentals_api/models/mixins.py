"""
Shared column mixins for database models.
Provides primary key styles (nanoid strings and serial integers) and timestamp management.
"""

from sqlalchemy import String, Integer, DateTime, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from nanoid import generate
from datetime import datetime, timezone

NANOID_LENGTH = 21


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def generate_public_id() -> str:
    """Generate a URL-safe 21 character nanoid used for public-facing records."""
    return generate(size=NANOID_LENGTH)


class NanoidPrimaryKeyMixin:
    """Primary key as a 21 character nanoid string (owners, properties)."""

    id: Mapped[str] = mapped_column(
        String(NANOID_LENGTH),
        primary_key=True,
        default=generate_public_id,
        comment="Public nanoid identifier"
    )


class IntegerPrimaryKeyMixin:
    """Serial integer primary key (lookups and child rows)."""

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False
    )


class TimestampMixin(CreatedAtMixin):
    """Adds created_at and updated_at, both managed on the Python side."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False
    )


def string_enum(enum_cls) -> SQLEnum:
    """Store enum values as VARCHAR so the column stays readable from SQL."""
    return SQLEnum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [member.value for member in members]
    )
