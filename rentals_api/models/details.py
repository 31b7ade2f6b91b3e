"""
One-to-one detail sections of a listing: pricing, location, house rules and payment methods.
"""

from sqlalchemy import String, Text, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from rentals_api.database import Base
from rentals_api.models.mixins import IntegerPrimaryKeyMixin, CreatedAtMixin, TimestampMixin
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rentals_api.models.property import Property

DEFAULT_POPULAR_DESTINATION = "Nenhum dos anteriores"


def _property_fk() -> Mapped[str]:
    return mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        comment="Owning property"
    )


def _money(nullable: bool = True, default: Optional[Decimal] = None) -> Mapped[Optional[Decimal]]:
    return mapped_column(Numeric(precision=10, scale=2), nullable=nullable, default=default)


def _flag(default: bool = False) -> Mapped[bool]:
    return mapped_column(Boolean, nullable=False, default=default)


class PropertyPricing(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """Rates, recurring fees and what the rent includes."""

    __tablename__ = "property_pricing"

    property_id: Mapped[str] = _property_fk()

    monthly_rent: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        comment="Monthly rent"
    )

    daily_rate: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        comment="Nightly rate used to price reservations"
    )

    condominium_fee: Mapped[Optional[Decimal]] = _money(default=Decimal("0"))
    iptu_fee: Mapped[Optional[Decimal]] = _money(default=Decimal("0"))
    monthly_cleaning_fee: Mapped[Optional[Decimal]] = _money(default=Decimal("0"))
    other_fees: Mapped[Optional[Decimal]] = _money(default=Decimal("0"))

    includes_kitchen_utensils: Mapped[bool] = _flag()
    includes_furniture: Mapped[bool] = _flag()
    includes_electricity: Mapped[bool] = _flag()
    includes_internet: Mapped[bool] = _flag()
    includes_linens: Mapped[bool] = _flag()
    includes_water: Mapped[bool] = _flag()

    property_rel: Mapped["Property"] = relationship(back_populates="pricing")

    def to_dict(self) -> dict:
        def money(value):
            return float(value) if value is not None else None

        return {
            "monthly_rent": money(self.monthly_rent),
            "daily_rate": money(self.daily_rate),
            "condominium_fee": money(self.condominium_fee),
            "iptu_fee": money(self.iptu_fee),
            "monthly_cleaning_fee": money(self.monthly_cleaning_fee),
            "other_fees": money(self.other_fees),
            "includes_kitchen_utensils": self.includes_kitchen_utensils,
            "includes_furniture": self.includes_furniture,
            "includes_electricity": self.includes_electricity,
            "includes_internet": self.includes_internet,
            "includes_linens": self.includes_linens,
            "includes_water": self.includes_water,
        }


class PropertyLocation(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """Address, coordinates and the popular destination the listing belongs to."""

    __tablename__ = "property_location"

    property_id: Mapped[str] = _property_fk()

    full_address: Mapped[str] = mapped_column(Text, nullable=False)
    neighborhood: Mapped[str] = mapped_column(String(100), nullable=False)
    municipality: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(10), nullable=False)

    latitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=8),
        nullable=True
    )

    longitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=11, scale=8),
        nullable=True
    )

    popular_destination: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default=DEFAULT_POPULAR_DESTINATION,
        index=True
    )

    property_rel: Mapped["Property"] = relationship(back_populates="location")

    def to_dict(self) -> dict:
        return {
            "full_address": self.full_address,
            "neighborhood": self.neighborhood,
            "municipality": self.municipality,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "latitude": float(self.latitude) if self.latitude is not None else None,
            "longitude": float(self.longitude) if self.longitude is not None else None,
            "popular_destination": self.popular_destination,
        }


class PropertyHouseRules(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    """Free-text house rules shown on the listing page."""

    __tablename__ = "property_house_rules"

    property_id: Mapped[str] = _property_fk()

    check_in_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    check_out_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancellation_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    children_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    pets_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    beds_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    age_restriction_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    groups_rule: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    property_rel: Mapped["Property"] = relationship(back_populates="house_rules")

    RULE_FIELDS = (
        "check_in_rule", "check_out_rule", "cancellation_rule", "children_rule",
        "pets_rule", "beds_rule", "age_restriction_rule", "groups_rule",
    )

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.RULE_FIELDS}


class PropertyPaymentMethods(IntegerPrimaryKeyMixin, CreatedAtMixin, Base):
    """Payment methods accepted by the owner."""

    __tablename__ = "property_payment_methods"

    property_id: Mapped[str] = _property_fk()

    accepts_visa: Mapped[bool] = _flag()
    accepts_american_express: Mapped[bool] = _flag()
    accepts_master_card: Mapped[bool] = _flag()
    accepts_maestro: Mapped[bool] = _flag()
    accepts_elo: Mapped[bool] = _flag()
    accepts_diners_club: Mapped[bool] = _flag()
    accepts_pix: Mapped[bool] = _flag()
    accepts_cash: Mapped[bool] = _flag()

    property_rel: Mapped["Property"] = relationship(back_populates="payment_methods")

    METHOD_FIELDS = (
        "accepts_visa", "accepts_american_express", "accepts_master_card", "accepts_maestro",
        "accepts_elo", "accepts_diners_club", "accepts_pix", "accepts_cash",
    )

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.METHOD_FIELDS}
