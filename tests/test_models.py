"""
Tests for database models.
Covers validation helpers, computed properties and the dict conversions used by the API.
"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from rentals_api.models import (
    User,
    Owner,
    Property,
    PropertyStatus,
    PropertyPricing,
    PropertyLocation,
    PropertyImage,
    Amenity,
    PropertyClass,
    PropertyAmenity,
    PropertyPropertyClass,
    PropertyApartment,
    ApartmentRoom,
    Reservation,
    ReservationStatus,
    DEFAULT_POPULAR_DESTINATION,
)
from rentals_api.models.mixins import generate_public_id, NANOID_LENGTH
from rentals_api.utils.auth import hash_password
from tests.conftest import AccountFactory, CatalogFactory


def build_property(**overrides) -> Property:
    data = {
        "title": "Casa de praia",
        "short_description": "Casa perto do mar",
        "max_guests": 4,
        "bedrooms": 2,
        "bathrooms": 1,
        "status": PropertyStatus.ACTIVE,
    }
    data.update(overrides)
    return Property(**data)


class TestAccountModels:
    """Administrator and owner accounts."""

    def test_email_validation_normalizes_case(self):
        assert User.validate_email_format("Admin@Example.COM") == "admin@example.com"

    @pytest.mark.parametrize("email", ["invalid-email", "@example.com", "owner@", ""])
    def test_email_validation_rejects_invalid(self, email):
        with pytest.raises(ValueError, match="Invalid email format"):
            User.validate_email_format(email)

    def test_owner_password_round_trip(self):
        owner = Owner(full_name="Maria Souza", email="maria@example.com", hashed_password=hash_password("segredo123"))

        assert owner.verify_password("segredo123")
        assert not owner.verify_password("errada")

        owner.set_password("nova-senha")
        assert owner.verify_password("nova-senha")

    def test_owner_public_dict_hides_password(self):
        owner = Owner(
            full_name="Maria Souza",
            email="maria@example.com",
            hashed_password=hash_password("segredo123"),
            instagram="@maria"
        )

        public = owner.to_public_dict()
        full = owner.to_dict()

        assert "hashed_password" not in public
        assert "hashed_password" not in full
        assert public["instagram"] == "@maria"
        assert "is_active" not in public
        assert "is_active" in full

    async def test_owner_gets_nanoid(self, db_session):
        owner = await AccountFactory.create_owner(db_session)

        assert isinstance(owner.id, str)
        assert len(owner.id) == NANOID_LENGTH
        assert owner.created_at is not None

    async def test_admin_to_dict(self, db_session):
        user = await AccountFactory.create_admin(db_session, email="root@example.com", name="Root")

        data = user.to_dict()

        assert data["email"] == "root@example.com"
        assert data["name"] == "Root"
        assert data["is_active"] is True
        assert "hashed_password" not in data


class TestLookupModels:
    """Amenities and property classes."""

    async def test_amenity_names_are_unique(self, db_session):
        db_session.add(Amenity(name="Piscina", category="comum"))
        await db_session.commit()

        db_session.add(Amenity(name="Piscina", category="edificio"))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

    async def test_class_names_are_unique(self, db_session):
        await CatalogFactory.create_class(db_session, name="Normal")

        db_session.add(PropertyClass(name="Normal"))
        with pytest.raises(IntegrityError):
            await db_session.commit()
        await db_session.rollback()

    async def test_lookups_default_to_active(self, db_session):
        amenity = await CatalogFactory.create_amenity(db_session, name="Churrasqueira")

        assert amenity.is_active is True
        assert amenity.to_dict()["category"] == "comum"


class TestPropertyModel:
    """Listing root and its computed views."""

    def test_nanoid_generator(self):
        first, second = generate_public_id(), generate_public_id()

        assert len(first) == NANOID_LENGTH
        assert first != second

    def test_main_image_prefers_flag(self):
        property_obj = build_property()
        property_obj.images = [
            PropertyImage(image_url="/a.jpg", display_order=0, is_main=False),
            PropertyImage(image_url="/b.jpg", display_order=1, is_main=True),
        ]

        assert property_obj.main_image.image_url == "/b.jpg"

    def test_main_image_falls_back_to_first(self):
        property_obj = build_property()
        property_obj.images = [PropertyImage(image_url="/a.jpg", display_order=0, is_main=False)]

        assert property_obj.main_image.image_url == "/a.jpg"
        assert build_property().main_image is None

    def test_summary_dict(self):
        property_obj = build_property(property_style="Casa")
        property_obj.pricing = PropertyPricing(monthly_rent=Decimal("4000.00"), daily_rate=Decimal("250.00"))
        property_obj.location = PropertyLocation(
            full_address="Rua A, 1",
            neighborhood="Centro",
            municipality="Caucaia",
            city="Caucaia",
            state="CE",
            zip_code="61600-000",
            popular_destination="Cumbuco",
        )
        property_obj.images = [PropertyImage(image_url="/cover.jpg", display_order=0, is_main=True)]
        property_obj.class_links = [PropertyPropertyClass(property_class=PropertyClass(name="Imóvel em Destaque"))]

        summary = property_obj.to_summary_dict()

        assert summary["daily_rate"] == 250.0
        assert summary["monthly_rent"] == 4000.0
        assert summary["city"] == "Caucaia"
        assert summary["popular_destination"] == "Cumbuco"
        assert summary["main_image_url"] == "/cover.jpg"
        assert summary["class_names"] == ["Imóvel em Destaque"]
        assert summary["status"] == "active"

    def test_summary_dict_without_sections(self):
        summary = build_property().to_summary_dict()

        assert summary["daily_rate"] is None
        assert summary["city"] is None
        assert summary["main_image_url"] is None
        assert summary["class_names"] == []

    def test_amenities_follow_links(self):
        property_obj = build_property()
        property_obj.amenity_links = [
            PropertyAmenity(amenity=Amenity(name="Wi-Fi")),
            PropertyAmenity(amenity=Amenity(name="Piscina")),
        ]

        assert [amenity.name for amenity in property_obj.amenities] == ["Wi-Fi", "Piscina"]

    async def test_defaults_after_insert(self, db_session):
        property_obj = Property(title="Flat", short_description="Flat no centro", max_guests=2, bedrooms=1, bathrooms=1)
        property_obj.location = PropertyLocation(
            full_address="Rua B, 2",
            neighborhood="Aldeota",
            municipality="Fortaleza",
            city="Fortaleza",
            state="CE",
            zip_code="60000-000",
        )
        db_session.add(property_obj)
        await db_session.commit()

        assert property_obj.status == PropertyStatus.PENDING
        assert property_obj.is_active is False
        assert property_obj.property_class == "Normal"
        assert property_obj.minimum_stay == 1
        assert property_obj.allows_pets is False
        assert property_obj.location.popular_destination == DEFAULT_POPULAR_DESTINATION

    def test_full_dict_lists_every_nearby_kind(self):
        data = build_property().to_dict()

        for kind in Property.NEARBY_KINDS:
            assert data[kind] == []
        assert data["owner"] is None
        assert data["pricing"] is None


class TestApartmentModels:

    def test_room_total_beds(self):
        room = ApartmentRoom(room_number=1, double_beds=1, single_beds=2, sofa_beds=1)

        assert room.total_beds == 4

    def test_apartment_dict_includes_rooms(self):
        apartment = PropertyApartment(name="Apto 101", total_bathrooms=1, has_kitchen=True)
        apartment.rooms = [ApartmentRoom(room_number=1, double_beds=1)]

        data = apartment.to_dict()

        assert data["name"] == "Apto 101"
        assert data["has_kitchen"] is True
        assert data["rooms"][0]["double_beds"] == 1


class TestReservationModel:

    def test_nights(self):
        reservation = Reservation(
            property_id="abc",
            guest_name="Ana",
            guest_email="ana@example.com",
            check_in_date=date(2030, 1, 10),
            check_out_date=date(2030, 1, 13),
            number_of_guests=2,
            total_amount=Decimal("900.00"),
            status=ReservationStatus.PENDING,
        )

        assert reservation.nights == 3
