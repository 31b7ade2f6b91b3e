"""
Tests for the maintenance operations behind manage.py and the admin debug views.
"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from rentals_api.models import Amenity, PropertyClass, PropertyPropertyClass, Property, PropertyStatus, Owner
from rentals_api.repositories.property import PropertyRepository
from rentals_api.schemas.property import PropertyCreate, split_property_payload
from rentals_api.services.maintenance import (
    MaintenanceService,
    DEFAULT_AMENITIES,
    FEATURED_CLASSES,
    BANNER_CLASSES,
)
from rentals_api.utils.exceptions import NotFoundError, DuplicateResourceError
from tests.conftest import PropertyFactory, AccountFactory


async def count_rows(session: AsyncSession, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar()


async def create_listing(session: AsyncSession, **payload_overrides) -> Property:
    root, sections = split_property_payload(PropertyCreate(**PropertyFactory.payload(**payload_overrides)))
    root["status"] = PropertyStatus.ACTIVE
    return await PropertyRepository(session).create_property(root, sections)


class TestSeeding:

    async def test_seed_amenities_is_idempotent(self, db_session: AsyncSession):
        service = MaintenanceService(db_session)

        assert await service.seed_amenities() == len(DEFAULT_AMENITIES)
        assert await service.seed_amenities() == 0
        assert await count_rows(db_session, Amenity) == len(DEFAULT_AMENITIES)

    async def test_seed_keeps_existing_entries(self, db_session: AsyncSession):
        db_session.add(Amenity(name="Piscina", category="edificio", icon="custom"))
        await db_session.commit()

        created = await MaintenanceService(db_session).seed_amenities()

        assert created == len(DEFAULT_AMENITIES) - 1
        result = await db_session.execute(select(Amenity).where(Amenity.name == "Piscina"))
        assert result.scalar_one().icon == "custom"

    async def test_seed_classes(self, db_session: AsyncSession):
        service = MaintenanceService(db_session)

        assert await service.seed_classes(include_banners=False) == len(FEATURED_CLASSES)
        assert await service.seed_classes() == len(BANNER_CLASSES)

        result = await db_session.execute(select(PropertyClass.name))
        names = set(result.scalars().all())
        assert "Imóvel em Destaque" in names
        assert "Imovel Banner Paracuru" in names


class TestDataFixes:

    async def test_remove_banner_classes_keeps_listings(self, db_session: AsyncSession):
        service = MaintenanceService(db_session)
        await service.seed_classes()
        result = await db_session.execute(
            select(PropertyClass.id).where(PropertyClass.name.in_(["Imovel Banner a Dois", "Normal"]))
        )
        class_ids = list(result.scalars().all())
        property_obj = await create_listing(db_session, class_ids=class_ids)
        property_id = property_obj.id

        removed = await service.remove_banner_classes()

        assert removed == len(BANNER_CLASSES)
        assert await count_rows(db_session, PropertyClass) == len(FEATURED_CLASSES)
        assert await count_rows(db_session, PropertyPropertyClass) == 1
        assert await db_session.get(Property, property_id) is not None

    async def test_move_amenity(self, db_session: AsyncSession):
        db_session.add(Amenity(name="Frigobar", category="comum"))
        await db_session.commit()

        await MaintenanceService(db_session).move_amenity("Frigobar", "apartamento")

        result = await db_session.execute(select(Amenity.category).where(Amenity.name == "Frigobar"))
        assert result.scalar_one() == "apartamento"

    async def test_move_missing_amenity(self, db_session: AsyncSession):
        with pytest.raises(NotFoundError):
            await MaintenanceService(db_session).move_amenity("Sauna", "comum")

    async def test_clear_owners_detaches_listings(self, db_session: AsyncSession):
        owner = await AccountFactory.create_owner(db_session)
        await AccountFactory.create_owner(db_session)
        property_obj = await create_listing(db_session)
        property_obj.owner_id = owner.id
        await db_session.commit()
        property_id = property_obj.id

        assert await MaintenanceService(db_session).clear_owners() == 2

        assert await count_rows(db_session, Owner) == 0
        result = await db_session.execute(select(Property.owner_id).where(Property.id == property_id))
        assert result.scalar_one() is None


class TestAccountsAndStats:

    async def test_create_admin(self, db_session: AsyncSession):
        service = MaintenanceService(db_session)

        user = await service.create_admin("Root", "Root@Example.com", "segredo123")

        assert user.email == "root@example.com"
        assert user.verify_password("segredo123")

        with pytest.raises(DuplicateResourceError):
            await service.create_admin("Root again", "root@example.com", "segredo123")

    async def test_table_counts(self, db_session: AsyncSession):
        await create_listing(db_session)

        counts = await MaintenanceService(db_session).table_counts()

        assert counts["properties"] == 1
        assert counts["property_images"] == 2
        assert counts["apartment_rooms"] == 2
        assert counts["owners"] == 0

    async def test_check_connection(self, db_session: AsyncSession):
        assert await MaintenanceService(db_session).check_connection() is True

    async def test_class_report(self, db_session: AsyncSession, featured_class):
        await create_listing(db_session, class_ids=[featured_class.id])
        db_session.add(PropertyClass(name="Sem uso"))
        await db_session.commit()

        report = await MaintenanceService(db_session).class_report()

        usage = {entry["name"]: entry["property_count"] for entry in report["classes"]}
        assert usage == {"Imóvel em Destaque": 1, "Sem uso": 0}
        assert report["active_properties"][0]["class_names"] == ["Imóvel em Destaque"]
