"""
Repositories for the amenity and property class lookup tables.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from rentals_api.repositories.base import BaseRepository, ModelType
from rentals_api.models.catalog import Amenity, PropertyClass, PropertyPropertyClass
from typing import Optional, List, Dict, Any, Tuple, Type
import logging

logger = logging.getLogger(__name__)


class LookupRepository(BaseRepository[ModelType]):
    """Shared behaviour of name-unique, soft-deletable lookup tables."""

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        super().__init__(model, db)

    async def get_by_name(self, name: str) -> Optional[ModelType]:
        result = await self.db.execute(select(self.model).where(self.model.name == name))
        return result.scalar_one_or_none()

    async def list_entries(self, include_inactive: bool = False) -> List[ModelType]:
        query = select(self.model)
        if not include_inactive:
            query = query.where(self.model.is_active.is_(True))
        result = await self.db.execute(query.order_by(*self._ordering()))
        return list(result.scalars().all())

    async def set_active(self, entry: ModelType, is_active: bool) -> ModelType:
        try:
            entry.is_active = is_active
            await self.db.commit()
            await self.db.refresh(entry)
            logger.info(f"{self.model.__name__} '{entry.name}' active={is_active}")
            return entry
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to change status of {self.model.__name__} {entry.id}: {e}")
            raise

    async def seed(self, entries: List[Dict[str, Any]]) -> List[ModelType]:
        """
        Insert the entries whose name does not exist yet.

        Returns:
            The newly created rows (existing names are skipped)
        """
        try:
            result = await self.db.execute(select(self.model.name))
            existing = {row[0] for row in result.all()}

            created = []
            for entry in entries:
                if entry["name"] in existing:
                    continue
                db_obj = self.model(**entry)
                self.db.add(db_obj)
                created.append(db_obj)
                existing.add(entry["name"])

            await self.db.commit()
            logger.info(f"Seeded {len(created)} {self.model.__name__} rows ({len(entries) - len(created)} already present)")
            return created
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to seed {self.model.__name__}: {e}")
            raise

    def _ordering(self):
        return (self.model.name,)


class AmenityRepository(LookupRepository[Amenity]):
    """Amenities are listed by category, then name."""

    def __init__(self, db: AsyncSession):
        super().__init__(Amenity, db)

    def _ordering(self):
        return (Amenity.category, Amenity.name)

    async def move_to_category(self, name: str, category: str) -> Optional[Amenity]:
        amenity = await self.get_by_name(name)
        if amenity is None:
            return None
        return await self.update(amenity.id, {"category": category})


class PropertyClassRepository(LookupRepository[PropertyClass]):
    """Property classes used for home page curation."""

    def __init__(self, db: AsyncSession):
        super().__init__(PropertyClass, db)

    async def list_with_property_counts(self) -> List[Tuple[PropertyClass, int]]:
        """Every class (active or not) with the number of tagged properties."""
        property_count = (
            select(func.count(PropertyPropertyClass.property_id))
            .where(PropertyPropertyClass.class_id == PropertyClass.id)
            .correlate(PropertyClass)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(PropertyClass, property_count).order_by(PropertyClass.name)
        )
        return [(property_class, count) for property_class, count in result.all()]

    async def delete_by_names(self, names: List[str]) -> int:
        """Hard delete classes by name; their property links go with them."""
        try:
            result = await self.db.execute(select(PropertyClass).where(PropertyClass.name.in_(names)))
            classes = list(result.scalars().all())
            for property_class in classes:
                await self.db.delete(property_class)
            await self.db.commit()
            logger.info(f"Removed {len(classes)} property classes")
            return len(classes)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to remove property classes {names}: {e}")
            raise
