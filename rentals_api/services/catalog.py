"""
Catalog service for the amenity and property class lookup tables.
Names are unique; entries are soft-deleted through their is_active flag.
"""

from typing import List, Dict, Union
from collections import OrderedDict
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.repositories.catalog import LookupRepository, AmenityRepository, PropertyClassRepository
from rentals_api.models.catalog import Amenity, PropertyClass
from rentals_api.schemas.catalog import AmenityCreate, AmenityUpdate, PropertyClassCreate, PropertyClassUpdate
from rentals_api.utils.exceptions import (
    APIException,
    NotFoundError,
    DuplicateResourceError,
    ValidationError,
    BadRequestError,
)
import logging

logger = logging.getLogger(__name__)

LookupEntry = Union[Amenity, PropertyClass]


class CatalogService:
    """Listing, admin maintenance and soft deletion of lookup entries."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.amenity_repo = AmenityRepository(db_session)
        self.class_repo = PropertyClassRepository(db_session)

    # Amenities

    async def list_amenities(self, include_inactive: bool = False) -> List[Amenity]:
        return await self.amenity_repo.list_entries(include_inactive=include_inactive)

    async def list_amenities_by_category(self) -> Dict[str, List[Amenity]]:
        """Active amenities grouped by category, categories in alphabetical order."""
        grouped: Dict[str, List[Amenity]] = OrderedDict()
        for amenity in await self.amenity_repo.list_entries():
            grouped.setdefault(amenity.category or "comum", []).append(amenity)
        return grouped

    async def create_amenity(self, data: AmenityCreate) -> Amenity:
        return await self._create(self.amenity_repo, "Amenity", data.model_dump())

    async def update_amenity(self, amenity_id: int, data: AmenityUpdate) -> Amenity:
        return await self._update(self.amenity_repo, "Amenity", amenity_id, data.model_dump(exclude_unset=True))

    async def set_amenity_active(self, amenity_id: int, is_active: bool) -> Amenity:
        return await self._set_active(self.amenity_repo, "Amenity", amenity_id, is_active)

    # Property classes

    async def list_classes(self, include_inactive: bool = False) -> List[PropertyClass]:
        return await self.class_repo.list_entries(include_inactive=include_inactive)

    async def create_class(self, data: PropertyClassCreate) -> PropertyClass:
        return await self._create(self.class_repo, "Property class", data.model_dump())

    async def update_class(self, class_id: int, data: PropertyClassUpdate) -> PropertyClass:
        return await self._update(self.class_repo, "Property class", class_id, data.model_dump(exclude_unset=True))

    async def set_class_active(self, class_id: int, is_active: bool) -> PropertyClass:
        return await self._set_active(self.class_repo, "Property class", class_id, is_active)

    # Shared

    async def _create(self, repo: LookupRepository, label: str, data: dict) -> LookupEntry:
        try:
            if await repo.get_by_name(data["name"]):
                raise DuplicateResourceError(label, data["name"])

            entry = await repo.create(data)
            logger.info(f"{label} created: {entry.name} (ID: {entry.id})")
            return entry

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create {label.lower()} '{data.get('name')}': {e}")
            raise BadRequestError(f"Failed to create {label.lower()}: {str(e)}")

    async def _update(self, repo: LookupRepository, label: str, entry_id: int, data: dict) -> LookupEntry:
        if not data:
            raise ValidationError("No fields provided for update")

        entry = await repo.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError(label, entry_id)

        if "name" in data and data["name"] is None:
            raise ValidationError("Name cannot be null")

        new_name = data.get("name")
        if new_name and new_name != entry.name:
            if await repo.get_by_name(new_name):
                raise DuplicateResourceError(label, new_name)

        try:
            for field, value in data.items():
                setattr(entry, field, value)
            await self.db.commit()
            await self.db.refresh(entry)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update {label.lower()} {entry_id}: {e}")
            raise BadRequestError(f"Failed to update {label.lower()}: {str(e)}")

        logger.info(f"{label} updated: {entry_id}")
        return entry

    async def _set_active(self, repo: LookupRepository, label: str, entry_id: int, is_active: bool) -> LookupEntry:
        entry = await repo.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError(label, entry_id)
        return await repo.set_active(entry, is_active)
