"""
Property repository: aggregate reads and writes plus catalog queries.

Creating or updating a listing touches up to fourteen tables. Every write below
stages all of them on the session and commits once, so a failure leaves no
partial listing behind.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from rentals_api.repositories.base import BaseRepository
from rentals_api.models.property import Property, PropertyStatus
from rentals_api.models.details import (
    PropertyPricing,
    PropertyLocation,
    PropertyHouseRules,
    PropertyPaymentMethods,
)
from rentals_api.models.image import PropertyImage
from rentals_api.models.catalog import Amenity, PropertyClass, PropertyAmenity, PropertyPropertyClass
from rentals_api.models.nearby import (
    PropertyNearbyPlace,
    PropertyNearbyBeach,
    PropertyNearbyAirport,
    PropertyNearbyRestaurant,
)
from rentals_api.models.apartment import PropertyApartment, ApartmentRoom
from rentals_api.models.owner import Owner
from rentals_api.models.mixins import utcnow
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)

SINGLE_SECTIONS = {
    "pricing": PropertyPricing,
    "location": PropertyLocation,
    "house_rules": PropertyHouseRules,
    "payment_methods": PropertyPaymentMethods,
}

NEARBY_SECTIONS = {
    "nearby_places": PropertyNearbyPlace,
    "nearby_beaches": PropertyNearbyBeach,
    "nearby_airports": PropertyNearbyAirport,
    "nearby_restaurants": PropertyNearbyRestaurant,
}


class UnknownReferenceError(ValueError):
    """Raised when a write references amenity or class ids that do not exist."""

    def __init__(self, resource: str, missing_ids: List[int]):
        self.resource = resource
        self.missing_ids = missing_ids
        super().__init__(f"Unknown {resource} ids: {', '.join(str(i) for i in missing_ids)}")


class ListingFilters:
    """Filters accepted by the public catalog."""

    def __init__(
        self,
        city: Optional[str] = None,
        property_style: Optional[str] = None,
        popular_destination: Optional[str] = None,
        class_name: Optional[str] = None,
        min_guests: Optional[int] = None,
        allows_pets: Optional[bool] = None,
        status: Optional[PropertyStatus] = PropertyStatus.ACTIVE,
        owner_id: Optional[str] = None
    ):
        self.city = city
        self.property_style = property_style
        self.popular_destination = popular_destination
        self.class_name = class_name
        self.min_guests = min_guests
        self.allows_pets = allows_pets
        self.status = status
        self.owner_id = owner_id


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for the property aggregate.
    All child collections are mapped with selectin loading, so a plain select of
    Property returns the complete aggregate.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def get_property_with_details(self, property_id: str) -> Optional[Property]:
        """
        Load a property and all of its children, bypassing stale identity-map state.

        Returns:
            Property with loaded relationships or None if not found
        """
        try:
            query = (
                select(Property)
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            property_obj = result.scalar_one_or_none()

            if property_obj:
                logger.debug(f"Retrieved property with details: {property_id}")

            return property_obj
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def create_property(self, root_data: Dict[str, Any], sections: Dict[str, Any]) -> Property:
        """
        Insert a property with all supplied child sections in one transaction.

        Args:
            root_data: Column values of the properties row
            sections: Child data keyed by section name (pricing, location, images,
                amenity_ids, class_ids, nearby_*, apartments, house_rules, payment_methods)

        Raises:
            UnknownReferenceError: If an amenity or class id does not exist
        """
        try:
            await self._ensure_references(sections)

            property_obj = Property(**root_data)
            self._apply_sections(property_obj, sections)
            self.db.add(property_obj)
            await self.db.commit()
            property_id = property_obj.id
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property '{root_data.get('title')}': {e}")
            raise

        logger.info(f"Created property: {root_data.get('title')} (ID: {property_id})")
        return await self.get_property_with_details(property_id)

    async def update_property(
        self,
        property_obj: Property,
        root_updates: Dict[str, Any],
        sections: Dict[str, Any]
    ) -> Property:
        """
        Update root columns and replace every supplied child section in one transaction.

        Sections left out (or None) keep their current rows. A supplied collection,
        even an empty one, replaces the existing rows wholesale.

        Args:
            property_obj: Property previously loaded with get_property_with_details
            root_updates: Column values to assign on the properties row
            sections: Child data keyed by section name
        """
        property_id = property_obj.id
        try:
            await self._ensure_references(sections)

            for field, value in root_updates.items():
                setattr(property_obj, field, value)
            self._apply_sections(property_obj, sections)
            property_obj.updated_at = utcnow()

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_id}: {e}")
            raise

        logger.info(f"Updated property {property_id} (sections: {', '.join(sorted(k for k, v in sections.items() if v is not None)) or 'none'})")
        return await self.get_property_with_details(property_id)

    async def set_status(self, property_obj: Property, status: PropertyStatus) -> Property:
        property_id = property_obj.id
        try:
            property_obj.status = status
            property_obj.updated_at = utcnow()
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to set status of property {property_id}: {e}")
            raise
        return await self.get_property_with_details(property_id)

    async def delete_property(self, property_obj: Property) -> None:
        """Delete the aggregate; ORM and database cascades remove every child row."""
        property_id = property_obj.id
        try:
            await self.db.delete(property_obj)
            await self.db.commit()
            logger.debug(f"Deleted property {property_id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise

    async def count_image_url_references(self, image_url: str) -> int:
        """Count listing images and owner profiles that still point at the URL."""
        image_count = await self.db.execute(
            select(func.count()).select_from(PropertyImage).where(PropertyImage.image_url == image_url)
        )
        profile_count = await self.db.execute(
            select(func.count()).select_from(Owner).where(Owner.profile_image == image_url)
        )
        return (image_count.scalar() or 0) + (profile_count.scalar() or 0)

    async def search_properties(
        self,
        filters: ListingFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """
        Filtered, paginated listing query.

        Returns:
            Tuple of (properties for the page, total matching count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            count_query = select(func.count()).select_from(Property).where(*conditions)
            total = (await self.db.execute(count_query)).scalar() or 0

            query = (
                select(Property)
                .where(*conditions)
                .order_by(Property.created_at.desc(), Property.id)
                .offset(skip)
                .limit(limit)
            )
            result = await self.db.execute(query)
            properties = list(result.scalars().all())

            logger.debug(f"Property search returned {len(properties)} of {total}")
            return properties, total
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    async def get_by_class_name(self, class_name: str, limit: Optional[int] = None) -> List[Property]:
        """Active properties tagged with the class, newest first."""
        properties, _ = await self.search_properties(
            ListingFilters(class_name=class_name),
            skip=0,
            limit=limit or 1000
        )
        return properties

    async def list_by_owner(self, owner_id: str) -> List[Property]:
        properties, _ = await self.search_properties(
            ListingFilters(owner_id=owner_id, status=None),
            skip=0,
            limit=1000
        )
        return properties

    def _build_filter_conditions(self, filters: ListingFilters) -> list:
        conditions = []

        if filters.status is not None:
            conditions.append(Property.status == filters.status)

        if filters.owner_id:
            conditions.append(Property.owner_id == filters.owner_id)

        if filters.city:
            conditions.append(Property.location.has(PropertyLocation.city.ilike(f"%{filters.city.strip()}%")))

        if filters.popular_destination:
            conditions.append(
                Property.location.has(PropertyLocation.popular_destination == filters.popular_destination)
            )

        if filters.property_style:
            conditions.append(func.lower(Property.property_style) == filters.property_style.strip().lower())

        if filters.class_name:
            conditions.append(
                Property.class_links.any(
                    PropertyPropertyClass.property_class.has(PropertyClass.name == filters.class_name)
                )
            )

        if filters.min_guests is not None:
            conditions.append(Property.max_guests >= filters.min_guests)

        if filters.allows_pets is not None:
            conditions.append(Property.allows_pets.is_(filters.allows_pets))

        return conditions

    async def _ensure_references(self, sections: Dict[str, Any]) -> None:
        for key, model, label in (
            ("amenity_ids", Amenity, "amenity"),
            ("class_ids", PropertyClass, "property class"),
        ):
            ids = sections.get(key)
            if not ids:
                continue
            wanted = set(ids)
            result = await self.db.execute(select(model.id).where(model.id.in_(wanted)))
            found = {row[0] for row in result.all()}
            missing = sorted(wanted - found)
            if missing:
                raise UnknownReferenceError(label, missing)

    def _apply_sections(self, property_obj: Property, sections: Dict[str, Any]) -> None:
        """Stage child rows on the property. Nothing is flushed here."""
        for name, model in SINGLE_SECTIONS.items():
            data = sections.get(name)
            if data is None:
                continue
            current = getattr(property_obj, name)
            if current is None:
                setattr(property_obj, name, model(**data))
            else:
                for field, value in data.items():
                    setattr(current, field, value)

        if sections.get("images") is not None:
            property_obj.images = self._build_images(sections["images"])

        if sections.get("amenity_ids") is not None:
            existing = {link.amenity_id: link for link in property_obj.amenity_links}
            property_obj.amenity_links = [
                existing.get(amenity_id) or PropertyAmenity(amenity_id=amenity_id)
                for amenity_id in dict.fromkeys(sections["amenity_ids"])
            ]

        if sections.get("class_ids") is not None:
            existing = {link.class_id: link for link in property_obj.class_links}
            property_obj.class_links = [
                existing.get(class_id) or PropertyPropertyClass(class_id=class_id)
                for class_id in dict.fromkeys(sections["class_ids"])
            ]

        for name, model in NEARBY_SECTIONS.items():
            if sections.get(name) is not None:
                setattr(property_obj, name, [model(**point) for point in sections[name]])

        if sections.get("apartments") is not None:
            property_obj.apartments = [self._build_apartment(data) for data in sections["apartments"]]

    @staticmethod
    def _build_images(images: List[Dict[str, Any]]) -> List[PropertyImage]:
        """The first image is the cover; display order follows the submitted order."""
        return [
            PropertyImage(
                image_url=image["image_url"],
                alt_text=image.get("alt_text") or f"Imagem {index + 1} do imóvel",
                display_order=index,
                is_main=index == 0,
            )
            for index, image in enumerate(images)
        ]

    @staticmethod
    def _build_apartment(data: Dict[str, Any]) -> PropertyApartment:
        apartment_data = {k: v for k, v in data.items() if k != "rooms"}
        rooms = [ApartmentRoom(**room) for room in data.get("rooms") or []]
        return PropertyApartment(**apartment_data, rooms=rooms)
