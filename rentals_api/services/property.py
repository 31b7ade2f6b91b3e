"""
Property service for managing listings with business logic validation.
Handles the aggregate create/update, visibility, ownership checks, catalog
queries and the removal of locally stored images when a listing is deleted.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.repositories.property import PropertyRepository, ListingFilters, UnknownReferenceError
from rentals_api.models.property import Property, PropertyStatus
from rentals_api.schemas.property import PropertyCreate, PropertyUpdate, split_property_payload
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.utils.file_utils import FileStorage
from rentals_api.utils.exceptions import (
    APIException,
    PropertyNotFoundError,
    PropertyOwnershipError,
    InsufficientPermissionsError,
    ValidationError,
    BadRequestError,
)
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property service for managing listings.
    Owners create pending listings and manage only their own; administrators
    create active listings and manage all of them. The public sees active listings only.
    """

    def __init__(self, db_session: AsyncSession, file_storage: Optional[FileStorage] = None):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self._file_storage = file_storage

    @property
    def file_storage(self) -> FileStorage:
        if self._file_storage is None:
            self._file_storage = FileStorage()
        return self._file_storage

    async def create_property(self, property_data: PropertyCreate, account: AuthenticatedAccount) -> Property:
        """
        Create a listing with every supplied section in one transaction.

        Raises:
            ValidationError: If an amenity or class id does not exist
            BadRequestError: If the write fails
        """
        try:
            root, sections = split_property_payload(property_data)

            if account.is_owner:
                root["owner_id"] = account.id
                root["status"] = PropertyStatus.PENDING
            else:
                root["status"] = PropertyStatus.ACTIVE

            property_obj = await self.property_repo.create_property(root, sections)

            logger.info(
                f"Property created by {account.role.value} {account.id}: {property_obj.title} "
                f"(ID: {property_obj.id}, status: {property_obj.status.value})"
            )
            return property_obj

        except APIException:
            raise
        except UnknownReferenceError as e:
            raise ValidationError(str(e), field_errors=[{
                "field": "amenity_ids" if e.resource == "amenity" else "class_ids",
                "message": str(e),
            }])
        except Exception as e:
            logger.error(f"Failed to create property for {account.role.value} {account.id}: {e}")
            raise BadRequestError(f"Failed to create property: {str(e)}")

    async def get_property(self, property_id: str, account: Optional[AuthenticatedAccount] = None) -> Property:
        """
        Get a listing with all of its sections.

        Pending listings are only visible to their owner and to administrators;
        everyone else gets a not found error.
        """
        property_obj = await self.property_repo.get_property_with_details(property_id)

        if not property_obj:
            raise PropertyNotFoundError(property_id)

        if not property_obj.is_active and not self._can_manage(property_obj, account):
            raise PropertyNotFoundError(property_id)

        logger.debug(f"Retrieved property: {property_id}")
        return property_obj

    async def update_property(
        self,
        property_id: str,
        property_data: PropertyUpdate,
        account: AuthenticatedAccount
    ) -> Property:
        """
        Update root fields and replace every supplied section in one transaction.

        Raises:
            PropertyNotFoundError: If the listing does not exist
            PropertyOwnershipError: If an owner edits someone else's listing
            ValidationError: If an amenity or class id does not exist
        """
        try:
            property_obj = await self._get_manageable(property_id, account)
            root, sections = split_property_payload(property_data, partial=True)

            if not root and not sections:
                raise ValidationError("No fields provided for update")

            self._validate_stay_range(property_obj, root)
            previous_urls = [image.image_url for image in property_obj.images] if "images" in sections else []

            updated = await self.property_repo.update_property(property_obj, root, sections)
            logger.info(f"Property updated by {account.role.value} {account.id}: {property_id}")

        except APIException:
            raise
        except UnknownReferenceError as e:
            raise ValidationError(str(e), field_errors=[{
                "field": "amenity_ids" if e.resource == "amenity" else "class_ids",
                "message": str(e),
            }])
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise BadRequestError(f"Failed to update property: {str(e)}")

        current_urls = {image.image_url for image in updated.images}
        await self._remove_image_files(property_id, [url for url in previous_urls if url not in current_urls])
        return updated

    async def delete_property(self, property_id: str, account: AuthenticatedAccount) -> None:
        """
        Delete a listing with all of its rows, then remove its locally stored images.
        Files still referenced by another listing or an owner profile are kept.
        Failing to remove a file is logged and does not undo the delete.
        """
        try:
            property_obj = await self._get_manageable(property_id, account)
            image_urls = [image.image_url for image in property_obj.images]

            await self.property_repo.delete_property(property_obj)
            logger.info(f"Property deleted by {account.role.value} {account.id}: {property_id}")

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise BadRequestError(f"Failed to delete property: {str(e)}")

        await self._remove_image_files(property_id, image_urls)

    async def update_status(self, property_id: str, status: PropertyStatus) -> Property:
        """Administrator approval: publish (active) or hide (pending) a listing."""
        property_obj = await self.property_repo.get_property_with_details(property_id)
        if not property_obj:
            raise PropertyNotFoundError(property_id)

        updated = await self.property_repo.set_status(property_obj, status)
        logger.info(f"Property {property_id} status set to {status.value}")
        return updated

    async def list_active_properties(
        self,
        filters: ListingFilters,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[Property], int]:
        """Public catalog. Only active listings are ever returned."""
        filters.status = PropertyStatus.ACTIVE
        filters.owner_id = None
        skip = (page - 1) * page_size
        return await self.property_repo.search_properties(filters, skip=skip, limit=page_size)

    async def list_all_properties(
        self,
        status: Optional[PropertyStatus] = None,
        page: int = 1,
        page_size: int = 20
    ) -> Tuple[List[Property], int]:
        """Administrator listing, pending ones included unless filtered out."""
        skip = (page - 1) * page_size
        return await self.property_repo.search_properties(ListingFilters(status=status), skip=skip, limit=page_size)

    async def get_properties_by_class(self, class_name: str, limit: Optional[int] = None) -> List[Property]:
        """Active listings tagged with the class, newest first."""
        return await self.property_repo.get_by_class_name(class_name, limit=limit)

    async def list_properties_for_owner(self, owner_id: str) -> List[Property]:
        return await self.property_repo.list_by_owner(owner_id)

    async def get_manageable_property(self, property_id: str, account: AuthenticatedAccount) -> Property:
        """Load a listing the account is allowed to manage."""
        return await self._get_manageable(property_id, account)

    # Private helper methods

    async def _get_manageable(self, property_id: str, account: AuthenticatedAccount) -> Property:
        property_obj = await self.property_repo.get_property_with_details(property_id)
        if not property_obj:
            raise PropertyNotFoundError(property_id)

        if not self._can_manage(property_obj, account):
            if account is None:
                raise InsufficientPermissionsError("manage this property")
            raise PropertyOwnershipError()

        return property_obj

    @staticmethod
    def _can_manage(property_obj: Property, account: Optional[AuthenticatedAccount]) -> bool:
        if account is None:
            return False
        if account.is_admin:
            return True
        return property_obj.owner_id is not None and property_obj.owner_id == account.id

    @staticmethod
    def _validate_stay_range(property_obj: Property, root: dict) -> None:
        """The schema checks the pair only when both values are sent."""
        minimum_stay = root.get("minimum_stay", property_obj.minimum_stay)
        maximum_stay = root.get("maximum_stay", property_obj.maximum_stay)
        if minimum_stay is not None and maximum_stay is not None and maximum_stay < minimum_stay:
            raise ValidationError("maximum_stay cannot be shorter than minimum_stay")

    async def _remove_image_files(self, property_id: str, image_urls: List[str]) -> None:
        """Remove stored files the listing no longer uses, unless something else still points at them."""
        removed = 0
        for url in dict.fromkeys(image_urls):
            try:
                if await self.property_repo.count_image_url_references(url):
                    logger.debug(f"Keeping image {url} of property {property_id}: still referenced")
                    continue
                if self.file_storage.delete_by_url(url):
                    removed += 1
            except Exception as e:
                logger.warning(f"Could not remove image {url} of property {property_id}: {e}")

        if removed:
            logger.info(f"Removed {removed} image files of property {property_id}")
