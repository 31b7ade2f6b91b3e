"""
Owner service: self-registration, public profiles and profile updates.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.repositories.owner import OwnerRepository
from rentals_api.repositories.property import PropertyRepository
from rentals_api.models.owner import Owner
from rentals_api.models.property import Property
from rentals_api.schemas.owner import OwnerRegister, OwnerUpdate
from rentals_api.utils.exceptions import (
    APIException,
    NotFoundError,
    DuplicateResourceError,
    InactiveAccountError,
    BadRequestError,
    ValidationError,
)
import logging

logger = logging.getLogger(__name__)


class OwnerService:
    """Business rules for owner accounts."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.owner_repo = OwnerRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def register(self, owner_data: OwnerRegister) -> Owner:
        """
        Register a new owner.

        Raises:
            DuplicateResourceError: If the email is already registered
        """
        try:
            if await self.owner_repo.get_by_email(owner_data.email):
                raise DuplicateResourceError("Owner", owner_data.email)

            owner = await self.owner_repo.create_owner(owner_data.model_dump())
            logger.info(f"Owner registered: {owner.email} (ID: {owner.id})")
            return owner

        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to register owner {owner_data.email}: {e}")
            raise BadRequestError(f"Failed to register owner: {str(e)}")

    async def get_public_profile(self, owner_id: str) -> Owner:
        """
        Raises:
            NotFoundError: If the owner does not exist
            InactiveAccountError: If the owner was deactivated
        """
        owner = await self.owner_repo.get_by_id(owner_id)
        if owner is None:
            raise NotFoundError("Owner", owner_id)
        if not owner.is_active:
            raise InactiveAccountError("Owner account is deactivated")
        return owner

    async def update_profile(self, owner: Owner, profile_data: OwnerUpdate) -> Owner:
        """Update the editable profile fields; optional fields may be cleared."""
        try:
            for field, value in profile_data.model_dump().items():
                setattr(owner, field, value)
            await self.db.commit()
            await self.db.refresh(owner)

            logger.info(f"Owner profile updated: {owner.id}")
            return owner

        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update owner profile {owner.id}: {e}")
            raise BadRequestError(f"Failed to update profile: {str(e)}")

    async def list_own_properties(self, owner: Owner) -> List[Property]:
        """Every listing of the owner, pending ones included."""
        return await self.property_repo.list_by_owner(owner.id)
