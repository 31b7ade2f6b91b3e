"""
Administrator service: back-office accounts and owner management.
"""

from typing import List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.repositories.user import UserRepository
from rentals_api.repositories.owner import OwnerRepository
from rentals_api.models.user import User
from rentals_api.models.owner import Owner
from rentals_api.schemas.user import AdminCreate
from rentals_api.utils.exceptions import (
    APIException,
    NotFoundError,
    ForbiddenError,
    DuplicateResourceError,
    BadRequestError,
)
import logging

logger = logging.getLogger(__name__)


class AdminService:
    """
    Account management performed by administrators.
    Deleting an owner keeps their listings, which are left without an owner.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.owner_repo = OwnerRepository(db_session)

    # Administrators

    async def create_admin(self, user_data: AdminCreate) -> User:
        """
        Raises:
            DuplicateResourceError: If the email is already registered
        """
        try:
            if await self.user_repo.get_by_email(user_data.email):
                raise DuplicateResourceError("User", user_data.email)

            user = await self.user_repo.create_user(user_data.model_dump())
            logger.info(f"Administrator created: {user.email} (ID: {user.id})")
            return user

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to create administrator {user_data.email}: {e}")
            raise BadRequestError(f"Failed to create administrator: {str(e)}")

    async def list_admins(self) -> List[User]:
        return await self.user_repo.list_users()

    async def set_admin_active(self, user_id: int, is_active: bool, current_user: User) -> User:
        """
        Raises:
            NotFoundError: If the administrator does not exist
            ForbiddenError: If an administrator tries to deactivate themselves
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        if user.id == current_user.id and not is_active:
            raise ForbiddenError("Administrators cannot deactivate their own account")

        user = await self.user_repo.set_active(user, is_active)
        status_text = "activated" if is_active else "deactivated"
        logger.info(f"Administrator {status_text} by {current_user.email}: {user_id}")
        return user

    # Owners

    async def list_owners(self) -> List[Tuple[Owner, int]]:
        return await self.owner_repo.list_with_property_counts()

    async def set_owner_active(self, owner_id: str, is_active: bool) -> Owner:
        owner = await self.owner_repo.get_by_id(owner_id)
        if owner is None:
            raise NotFoundError("Owner", owner_id)

        await self.owner_repo.set_active([owner_id], is_active)
        await self.db.refresh(owner)
        return owner

    async def bulk_set_owner_active(self, owner_ids: List[str], is_active: bool) -> int:
        try:
            return await self.owner_repo.set_active(list(dict.fromkeys(owner_ids)), is_active)
        except Exception as e:
            logger.error(f"Bulk status update failed: {e}")
            raise BadRequestError(f"Failed to update owners: {str(e)}")

    async def delete_owner(self, owner_id: str) -> None:
        if not await self.owner_repo.exists(owner_id):
            raise NotFoundError("Owner", owner_id)
        await self.bulk_delete_owners([owner_id])

    async def bulk_delete_owners(self, owner_ids: List[str]) -> int:
        """Delete owners; their properties stay with a null owner."""
        try:
            deleted = await self.owner_repo.delete_owners(list(dict.fromkeys(owner_ids)))
            logger.info(f"Deleted {deleted} owner accounts")
            return deleted
        except Exception as e:
            logger.error(f"Failed to delete owners {owner_ids}: {e}")
            raise BadRequestError(f"Failed to delete owners: {str(e)}")
