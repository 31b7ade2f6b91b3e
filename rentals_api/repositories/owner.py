"""
Owner repository for registration, authentication and admin account management.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from rentals_api.repositories.base import BaseRepository
from rentals_api.models.owner import Owner
from rentals_api.models.user import User
from rentals_api.models.property import Property
from rentals_api.utils.auth import hash_password
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)


class OwnerRepository(BaseRepository[Owner]):
    """Repository for owner accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(Owner, db)

    async def create_owner(self, owner_data: Dict[str, Any]) -> Owner:
        """
        Register a new owner with a hashed password.

        Args:
            owner_data: Must include full_name, email, password. Optional: phone, instagram, website

        Raises:
            ValueError: If the email is invalid or already registered
        """
        data = dict(owner_data)
        email = User.validate_email_format(data["email"])

        if await self.get_by_email(email):
            raise ValueError(f"Owner with email {email} already exists")

        create_data = {
            "full_name": data["full_name"].strip(),
            "email": email,
            "hashed_password": hash_password(data["password"]),
            "phone": data.get("phone") or None,
            "instagram": data.get("instagram") or None,
            "website": data.get("website") or None,
            "profile_image": data.get("profile_image") or None,
            "is_active": data.get("is_active", True),
        }

        owner = await self.create(create_data)
        logger.info(f"Registered owner: {owner.email} (ID: {owner.id})")
        return owner

    async def get_by_email(self, email: str) -> Optional[Owner]:
        normalized_email = email.lower().strip()
        result = await self.db.execute(select(Owner).where(Owner.email == normalized_email))
        return result.scalar_one_or_none()

    async def authenticate(self, email: str, password: str) -> Optional[Owner]:
        """Return the owner when the password matches, None otherwise."""
        owner = await self.get_by_email(email)

        if not owner:
            logger.debug(f"Authentication failed: owner {email} not found")
            return None

        if not owner.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return owner

    async def list_with_property_counts(self) -> List[Tuple[Owner, int]]:
        """All owners, newest first, with the number of listings each one has."""
        property_count = (
            select(func.count(Property.id))
            .where(Property.owner_id == Owner.id)
            .correlate(Owner)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(Owner, property_count).order_by(Owner.created_at.desc())
        )
        return [(owner, count) for owner, count in result.all()]

    async def set_active(self, owner_ids: List[str], is_active: bool) -> int:
        """Activate or deactivate owners; returns how many rows matched."""
        try:
            owners = await self.get_by_ids(owner_ids)
            for owner in owners:
                owner.is_active = is_active
            await self.db.commit()
            logger.info(f"Set active={is_active} for {len(owners)} owners")
            return len(owners)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update owner status: {e}")
            raise

    async def delete_owners(self, owner_ids: List[str]) -> int:
        """
        Delete owners and detach their listings in one transaction.
        Listings survive with a null owner.
        """
        if not owner_ids:
            return 0
        try:
            await self.db.execute(
                update(Property)
                .where(Property.owner_id.in_(owner_ids))
                .values(owner_id=None)
            )
            result = await self.db.execute(delete(Owner).where(Owner.id.in_(owner_ids)))
            await self.db.commit()
            deleted = result.rowcount or 0
            logger.info(f"Deleted {deleted} owners")
            return deleted
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete owners {owner_ids}: {e}")
            raise

    async def delete_all(self) -> int:
        """Remove every owner account, detaching all listings."""
        result = await self.db.execute(select(Owner.id))
        return await self.delete_owners([row[0] for row in result.all()])
