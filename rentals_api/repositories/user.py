"""
Administrator repository for back-office account management.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from rentals_api.repositories.base import BaseRepository
from rentals_api.models.user import User
from rentals_api.utils.auth import hash_password
from typing import Optional, List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for administrator accounts."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new administrator with email validation and password hashing.

        Args:
            user_data: Must include name, email, password. Optional: phone, is_active

        Raises:
            ValueError: If validation fails or the email is already registered
        """
        data = dict(user_data)
        email = User.validate_email_format(data["email"])

        if await self.get_by_email(email):
            raise ValueError(f"User with email {email} already exists")

        create_data = {
            "name": data["name"],
            "email": email,
            "phone": data.get("phone"),
            "hashed_password": hash_password(data["password"]),
            "is_active": data.get("is_active", True),
        }

        created_user = await self.create(create_data)
        logger.info(f"Created administrator: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        normalized_email = email.lower().strip()
        result = await self.db.execute(select(User).where(User.email == normalized_email))
        return result.scalar_one_or_none()

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Check administrator credentials.

        Returns:
            The user when the password matches (active or not), None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: administrator {email} not found")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def list_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def set_active(self, user: User, is_active: bool) -> User:
        try:
            user.is_active = is_active
            await self.db.commit()
            await self.db.refresh(user)
            logger.info(f"Administrator {user.email} active={is_active}")
            return user
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update administrator {user.id} status: {e}")
            raise
