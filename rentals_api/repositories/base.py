"""
Base repository class with common CRUD operations using async SQLAlchemy.
Provides generic database operations that can be extended by specific repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from rentals_api.database import Base
from typing import TypeVar, Generic, Optional, List, Dict, Any, Type, Union
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
RecordId = Union[int, str]


class BaseRepository(Generic[ModelType]):
    """
    Base repository class providing common CRUD operations.
    Writes go through ORM instances so relationship cascades and onupdate hooks run.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository with model class and database session.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record in the database.

        Args:
            obj_in: Dictionary of field values for the new record

        Returns:
            Created model instance

        Raises:
            Exception: If database operation fails
        """
        try:
            db_obj = self.model(**obj_in)
            self.db.add(db_obj)
            await self.db.commit()
            await self.db.refresh(db_obj)
            logger.debug(f"Created {self.model.__name__} with id: {db_obj.id}")
            return db_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create {self.model.__name__}: {e}")
            raise

    async def get_by_id(self, id: RecordId) -> Optional[ModelType]:
        """
        Get a record by its ID.

        Returns:
            Model instance if found, None otherwise
        """
        try:
            obj = await self.db.get(self.model, id)

            if obj:
                logger.debug(f"Retrieved {self.model.__name__} with id: {id}")
            else:
                logger.debug(f"{self.model.__name__} with id {id} not found")

            return obj
        except Exception as e:
            logger.error(f"Failed to get {self.model.__name__} by id {id}: {e}")
            raise

    async def update(self, id: RecordId, obj_in: Dict[str, Any]) -> Optional[ModelType]:
        """
        Update a record by its ID.

        Keys with a None value are ignored; use explicit setters for nullable resets.

        Returns:
            Updated model instance if found, None otherwise

        Raises:
            Exception: If database operation fails
        """
        try:
            db_obj = await self.get_by_id(id)
            if db_obj is None:
                logger.debug(f"{self.model.__name__} with id {id} not found for update")
                return None

            update_data = {k: v for k, v in obj_in.items() if v is not None}
            if not update_data:
                logger.warning(f"No valid data provided for updating {self.model.__name__} {id}")
                return db_obj

            for field, value in update_data.items():
                setattr(db_obj, field, value)

            await self.db.commit()
            await self.db.refresh(db_obj)
            logger.debug(f"Updated {self.model.__name__} with id: {id}")
            return db_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update {self.model.__name__} {id}: {e}")
            raise

    async def exists(self, id: RecordId) -> bool:
        return await self.get_by_id(id) is not None

    async def get_by_ids(self, ids: List[RecordId]) -> List[ModelType]:
        if not ids:
            return []
        result = await self.db.execute(select(self.model).where(self.model.id.in_(ids)))
        return list(result.scalars().all())

