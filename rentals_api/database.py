"""
Database connection and session management.
Handles async database operations with SQLAlchemy and connection pooling.
"""

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import event, text
from rentals_api.config import settings
from typing import AsyncGenerator
import logging

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    PostgreSQL gets the pooled configuration; SQLite (tests, local tooling)
    gets foreign key enforcement so ON DELETE rules behave as on PostgreSQL.
    """
    if database_url.startswith("sqlite"):
        sqlite_engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_foreign_keys(sqlite_engine)
        return sqlite_engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Validate connections before use
        pool_recycle=3600,
        pool_timeout=30,
        connect_args={
            "server_settings": {
                "application_name": "rentals_api",
            }
        }
    )


def enable_sqlite_foreign_keys(target_engine: AsyncEngine) -> None:
    """Turn on SQLite foreign key enforcement for every new connection."""

    @event.listens_for(target_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = build_engine(settings.database_url, echo=settings.debug)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session.
    Yields an async database session and ensures it's closed after use.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def test_database_connection() -> bool:
    """
    Test database connectivity.
    Returns True if connection is successful, False otherwise.
    """
    try:
        async with AsyncSessionLocal() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            logger.info("Database connection successful")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def create_tables(target_engine: AsyncEngine = None) -> None:
    """Create all database tables."""
    import rentals_api.models  # noqa: F401  registers every mapper on Base.metadata

    async with (target_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")


async def drop_tables(target_engine: AsyncEngine = None) -> None:
    """
    Drop all database tables.
    This should only be used in testing or development.
    """
    if settings.is_production:
        raise RuntimeError("Cannot drop tables in production environment")

    import rentals_api.models  # noqa: F401

    async with (target_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped successfully")


async def close_db_connection() -> None:
    """
    Close database connection.
    This should be called during application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")
