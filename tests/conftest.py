"""
Test configuration and fixtures for the rentals API.
Provides an in-memory database per test, an HTTP client bound to the app,
account fixtures with ready-made auth headers and payload factories.
"""

import os
import tempfile

# Settings are read at import time, so the environment must be prepared first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="rentals-uploads-")

import io
import uuid
import pytest
from typing import AsyncGenerator, Dict, Any, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport
from PIL import Image

import rentals_api.models  # noqa: F401
from rentals_api.main import app
from rentals_api.database import Base, get_db, enable_sqlite_foreign_keys
from rentals_api.models.user import User
from rentals_api.models.owner import Owner
from rentals_api.models.catalog import Amenity, PropertyClass
from rentals_api.repositories.user import UserRepository
from rentals_api.repositories.owner import OwnerRepository
from rentals_api.repositories.catalog import AmenityRepository, PropertyClassRepository
from rentals_api.services.auth import AuthenticatedAccount
from rentals_api.utils.auth import AccountRole, create_access_token


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with the full schema for every test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Session used by repository and service tests and by the fixtures that seed data."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client; every request gets its own session on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as async_client:
        yield async_client

    app.dependency_overrides.clear()


# Test data factories

class AccountFactory:
    """Factory for administrator and owner accounts."""

    @staticmethod
    async def create_admin(
        session: AsyncSession,
        email: Optional[str] = None,
        name: str = "Test Admin",
        is_active: bool = True
    ) -> User:
        return await UserRepository(session).create_user({
            "name": name,
            "email": email or f"admin{uuid.uuid4().hex[:8]}@example.com",
            "password": TEST_PASSWORD,
            "is_active": is_active
        })

    @staticmethod
    async def create_owner(
        session: AsyncSession,
        email: Optional[str] = None,
        full_name: str = "Test Owner",
        is_active: bool = True
    ) -> Owner:
        return await OwnerRepository(session).create_owner({
            "full_name": full_name,
            "email": email or f"owner{uuid.uuid4().hex[:8]}@example.com",
            "password": TEST_PASSWORD,
            "phone": "+55 85 99999-0000",
            "instagram": "@casadapraia",
            "is_active": is_active
        })

    @staticmethod
    def headers_for(account: AuthenticatedAccount) -> Dict[str, str]:
        token = create_access_token(subject=account.id, email=account.account.email, role=account.role)
        return {"Authorization": f"Bearer {token}"}


class CatalogFactory:
    """Factory for lookup entries."""

    @staticmethod
    async def create_amenity(
        session: AsyncSession,
        name: Optional[str] = None,
        category: str = "comum",
        icon: str = "waves"
    ) -> Amenity:
        return await AmenityRepository(session).create({
            "name": name or f"Amenity {uuid.uuid4().hex[:6]}",
            "category": category,
            "icon": icon,
            "description": "Test amenity"
        })

    @staticmethod
    async def create_class(session: AsyncSession, name: Optional[str] = None) -> PropertyClass:
        return await PropertyClassRepository(session).create({
            "name": name or f"Class {uuid.uuid4().hex[:6]}",
            "description": "Test class"
        })


class PropertyFactory:
    """Factory for listing payloads as sent by clients."""

    @staticmethod
    def payload(
        title: str = "Casa pé na areia",
        city: str = "Fortaleza",
        daily_rate: float = 300.00,
        max_guests: int = 6,
        amenity_ids: Optional[List[int]] = None,
        class_ids: Optional[List[int]] = None,
        **overrides: Any
    ) -> Dict[str, Any]:
        data = {
            "title": title,
            "short_description": "Casa com piscina perto da praia",
            "full_description": "Casa ampla com quatro quartos e área gourmet.",
            "max_guests": max_guests,
            "bedrooms": 3,
            "bathrooms": 2,
            "parking_spaces": 1,
            "allows_pets": True,
            "property_style": "Casa",
            "minimum_stay": 2,
            "maximum_stay": 30,
            "check_in_time": "14:00",
            "check_out_time": "11:00",
            "pricing": {
                "monthly_rent": 4500.00,
                "daily_rate": daily_rate,
                "condominium_fee": 350.00,
                "includes_internet": True
            },
            "location": {
                "full_address": "Av. Beira Mar, 1000",
                "neighborhood": "Meireles",
                "municipality": city,
                "city": city,
                "state": "CE",
                "zip_code": "60165-121",
                "latitude": -3.7251,
                "longitude": -38.4939,
                "popular_destination": "Fortaleza"
            },
            "house_rules": {
                "check_in_rule": "A partir das 14h",
                "pets_rule": "Pets pequenos permitidos"
            },
            "payment_methods": {"accepts_pix": True, "accepts_visa": True},
            "images": [
                {"image_url": "/uploads/properties/cover.jpg", "alt_text": "Fachada"},
                {"image_url": "/uploads/properties/pool.jpg"}
            ],
            "amenity_ids": amenity_ids or [],
            "class_ids": class_ids or [],
            "nearby_places": [{"name": "Mercado Central", "distance": "1,2 km"}],
            "nearby_beaches": [{"name": "Praia de Iracema", "distance": "500 m"}],
            "nearby_airports": [{"name": "Aeroporto Pinto Martins", "distance": "12 km"}],
            "nearby_restaurants": [],
            "apartments": [
                {
                    "name": "Apartamento 101",
                    "total_bathrooms": 1,
                    "has_kitchen": True,
                    "rooms": [
                        {"room_number": 1, "double_beds": 1},
                        {"room_number": 2, "single_beds": 2}
                    ]
                }
            ]
        }
        data.update(overrides)
        return data


def make_image_bytes(image_format: str = "PNG", size=(8, 8)) -> bytes:
    """Small valid image generated with Pillow."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


# Common test fixtures

@pytest.fixture
async def test_admin(db_session: AsyncSession) -> AuthenticatedAccount:
    user = await AccountFactory.create_admin(db_session, email="admin@example.com")
    return AuthenticatedAccount(AccountRole.ADMIN, user)


@pytest.fixture
async def test_owner(db_session: AsyncSession) -> AuthenticatedAccount:
    owner = await AccountFactory.create_owner(db_session, email="owner@example.com", full_name="Maria Souza")
    return AuthenticatedAccount(AccountRole.OWNER, owner)


@pytest.fixture
async def other_owner(db_session: AsyncSession) -> AuthenticatedAccount:
    owner = await AccountFactory.create_owner(db_session, email="other@example.com", full_name="João Lima")
    return AuthenticatedAccount(AccountRole.OWNER, owner)


@pytest.fixture
def admin_headers(test_admin: AuthenticatedAccount) -> Dict[str, str]:
    return AccountFactory.headers_for(test_admin)


@pytest.fixture
def owner_headers(test_owner: AuthenticatedAccount) -> Dict[str, str]:
    return AccountFactory.headers_for(test_owner)


@pytest.fixture
def other_owner_headers(other_owner: AuthenticatedAccount) -> Dict[str, str]:
    return AccountFactory.headers_for(other_owner)


@pytest.fixture
async def test_amenities(db_session: AsyncSession) -> List[Amenity]:
    return [
        await CatalogFactory.create_amenity(db_session, name="Piscina", category="comum", icon="waves"),
        await CatalogFactory.create_amenity(db_session, name="Wi-Fi", category="apartamento", icon="wifi"),
        await CatalogFactory.create_amenity(db_session, name="Garagem", category="edificio", icon="car"),
    ]


@pytest.fixture
async def featured_class(db_session: AsyncSession) -> PropertyClass:
    return await CatalogFactory.create_class(db_session, name="Imóvel em Destaque")


@pytest.fixture
def property_payload(test_amenities: List[Amenity], featured_class: PropertyClass) -> Dict[str, Any]:
    return PropertyFactory.payload(
        amenity_ids=[test_amenities[0].id, test_amenities[1].id],
        class_ids=[featured_class.id]
    )
