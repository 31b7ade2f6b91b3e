"""
End-to-end API tests through the ASGI app.
Every request runs on its own session against the shared in-memory database.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import PropertyFactory, TEST_PASSWORD

API = "/api/v1"


async def create_listing(client: AsyncClient, headers: dict, payload: dict) -> dict:
    response = await client.post(f"{API}/properties", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def approve(client: AsyncClient, admin_headers: dict, property_id: str) -> dict:
    response = await client.patch(
        f"{API}/admin/properties/{property_id}/status",
        json={"status": "active"},
        headers=admin_headers
    )
    assert response.status_code == 200, response.text
    return response.json()


class TestAuthenticationAPI:
    """Registration, logins, refresh and the current account."""

    async def test_register_signs_owner_in(self, client: AsyncClient):
        response = await client.post(f"{API}/auth/owners/register", json={
            "full_name": "Carla Dias",
            "email": "Carla@Example.com",
            "password": "segredo123",
            "phone": "+55 85 98888-0000"
        })

        assert response.status_code == 201
        data = response.json()
        assert data["account"]["role"] == "owner"
        assert data["account"]["email"] == "carla@example.com"
        assert data["token_type"] == "bearer"

        me = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert me.status_code == 200
        assert me.json()["name"] == "Carla Dias"

    async def test_register_duplicate_email(self, client: AsyncClient, test_owner):
        response = await client.post(f"{API}/auth/owners/register", json={
            "full_name": "Outra Maria",
            "email": "owner@example.com",
            "password": "segredo123"
        })

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    async def test_owner_login_and_refresh(self, client: AsyncClient, test_owner):
        login = await client.post(f"{API}/auth/owners/login", json={
            "email": "owner@example.com",
            "password": TEST_PASSWORD
        })
        assert login.status_code == 200
        tokens = login.json()
        assert tokens["account"]["id"] == test_owner.id

        refresh = await client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert refresh.status_code == 200
        assert refresh.json()["access_token"]

    async def test_admin_login(self, client: AsyncClient, test_admin):
        response = await client.post(f"{API}/auth/admin/login", json={
            "email": "admin@example.com",
            "password": TEST_PASSWORD
        })

        assert response.status_code == 200
        assert response.json()["account"]["role"] == "admin"

    async def test_wrong_password(self, client: AsyncClient, test_owner):
        response = await client.post(f"{API}/auth/owners/login", json={
            "email": "owner@example.com",
            "password": "wrong-password"
        })

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"

    async def test_me_requires_token(self, client: AsyncClient):
        response = await client.get(f"{API}/auth/me")

        assert response.status_code == 401

    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 401


class TestPropertyAPI:
    """Aggregate create, read, update and delete."""

    async def test_owner_listing_waits_for_approval(
        self, client: AsyncClient, owner_headers, admin_headers, property_payload
    ):
        created = await create_listing(client, owner_headers, property_payload)
        property_id = created["id"]

        assert created["status"] == "pending"
        assert len(created["images"]) == 2
        assert created["images"][0]["is_main"] is True
        assert sorted(amenity["name"] for amenity in created["amenities"]) == ["Piscina", "Wi-Fi"]
        assert created["classes"][0]["name"] == "Imóvel em Destaque"
        assert created["apartments"][0]["rooms"][1]["single_beds"] == 2
        assert created["nearby_beaches"][0]["name"] == "Praia de Iracema"
        assert created["owner"]["full_name"] == "Maria Souza"

        assert (await client.get(f"{API}/properties/{property_id}")).status_code == 404
        assert (await client.get(f"{API}/properties/{property_id}", headers=owner_headers)).status_code == 200

        await approve(client, admin_headers, property_id)

        public = await client.get(f"{API}/properties/{property_id}")
        assert public.status_code == 200
        assert public.json()["pricing"]["daily_rate"] == 300.0

    async def test_admin_listing_is_active(self, client: AsyncClient, admin_headers, property_payload):
        created = await create_listing(client, admin_headers, property_payload)

        assert created["status"] == "active"
        assert created["owner_id"] is None

    async def test_create_requires_authentication(self, client: AsyncClient, property_payload):
        response = await client.post(f"{API}/properties", json=property_payload)

        assert response.status_code == 401

    async def test_create_without_pricing(self, client: AsyncClient, owner_headers, property_payload):
        payload = dict(property_payload)
        del payload["pricing"]

        response = await client.post(f"{API}/properties", json=payload, headers=owner_headers)

        assert response.status_code == 422
        fields = [detail["field"] for detail in response.json()["error"]["details"]]
        assert any("pricing" in field for field in fields)

    async def test_unknown_amenity_is_rejected(self, client: AsyncClient, owner_headers, property_payload):
        payload = dict(property_payload, amenity_ids=[4040])

        response = await client.post(f"{API}/properties", json=payload, headers=owner_headers)

        assert response.status_code == 422
        assert response.json()["error"]["details"][0]["field"] == "amenity_ids"

        mine = await client.get(f"{API}/owners/me/properties", headers=owner_headers)
        assert mine.json() == []

    async def test_update_replaces_only_sent_sections(
        self, client: AsyncClient, owner_headers, property_payload, test_amenities
    ):
        property_id = (await create_listing(client, owner_headers, property_payload))["id"]

        response = await client.put(f"{API}/properties/{property_id}", json={
            "title": "Casa reformada",
            "images": [{"image_url": "/uploads/properties/new.jpg"}],
            "amenity_ids": [test_amenities[2].id],
            "nearby_places": []
        }, headers=owner_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Casa reformada"
        assert [image["image_url"] for image in data["images"]] == ["/uploads/properties/new.jpg"]
        assert [amenity["name"] for amenity in data["amenities"]] == ["Garagem"]
        assert data["nearby_places"] == []
        assert len(data["nearby_beaches"]) == 1
        assert len(data["apartments"]) == 1
        assert data["location"]["city"] == "Fortaleza"

    async def test_update_by_other_owner(
        self, client: AsyncClient, owner_headers, other_owner_headers, property_payload
    ):
        property_id = (await create_listing(client, owner_headers, property_payload))["id"]

        response = await client.put(
            f"{API}/properties/{property_id}",
            json={"title": "Não é meu"},
            headers=other_owner_headers
        )

        assert response.status_code == 403

    async def test_null_title_is_rejected(self, client: AsyncClient, owner_headers, property_payload):
        property_id = (await create_listing(client, owner_headers, property_payload))["id"]

        response = await client.put(f"{API}/properties/{property_id}", json={"title": None}, headers=owner_headers)

        assert response.status_code == 422

    async def test_delete(self, client: AsyncClient, owner_headers, property_payload):
        property_id = (await create_listing(client, owner_headers, property_payload))["id"]

        response = await client.delete(f"{API}/properties/{property_id}", headers=owner_headers)

        assert response.status_code == 204
        assert response.content == b""
        missing = await client.get(f"{API}/properties/{property_id}", headers=owner_headers)
        assert missing.status_code == 404


class TestCatalogAPI:
    """Public listing search and homepage curation."""

    @pytest.fixture
    async def published(self, client: AsyncClient, admin_headers, featured_class):
        beach = await create_listing(client, admin_headers, PropertyFactory.payload(
            title="Casa na praia", city="Fortaleza", class_ids=[featured_class.id]
        ))
        flat = await create_listing(client, admin_headers, PropertyFactory.payload(
            title="Flat em Caucaia", city="Caucaia", max_guests=2, property_style="Apartamento", allows_pets=False
        ))
        return {"beach": beach["id"], "flat": flat["id"]}

    async def test_list_and_filters(self, client: AsyncClient, published, owner_headers):
        await create_listing(client, owner_headers, PropertyFactory.payload(title="Ainda pendente"))

        everything = (await client.get(f"{API}/properties")).json()
        assert everything["total"] == 2
        assert everything["total_pages"] == 1
        assert everything["has_next"] is False

        by_city = (await client.get(f"{API}/properties", params={"city": "caucaia"})).json()
        assert [item["id"] for item in by_city["properties"]] == [published["flat"]]

        by_guests = (await client.get(f"{API}/properties", params={"min_guests": 5})).json()
        assert [item["id"] for item in by_guests["properties"]] == [published["beach"]]

        pets = (await client.get(f"{API}/properties", params={"allows_pets": "false"})).json()
        assert [item["id"] for item in pets["properties"]] == [published["flat"]]

    async def test_pagination(self, client: AsyncClient, published):
        page = (await client.get(f"{API}/properties", params={"page": 1, "page_size": 1})).json()

        assert page["total"] == 2
        assert page["total_pages"] == 2
        assert page["has_next"] is True
        assert len(page["properties"]) == 1
        assert page["properties"][0]["main_image_url"] == "/uploads/properties/cover.jpg"

    async def test_featured(self, client: AsyncClient, published):
        response = await client.get(f"{API}/properties/featured/Imóvel em Destaque")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["properties"][0]["id"] == published["beach"]
        assert data["properties"][0]["class_names"] == ["Imóvel em Destaque"]

    async def test_featured_unknown_class_is_empty(self, client: AsyncClient, published):
        response = await client.get(f"{API}/properties/featured/Inexistente")

        assert response.status_code == 200
        assert response.json()["properties"] == []


class TestBookingAPI:
    """Availability calendar and reservations."""

    @pytest.fixture
    async def listing_id(self, client: AsyncClient, owner_headers, admin_headers, property_payload) -> str:
        property_id = (await create_listing(client, owner_headers, property_payload))["id"]
        await approve(client, admin_headers, property_id)
        return property_id

    async def test_calendar_and_quote(self, client: AsyncClient, listing_id, owner_headers):
        saved = await client.put(f"{API}/properties/{listing_id}/availability", json={"days": [
            {"date": "2031-02-01", "special_price": 450},
            {"date": "2031-02-03", "is_available": False, "notes": "Manutenção"}
        ]}, headers=owner_headers)
        assert saved.status_code == 200
        assert saved.json()["start_date"] == "2031-02-01"
        assert saved.json()["end_date"] == "2031-02-03"

        calendar = await client.get(
            f"{API}/properties/{listing_id}/availability",
            params={"start_date": "2031-02-01", "end_date": "2031-02-28"}
        )
        assert [day["date"] for day in calendar.json()["days"]] == ["2031-02-01", "2031-02-03"]

        quote = await client.get(
            f"{API}/properties/{listing_id}/availability/check",
            params={"check_in_date": "2031-02-01", "check_out_date": "2031-02-03"}
        )
        assert quote.json()["available"] is True
        assert quote.json()["nights"] == 2
        assert quote.json()["total_amount"] == 750.0

        blocked = await client.get(
            f"{API}/properties/{listing_id}/availability/check",
            params={"check_in_date": "2031-02-02", "check_out_date": "2031-02-05"}
        )
        assert blocked.json()["available"] is False
        assert blocked.json()["total_amount"] is None

    async def test_duplicate_calendar_dates(self, client: AsyncClient, listing_id, owner_headers):
        response = await client.put(f"{API}/properties/{listing_id}/availability", json={"days": [
            {"date": "2031-02-01"},
            {"date": "2031-02-01", "is_available": False}
        ]}, headers=owner_headers)

        assert response.status_code == 422

    async def test_reservation_workflow(self, client: AsyncClient, listing_id, owner_headers, other_owner_headers):
        guest = {
            "guest_name": "Ana Lima",
            "guest_email": "ana@example.com",
            "check_in_date": "2031-03-10",
            "check_out_date": "2031-03-13",
            "number_of_guests": 2
        }
        created = await client.post(f"{API}/properties/{listing_id}/reservations", json=guest)
        assert created.status_code == 201
        reservation = created.json()
        assert reservation["status"] == "pending"
        assert reservation["total_amount"] == 900.0

        forbidden = await client.patch(
            f"{API}/reservations/{reservation['id']}/status",
            json={"status": "confirmed"},
            headers=other_owner_headers
        )
        assert forbidden.status_code == 403

        confirmed = await client.patch(
            f"{API}/reservations/{reservation['id']}/status",
            json={"status": "confirmed", "payment_status": "paid"},
            headers=owner_headers
        )
        assert confirmed.status_code == 200
        assert confirmed.json()["payment_status"] == "paid"

        overlapping = await client.post(
            f"{API}/properties/{listing_id}/reservations",
            json=dict(guest, check_in_date="2031-03-12", check_out_date="2031-03-15")
        )
        assert overlapping.status_code == 409

        listed = await client.get(
            f"{API}/properties/{listing_id}/reservations",
            params={"status": "confirmed"},
            headers=owner_headers
        )
        assert listed.json()["total"] == 1

    async def test_reservation_rules(self, client: AsyncClient, listing_id):
        base = {
            "guest_name": "Ana Lima",
            "guest_email": "ana@example.com",
            "check_in_date": "2031-04-10",
            "check_out_date": "2031-04-11",
            "number_of_guests": 2
        }

        too_short = await client.post(f"{API}/properties/{listing_id}/reservations", json=base)
        assert too_short.status_code == 400
        assert "minimum_stay" in too_short.json()["error"]["message"]

        reversed_dates = await client.post(
            f"{API}/properties/{listing_id}/reservations",
            json=dict(base, check_out_date="2031-04-09")
        )
        assert reversed_dates.status_code == 422

    async def test_missing_listing(self, client: AsyncClient):
        response = await client.get(
            f"{API}/properties/does-not-exist/availability/check",
            params={"check_in_date": "2031-02-01", "check_out_date": "2031-02-03"}
        )

        assert response.status_code == 404


class TestLookupAPI:
    """Amenities and property classes."""

    async def test_public_list_hides_inactive(self, client: AsyncClient, test_amenities, admin_headers):
        deactivated = await client.patch(
            f"{API}/amenities/{test_amenities[0].id}/status",
            json={"is_active": False},
            headers=admin_headers
        )
        assert deactivated.status_code == 200
        assert deactivated.json()["is_active"] is False

        public = await client.get(f"{API}/amenities")
        assert "Piscina" not in [amenity["name"] for amenity in public.json()]

        full = await client.get(f"{API}/amenities", params={"include_inactive": "true"}, headers=admin_headers)
        assert "Piscina" in [amenity["name"] for amenity in full.json()]

    async def test_inactive_listing_needs_admin(self, client: AsyncClient, owner_headers):
        response = await client.get(f"{API}/amenities", params={"include_inactive": "true"}, headers=owner_headers)

        assert response.status_code == 403

    async def test_grouped(self, client: AsyncClient, test_amenities):
        response = await client.get(f"{API}/amenities/grouped")

        assert [group["category"] for group in response.json()] == ["apartamento", "comum", "edificio"]

    async def test_admin_creates_entries(self, client: AsyncClient, admin_headers, owner_headers):
        created = await client.post(
            f"{API}/property-classes",
            json={"name": "Destaque em Casas"},
            headers=admin_headers
        )
        assert created.status_code == 201

        duplicate = await client.post(
            f"{API}/property-classes",
            json={"name": "Destaque em Casas"},
            headers=admin_headers
        )
        assert duplicate.status_code == 409

        by_owner = await client.post(f"{API}/amenities", json={"name": "Sauna"}, headers=owner_headers)
        assert by_owner.status_code == 403

        renamed = await client.put(
            f"{API}/property-classes/{created.json()['id']}",
            json={"description": "Casas na home"},
            headers=admin_headers
        )
        assert renamed.json()["description"] == "Casas na home"


class TestOwnerAPI:

    async def test_profile(self, client: AsyncClient, owner_headers, test_owner):
        me = await client.get(f"{API}/owners/me", headers=owner_headers)
        assert me.json()["email"] == "owner@example.com"

        updated = await client.put(f"{API}/owners/me", json={
            "full_name": "Maria Souza Lima",
            "instagram": "@marialima"
        }, headers=owner_headers)
        assert updated.status_code == 200
        assert updated.json()["instagram"] == "@marialima"

        public = await client.get(f"{API}/owners/{test_owner.id}")
        assert public.json()["full_name"] == "Maria Souza Lima"
        assert "is_active" not in public.json()

    async def test_admin_token_cannot_use_owner_routes(self, client: AsyncClient, admin_headers):
        response = await client.get(f"{API}/owners/me", headers=admin_headers)

        assert response.status_code == 403


class TestAdminAPI:
    """Back-office endpoints."""

    async def test_owner_routes_need_admin(self, client: AsyncClient, owner_headers):
        response = await client.get(f"{API}/admin/owners", headers=owner_headers)

        assert response.status_code == 403

    async def test_owner_management(
        self, client: AsyncClient, admin_headers, owner_headers, test_owner, other_owner, property_payload
    ):
        property_id = (await create_listing(client, owner_headers, property_payload))["id"]

        owners = (await client.get(f"{API}/admin/owners", headers=admin_headers)).json()
        counts = {owner["id"]: owner["property_count"] for owner in owners["owners"]}
        assert counts == {test_owner.id: 1, other_owner.id: 0}

        bulk = await client.post(f"{API}/admin/owners/bulk-status", json={
            "owner_ids": [test_owner.id, other_owner.id],
            "is_active": False
        }, headers=admin_headers)
        assert bulk.json()["affected"] == 2

        # Deactivated owners lose access immediately
        blocked = await client.get(f"{API}/owners/me", headers=owner_headers)
        assert blocked.status_code == 401

        deleted = await client.delete(f"{API}/admin/owners/{test_owner.id}", headers=admin_headers)
        assert deleted.status_code == 200

        listing = await client.get(f"{API}/properties/{property_id}", headers=admin_headers)
        assert listing.status_code == 200
        assert listing.json()["owner_id"] is None

        missing = await client.delete(f"{API}/admin/owners/{test_owner.id}", headers=admin_headers)
        assert missing.status_code == 404

    async def test_pending_queue(self, client: AsyncClient, admin_headers, owner_headers, property_payload):
        await create_listing(client, owner_headers, property_payload)
        await create_listing(client, admin_headers, property_payload)

        pending = (await client.get(f"{API}/admin/properties", params={"status": "pending"}, headers=admin_headers)).json()
        everything = (await client.get(f"{API}/admin/properties", headers=admin_headers)).json()

        assert pending["total"] == 1
        assert everything["total"] == 2

    async def test_admin_accounts(self, client: AsyncClient, admin_headers, test_admin):
        created = await client.post(f"{API}/admin/users", json={
            "name": "Segundo Admin",
            "email": "second@example.com",
            "password": "segredo123"
        }, headers=admin_headers)
        assert created.status_code == 201

        self_deactivate = await client.patch(
            f"{API}/admin/users/{test_admin.id}/status",
            json={"is_active": False},
            headers=admin_headers
        )
        assert self_deactivate.status_code == 403

        listed = await client.get(f"{API}/admin/users", headers=admin_headers)
        assert listed.json()["total"] == 2

    async def test_debug_endpoints(self, client: AsyncClient, admin_headers, featured_class, property_payload):
        await create_listing(client, admin_headers, property_payload)

        database = await client.get(f"{API}/admin/debug/database", headers=admin_headers)
        assert database.status_code == 200
        assert database.json()["connected"] is True
        assert database.json()["tables"]["properties"] == 1
        assert database.json()["tables"]["property_images"] == 2

        classes = await client.get(f"{API}/admin/debug/classes", headers=admin_headers)
        report = classes.json()
        assert report["classes"][0]["name"] == "Imóvel em Destaque"
        assert report["classes"][0]["property_count"] == 1
        assert report["active_properties"][0]["class_names"] == ["Imóvel em Destaque"]


class TestHealthAPI:

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["api_prefix"] == API

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    async def test_database_health(self, client: AsyncClient):
        response = await client.get("/health/db")

        assert response.json()["status"] == "healthy"
