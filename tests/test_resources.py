# ==============================================================================
# RESOURCE ENDPOINT TESTS
# ==============================================================================
# Tests for the generic CRUD endpoints shared by every entity
# ==============================================================================

from typing import Dict
from uuid import uuid4

import pytest
from httpx import AsyncClient

from healthfit.entities.catalogue import ENTITY_FIELDS
from healthfit.entities.fields import SemanticType

ENTITY_NAMES = list(ENTITY_FIELDS)

REQUIRED_FIELDS = [
    (entity, descriptor.name)
    for entity, fields in ENTITY_FIELDS.items()
    for descriptor in fields
    if descriptor.required
]


class TestCrudAcrossEntities:
    """Tests running the same lifecycle against every built-in entity."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entity", ENTITY_NAMES)
    async def test_full_lifecycle(
        self, client: AsyncClient, sample_payloads: Dict[str, dict], entity: str
    ):
        """Test create, list, get, update and delete."""
        payload = sample_payloads[entity]

        # Create
        response = await client.post(f"/api/{entity}", json=payload)
        assert response.status_code == 201, response.text
        created = response.json()

        assert "_id" in created
        assert "createdAt" in created
        for key in payload:
            assert key in created

        item_id = created["_id"]

        # List
        response = await client.get(f"/api/{entity}")
        assert response.status_code == 200
        assert [r["_id"] for r in response.json()] == [item_id]

        # Get
        response = await client.get(f"/api/{entity}/{item_id}")
        assert response.status_code == 200
        assert response.json() == created

        # Update one text field
        text_field = next(
            f.name for f in ENTITY_FIELDS[entity] if f.semantic_type is SemanticType.TEXT
        )
        response = await client.put(
            f"/api/{entity}/{item_id}",
            json={text_field: "Updated"},
        )
        assert response.status_code == 200
        assert response.json()[text_field] == "Updated"

        # Delete
        response = await client.delete(f"/api/{entity}/{item_id}")
        assert response.status_code == 200
        assert response.json() == {"message": "Item deleted successfully"}

        response = await client.get(f"/api/{entity}/{item_id}")
        assert response.status_code == 404


class TestCreate:
    """Tests for POST /api/{entity}."""

    @pytest.mark.asyncio
    async def test_values_round_trip(self, client: AsyncClient, sample_payloads):
        response = await client.post("/api/products", json=sample_payloads["products"])
        data = response.json()

        assert data["productName"] == "Yoga Mat"
        assert data["price"] == 29.99
        assert data["stock"] == 12

    @pytest.mark.asyncio
    async def test_date_returned_as_iso(self, client: AsyncClient, sample_payloads):
        response = await client.post("/api/goals", json=sample_payloads["goals"])

        assert response.json()["deadline"].startswith("2025-06-30T00:00:00")

    @pytest.mark.asyncio
    async def test_large_integer_round_trip(self, client: AsyncClient, sample_payloads):
        """Test create returns exactly what a later get returns."""
        payload = {**sample_payloads["products"], "stock": 9007199254740993}

        created = (await client.post("/api/products", json=payload)).json()
        fetched = (await client.get(f"/api/products/{created['_id']}")).json()

        assert created["stock"] == 9007199254740993
        assert fetched == created

    @pytest.mark.asyncio
    async def test_date_at_end_of_range(self, client: AsyncClient, sample_payloads):
        """Test a date that cannot be shifted to UTC is a client error."""
        payload = {**sample_payloads["goals"], "deadline": "9999-12-31T23:00:00-05:00"}

        response = await client.post("/api/goals", json=payload)

        assert response.status_code == 400
        assert response.json()["message"] == "deadline must be a valid date"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("entity,field", REQUIRED_FIELDS)
    @pytest.mark.parametrize("mode", ["omitted", "blank"])
    async def test_missing_required_field(
        self,
        client: AsyncClient,
        sample_payloads,
        entity: str,
        field: str,
        mode: str,
    ):
        """Test rejection, error shape, and that nothing was stored."""
        payload = dict(sample_payloads[entity])
        if mode == "omitted":
            del payload[field]
        else:
            payload[field] = ""

        response = await client.post(f"/api/{entity}", json=payload)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == f"{field} is required"
        assert data["error"]["code"] == "VALIDATION_ERROR"
        assert field in data["error"]["details"]["validation_errors"]

        response = await client.get(f"/api/{entity}")
        assert response.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating,expected", [(0, 400), (1, 201), (5, 201), (6, 400)])
    async def test_rating_bounds(
        self, client: AsyncClient, sample_payloads, rating: int, expected: int
    ):
        payload = {**sample_payloads["feedbacks"], "rating": rating}

        response = await client.post("/api/feedbacks", json=payload)

        assert response.status_code == expected

    @pytest.mark.asyncio
    async def test_unknown_keys_not_stored(self, client: AsyncClient, sample_payloads):
        payload = {
            **sample_payloads["trainers"],
            "_id": "client-chosen",
            "createdAt": "1999-01-01",
            "nickname": "ignored",
        }

        response = await client.post("/api/trainers", json=payload)

        assert response.status_code == 201
        data = response.json()
        assert data["_id"] != "client-chosen"
        assert not data["createdAt"].startswith("1999")
        assert "nickname" not in data

    @pytest.mark.asyncio
    async def test_optional_field_omitted(self, client: AsyncClient, sample_activity_data):
        del sample_activity_data["notes"]

        response = await client.post("/api/activities", json=sample_activity_data)

        assert response.status_code == 201
        assert "notes" not in response.json()

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client: AsyncClient, sample_payloads):
        """Test unique email is enforced."""
        payload = sample_payloads["users"]

        first = await client.post("/api/users", json=payload)
        second = await client.post("/api/users", json={**payload, "name": "Other"})

        assert first.status_code == 201
        assert second.status_code == 400
        assert second.json()["error"]["code"] == "CONFLICT"
        assert second.json()["message"] == "email already exists"

    @pytest.mark.asyncio
    async def test_malformed_json(self, client: AsyncClient):
        response = await client.post(
            "/api/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_array_body(self, client: AsyncClient):
        response = await client.post("/api/users", json=[{"name": "x"}])

        assert response.status_code == 400
        assert response.json()["message"] == "Request body must be a JSON object"


class TestUpdate:
    """Tests for PUT /api/{entity}/{id}."""

    @pytest.mark.asyncio
    async def test_merge_preserves_identity(self, client: AsyncClient, sample_payloads):
        """Test id and createdAt survive, untouched fields are kept."""
        created = (await client.post("/api/goals", json=sample_payloads["goals"])).json()

        response = await client.put(
            f"/api/goals/{created['_id']}",
            json={"currentValue": 4, "_id": "hijack", "createdAt": "2000-01-01"},
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["_id"] == created["_id"]
        assert updated["createdAt"] == created["createdAt"]
        assert updated["currentValue"] == 4
        assert updated["goalName"] == created["goalName"]

        fetched = (await client.get(f"/api/goals/{created['_id']}")).json()
        assert fetched == updated

    @pytest.mark.asyncio
    async def test_empty_required_rejected(self, client: AsyncClient, sample_payloads):
        created = (await client.post("/api/goals", json=sample_payloads["goals"])).json()

        response = await client.put(f"/api/goals/{created['_id']}", json={"goalName": ""})

        assert response.status_code == 400
        fetched = (await client.get(f"/api/goals/{created['_id']}")).json()
        assert fetched["goalName"] == "Run 5k"

    @pytest.mark.asyncio
    async def test_update_bounds(self, client: AsyncClient, sample_payloads):
        created = (await client.post("/api/feedbacks", json=sample_payloads["feedbacks"])).json()

        response = await client.put(f"/api/feedbacks/{created['_id']}", json={"rating": 0})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing(self, client: AsyncClient):
        response = await client.put(f"/api/goals/{uuid4()}", json={"goalName": "x"})

        assert response.status_code == 404
        assert response.json()["message"] == "Item not found"

    @pytest.mark.asyncio
    async def test_email_taken_by_other_user(self, client: AsyncClient, sample_payloads):
        first = (await client.post("/api/users", json=sample_payloads["users"])).json()
        second = (await client.post(
            "/api/users",
            json={**sample_payloads["users"], "email": "second@example.com"},
        )).json()

        response = await client.put(
            f"/api/users/{second['_id']}",
            json={"email": first["email"]},
        )
        assert response.status_code == 400

        # Re-saving one's own email is not a conflict
        response = await client.put(
            f"/api/users/{first['_id']}",
            json={"email": first["email"], "status": "inactive"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "inactive"


class TestGetAndDelete:
    """Tests for GET and DELETE by id."""

    @pytest.mark.asyncio
    async def test_get_missing(self, client: AsyncClient):
        response = await client.get(f"/api/contents/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["get", "delete"])
    async def test_malformed_id(self, client: AsyncClient, method: str):
        response = await getattr(client, method)("/api/contents/not-a-valid-id")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "INVALID_ID"

    @pytest.mark.asyncio
    async def test_delete_twice(self, client: AsyncClient, sample_payloads):
        created = (await client.post("/api/reports", json=sample_payloads["reports"])).json()

        first = await client.delete(f"/api/reports/{created['_id']}")
        second = await client.delete(f"/api/reports/{created['_id']}")

        assert first.status_code == 200
        assert second.status_code == 404

    @pytest.mark.asyncio
    async def test_entities_isolated(self, client: AsyncClient, sample_payloads):
        """Test a record id from one entity is unknown to another."""
        created = (await client.post("/api/reports", json=sample_payloads["reports"])).json()

        response = await client.get(f"/api/contents/{created['_id']}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_entity(self, client: AsyncClient):
        response = await client.get("/api/unicorns")

        assert response.status_code == 404
