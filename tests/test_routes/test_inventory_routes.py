import pytest
from fastapi.testclient import TestClient

from lazada_erp.core.security import get_current_username
from lazada_erp.dependencies import get_db
from lazada_erp.main import app


@pytest.fixture
def client(session_factory):
    """TestClient on a fresh database with basic auth bypassed"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_username] = lambda: "tester"
    yield TestClient(app)
    app.dependency_overrides.clear()


"""
1. Create and read
"""

def test_create_item(client, sample_item_data):
    response = client.post("/inventory", json=sample_item_data)

    assert response.status_code == 201
    data = response.json()
    assert data["sku"] == "LZ-GTR-001"
    assert data["sync_status"] == "not_synced"
    assert data["remote_id"] is None
    assert data["sync_errors"] == []


def test_create_ignores_sync_state_fields(client, sample_item_data):
    """Clients cannot link an item or fake its sync status"""
    payload = {**sample_item_data, "remote_id": "123", "sync_status": "synced"}

    data = client.post("/inventory", json=payload).json()

    assert data["remote_id"] is None
    assert data["sync_status"] == "not_synced"


def test_create_duplicate_sku(client, sample_item_data):
    client.post("/inventory", json=sample_item_data)

    response = client.post("/inventory", json=sample_item_data)

    assert response.status_code == 409


def test_create_invalid_payload(client, sample_item_data):
    response = client.post("/inventory", json={**sample_item_data, "quantity": -1})
    assert response.status_code == 422


def test_list_and_get(client, sample_item_data):
    created = client.post("/inventory", json=sample_item_data).json()
    client.post("/inventory", json={**sample_item_data, "sku": "LZ-GTR-002"})

    listing = client.get("/inventory")
    assert listing.status_code == 200
    assert {i["sku"] for i in listing.json()} == {"LZ-GTR-001", "LZ-GTR-002"}

    response = client.get(f"/inventory/{created['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Test Guitar"


def test_get_unknown_item(client):
    assert client.get("/inventory/999").status_code == 404


"""
2. Update and delete
"""

def test_update_item(client, sample_item_data):
    created = client.post("/inventory", json=sample_item_data).json()

    response = client.put(f"/inventory/{created['id']}", json={"name": "Renamed", "quantity": 3})

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["quantity"] == 3


def test_update_rejects_sku_change(client, sample_item_data):
    created = client.post("/inventory", json=sample_item_data).json()

    response = client.put(f"/inventory/{created['id']}", json={"sku": "CHANGED"})

    assert response.status_code == 400


def test_update_quantity(client, sample_item_data):
    created = client.post("/inventory", json=sample_item_data).json()

    response = client.patch(f"/inventory/{created['id']}/quantity", json={"quantity": 0})

    assert response.status_code == 200
    assert response.json()["quantity"] == 0


def test_update_unknown_item(client):
    assert client.put("/inventory/999", json={"name": "x"}).status_code == 404
    assert client.patch("/inventory/999/quantity", json={"quantity": 1}).status_code == 404


def test_delete_item(client, sample_item_data):
    created = client.post("/inventory", json=sample_item_data).json()

    response = client.delete(f"/inventory/{created['id']}")

    assert response.status_code == 200
    assert client.get(f"/inventory/{created['id']}").status_code == 404
    assert client.delete(f"/inventory/{created['id']}").status_code == 404


"""
3. Authentication and health
"""

def test_basic_auth_required(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    try:
        client = TestClient(app)
        assert client.get("/inventory").status_code == 401
        assert client.get("/inventory", auth=("admin", "changeme")).status_code == 200
    finally:
        app.dependency_overrides.clear()


def test_health_endpoints_are_public():
    client = TestClient(app)

    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/health/db").json()["database"] == "connected"
