"""API-level tests for the reference backend and the data service talking to it."""
import pytest
from fastapi.testclient import TestClient

from main import app
from modules.catalog.entities import Component, Product, ProductComponent
from modules.catalog.kinds import COMPONENTS
from ui.api_client import BackendClient
from ui.data_service import DataService, Outcome

client = TestClient(app)


@pytest.fixture(autouse=True)
def clean_db():
    """Reset database before each test by re-initializing."""
    from core.database import Base, engine
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


def create_test_component(component_id="c1", name="Lobster Clasp", price=2.0):
    payload = {"id": component_id, "name": name, "price": price, "unit": "pcs", "category": "Findings"}
    resp = client.post("/components/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_product(product_id="p1", component_id="c1", quantity=3, making_charges=10):
    payload = {
        "id": product_id,
        "name": "Charm Bracelet",
        "sku": "BR-001",
        "making_charges": making_charges,
        "components": [{"component_id": component_id, "quantity": quantity}],
    }
    resp = client.post("/products/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health():
    assert client.get("/health").json() == {"status": "ok"}


def test_create_and_list_components():
    create_test_component("c1", "Clasp", 2)
    create_test_component("c2", "Bead", 0.5)

    resp = client.get("/components/")
    assert resp.status_code == 200
    data = {c["id"]: c for c in resp.json()}
    assert set(data) == {"c1", "c2"}
    assert data["c2"]["price"] == 0.5
    assert data["c2"]["unit"] == "pcs"


def test_create_component_generates_id_when_missing():
    resp = client.post("/components/", json={"name": "Jump Ring", "price": 0.2})
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"]
    assert body["category"] == "General"


def test_duplicate_component_id_conflicts():
    create_test_component("c1")
    resp = client.post("/components/", json={"id": "c1", "name": "Again", "price": 1})
    assert resp.status_code == 409
    assert resp.json()["code"] == "conflict"


def test_update_component_price():
    create_test_component("c1", price=2)
    resp = client.put("/components/c1/", json={"id": "c1", "name": "Lobster Clasp", "price": 2.5, "unit": "pcs", "category": "Findings"})
    assert resp.status_code == 200
    assert client.get("/components/c1/").json()["price"] == 2.5


def test_unknown_component_is_404():
    assert client.get("/components/nope/").status_code == 404
    resp = client.delete("/components/nope/")
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


def test_negative_price_is_rejected():
    resp = client.post("/components/", json={"name": "Bad", "price": -1})
    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_error"


def test_product_accepts_numeric_string_making_charges():
    create_test_component("c1")
    resp = client.post(
        "/products/",
        json={"id": "p1", "name": "Ring", "sku": "R-1", "making_charges": "12.50", "components": []},
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["making_charges"] == 12.5


def test_product_recipe_keeps_order():
    resp = client.post(
        "/products/",
        json={
            "id": "p1",
            "name": "Necklace",
            "components": [
                {"component_id": "b", "quantity": 1},
                {"component_id": "a", "quantity": 2},
                {"component_id": "c", "quantity": 3},
            ],
        },
    )
    assert resp.status_code == 201
    assert [line["component_id"] for line in client.get("/products/p1/").json()["components"]] == ["b", "a", "c"]


def test_deleting_component_does_not_cascade_to_products():
    create_test_component("c1")
    create_test_product("p1", component_id="c1")

    assert client.delete("/components/c1/").status_code == 204

    product = client.get("/products/p1/").json()
    assert product["components"] == [{"component_id": "c1", "quantity": 3}]


def test_update_and_delete_product():
    create_test_product("p1")
    resp = client.put(
        "/products/p1/",
        json={"name": "Charm Bracelet", "sku": "BR-002", "making_charges": 15, "components": []},
    )
    assert resp.status_code == 200
    assert resp.json()["sku"] == "BR-002"
    assert resp.json()["components"] == []

    assert client.delete("/products/p1/").status_code == 204
    assert client.get("/products/").json() == []


def test_data_service_against_backend(tmp_path):
    from ui.local_store import LocalStore

    backend = BackendClient(str(client.base_url), session=client)
    service = DataService(backend, LocalStore(tmp_path))
    chain = Component(id="1", name="Chain", price=10, unit="meter", category="Chain")
    bracelet = Product(
        id="p1",
        name="Bracelet",
        sku="BR-1",
        making_charges=5,
        components=[ProductComponent(component_id="1", quantity=2)],
    )

    assert service.add_component(chain) == chain
    assert service.add_product(bracelet) == bracelet

    result = service.fetch(COMPONENTS)
    assert result.outcome == Outcome.REMOTE
    assert result.value == [chain]
    assert service.fetch_products() == [bracelet]
    assert service.online is True

    service.update_component(chain.model_copy(update={"price": 11}))
    service.delete_component("1")
    assert service.fetch_components() == []
    assert service.fetch_products()[0].components[0].component_id == "1"
    assert LocalStore(tmp_path).read(COMPONENTS.store_key) == []
