from conftest import FakeResponse

from modules.catalog.entities import Component, Product
from modules.catalog.kinds import COMPONENTS, PRODUCTS
from ui.seed import default_components, default_products, load_initial_data


def test_offline_first_run_seeds_and_persists_defaults(local_service):
    data = load_initial_data(local_service)

    assert data.seeded is True
    assert data.online is False
    assert [c.id for c in data.components] == ["1", "2", "3", "4"]
    assert [p.id for p in data.products] == ["p1"]
    assert local_service.fetch_components() == default_components()
    assert local_service.fetch_products() == default_products()


def test_seeded_product_cost():
    from modules.costing.service import total_cost

    # 25 making + 12.5 * 0.5 + 0.5 * 10 + 2 * 1
    assert total_cost(default_products()[0], default_components()) == 38.25


def test_online_first_run_keeps_defaults_transient(online_service, fake_session):
    fake_session.routes[("GET", "/components/")] = FakeResponse(200, [])
    fake_session.routes[("GET", "/products/")] = FakeResponse(200, [])

    data = load_initial_data(online_service)

    assert data.online is True
    assert len(data.components) == 4
    assert len(data.products) == 1
    assert fake_session.calls_for("POST") == []
    assert online_service.store.read(COMPONENTS.store_key) == []
    assert online_service.store.read(PRODUCTS.store_key) == []


def test_existing_catalog_is_not_seeded(local_service):
    ring = Component(id="r", name="Ring Blank", price=3)
    local_service.add_component(ring)

    data = load_initial_data(local_service)

    assert data.seeded is False
    assert data.components == [ring]
    assert data.products == []


def test_products_seeded_only_when_both_collections_empty(local_service):
    orphan = Product(id="x", name="Orphan", making_charges=4)
    local_service.add_product(orphan)

    data = load_initial_data(local_service)

    assert [c.id for c in data.components] == ["1", "2", "3", "4"]
    assert data.products == [orphan]
    assert local_service.fetch_products() == [orphan]


def test_unexpected_error_yields_empty_dataset(local_service, monkeypatch):
    def explode():
        raise RuntimeError("boom")

    monkeypatch.setattr(local_service, "fetch_components", explode)

    data = load_initial_data(local_service)

    assert data.components == []
    assert data.products == []
