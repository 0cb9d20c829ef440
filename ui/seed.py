"""First-run catalog and the initial load performed when the UI starts."""

import logging
from dataclasses import dataclass, field
from typing import List

from core.errors import DataServiceError
from modules.catalog.entities import Component, Product, ProductComponent
from ui.data_service import DataService

logger = logging.getLogger(__name__)


def default_components() -> List[Component]:
    return [
        Component(id="1", name="Gold Plated Chain (Fine)", price=12.50, unit="meter", category="Chain"),
        Component(id="2", name="Crystal Bead 4mm", price=0.50, unit="pcs", category="Beads"),
        Component(id="3", name="Lobster Clasp", price=2.00, unit="pcs", category="Findings"),
        Component(id="4", name="Pendant Base (Brass)", price=15.00, unit="pcs", category="Pendants"),
    ]


def default_products() -> List[Product]:
    return [
        Product(
            id="p1",
            name="Crystal Simple Necklace",
            sku="NCK-001",
            making_charges=25.00,
            components=[
                ProductComponent(component_id="1", quantity=0.5),
                ProductComponent(component_id="2", quantity=10),
                ProductComponent(component_id="3", quantity=1),
            ],
        )
    ]


@dataclass
class InitialData:
    components: List[Component] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    online: bool = False
    seeded: bool = False


def _persist_defaults(service: DataService, components: List[Component], products: List[Product]) -> None:
    try:
        for component in components:
            service.add_component(component)
        for product in products:
            service.add_product(product)
    except DataServiceError as exc:
        logger.error("Could not persist default catalog: %s", exc)


def load_initial_data(service: DataService) -> InitialData:
    """Fetch both collections, seeding defaults on first run.

    Defaults are written through the service only when it is offline; with a
    live backend they stay in memory.
    """
    try:
        components = service.fetch_components()
        products = service.fetch_products()
        online = service.online

        seeded_components: List[Component] = []
        seeded_products: List[Product] = []
        if not components:
            seeded_components = default_components()
        if not products and not components:
            seeded_products = default_products()

        if (seeded_components or seeded_products) and not online:
            logger.info(
                "Seeding %d component(s) and %d product(s) into local storage",
                len(seeded_components),
                len(seeded_products),
            )
            _persist_defaults(service, seeded_components, seeded_products)

        return InitialData(
            components=seeded_components or components,
            products=seeded_products or products,
            online=online,
            seeded=bool(seeded_components or seeded_products),
        )
    except Exception:
        logger.exception("Failed to load initial data")
        return InitialData(online=service.online)
