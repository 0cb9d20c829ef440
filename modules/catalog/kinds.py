"""The two entity collections and how each one is stored and sent."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Type

from modules.catalog.entities import Component, EntityModel, Product
from modules.catalog.wire import component_from_wire, component_to_wire, product_from_wire, product_to_wire


@dataclass(frozen=True)
class EntityKind:
    name: str
    store_key: str
    entity_type: Type[EntityModel]
    to_wire: Callable[[Any], Dict[str, Any]]
    from_wire: Callable[[Any], Any]

    @property
    def collection_path(self) -> str:
        return f"/{self.name}/"

    def item_path(self, entity_id: str) -> str:
        return f"/{self.name}/{entity_id}/"


COMPONENTS = EntityKind(
    name="components",
    store_key="jewel_components",
    entity_type=Component,
    to_wire=component_to_wire,
    from_wire=component_from_wire,
)

PRODUCTS = EntityKind(
    name="products",
    store_key="jewel_products",
    entity_type=Product,
    to_wire=product_to_wire,
    from_wire=product_from_wire,
)
