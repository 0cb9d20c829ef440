"""Conversion between entities and the backend's snake_case wire shape."""

from typing import Any, Dict, List

from pydantic import ValidationError

from core.errors import WireDecodeError
from modules.catalog.entities import Component, Product, ProductComponent
from modules.components.schemas import ComponentRead
from modules.products.schemas import ProductRead


def component_to_wire(component: Component) -> Dict[str, Any]:
    return {
        "id": component.id,
        "name": component.name,
        "price": component.price,
        "unit": component.unit,
        "category": component.category,
    }


def component_from_wire(data: Any) -> Component:
    try:
        wire = ComponentRead.model_validate(data)
    except ValidationError as exc:
        raise WireDecodeError(f"Invalid component payload: {exc.error_count()} error(s)") from exc
    return Component(id=wire.id, name=wire.name, price=wire.price, unit=wire.unit, category=wire.category)


def product_to_wire(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "making_charges": product.making_charges,
        "components": [
            {"component_id": line.component_id, "quantity": line.quantity}
            for line in product.components
        ],
    }


def product_from_wire(data: Any) -> Product:
    try:
        wire = ProductRead.model_validate(data)
    except ValidationError as exc:
        raise WireDecodeError(f"Invalid product payload: {exc.error_count()} error(s)") from exc
    return Product(
        id=wire.id,
        name=wire.name,
        sku=wire.sku,
        making_charges=wire.making_charges,
        components=[
            ProductComponent(component_id=line.component_id, quantity=line.quantity)
            for line in wire.components
        ],
    )


def decode_list(data: Any, decoder) -> List[Any]:
    if not isinstance(data, list):
        raise WireDecodeError(f"Expected a JSON array, got {type(data).__name__}")
    return [decoder(item) for item in data]
