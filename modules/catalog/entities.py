"""Entity types used by the UI, the data service and the cost calculator.

Attributes are snake_case in Python; the serialized entity shape (what the
local store keeps) uses the camelCase aliases, e.g. ``makingCharges`` and
``componentId``.
"""

import uuid
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.settings import DEFAULT_CATEGORY, DEFAULT_UNIT


class EntityModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_entity_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Component(EntityModel):
    id: str
    name: str
    price: float = Field(0.0, ge=0)
    unit: str = DEFAULT_UNIT
    category: str = DEFAULT_CATEGORY


class ProductComponent(EntityModel):
    component_id: str
    # Not clamped; forms enforce positive quantities
    quantity: float


class Product(EntityModel):
    id: str
    name: str
    sku: str = ""
    making_charges: float = Field(0.0, ge=0)
    components: List[ProductComponent] = Field(default_factory=list)


def new_id() -> str:
    return str(uuid.uuid4())


def add_to_recipe(recipe: List[ProductComponent], component_id: str) -> List[ProductComponent]:
    """Return a new recipe with one more unit of ``component_id``.

    An existing line has its quantity bumped by one; otherwise a line with
    quantity 1 is appended at the end.
    """
    if any(line.component_id == component_id for line in recipe):
        return [
            line.model_copy(update={"quantity": line.quantity + 1}) if line.component_id == component_id else line
            for line in recipe
        ]
    return list(recipe) + [ProductComponent(component_id=component_id, quantity=1)]


def remove_from_recipe(recipe: List[ProductComponent], component_id: str) -> List[ProductComponent]:
    return [line for line in recipe if line.component_id != component_id]


def set_recipe_quantity(recipe: List[ProductComponent], component_id: str, quantity: float) -> List[ProductComponent]:
    return [
        line.model_copy(update={"quantity": quantity}) if line.component_id == component_id else line
        for line in recipe
    ]
