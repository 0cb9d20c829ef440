"""Product cost arithmetic.

Everything here is pure: results depend only on the arguments and nothing is
read from or written to storage. A recipe line whose component cannot be found
contributes nothing to the material cost; quantities are used exactly as given.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from modules.catalog.entities import Component, Product, ProductComponent

ComponentLookup = Union[Mapping[str, Component], Iterable[Component]]


@dataclass(frozen=True)
class CostLine:
    component_id: str
    quantity: float
    component_name: Optional[str]
    unit: Optional[str]
    unit_price: float
    line_cost: float

    @property
    def resolved(self) -> bool:
        return self.component_name is not None


@dataclass(frozen=True)
class CostBreakdown:
    material_cost: float
    making_charges: float
    total_cost: float
    lines: List[CostLine] = field(default_factory=list)

    @property
    def unresolved_count(self) -> int:
        return sum(1 for line in self.lines if not line.resolved)


def index_components(components: ComponentLookup) -> Dict[str, Component]:
    if isinstance(components, Mapping):
        return dict(components)
    index: Dict[str, Component] = {}
    for component in components:
        # First match wins, like a linear search would
        index.setdefault(component.id, component)
    return index


def compute_cost(
    recipe: Sequence[ProductComponent],
    components: ComponentLookup,
    making_charges: float = 0.0,
) -> CostBreakdown:
    index = index_components(components)
    material_cost = 0.0
    lines: List[CostLine] = []
    for item in recipe:
        component = index.get(item.component_id)
        if component is None:
            lines.append(
                CostLine(
                    component_id=item.component_id,
                    quantity=item.quantity,
                    component_name=None,
                    unit=None,
                    unit_price=0.0,
                    line_cost=0.0,
                )
            )
            continue
        line_cost = component.price * item.quantity
        material_cost += line_cost
        lines.append(
            CostLine(
                component_id=item.component_id,
                quantity=item.quantity,
                component_name=component.name,
                unit=component.unit,
                unit_price=component.price,
                line_cost=line_cost,
            )
        )
    return CostBreakdown(
        material_cost=material_cost,
        making_charges=making_charges,
        total_cost=material_cost + making_charges,
        lines=lines,
    )


def material_cost(recipe: Sequence[ProductComponent], components: ComponentLookup) -> float:
    return compute_cost(recipe, components).material_cost


def product_cost(product: Product, components: ComponentLookup) -> CostBreakdown:
    return compute_cost(product.components, components, product.making_charges)


def total_cost(product: Product, components: ComponentLookup) -> float:
    return product_cost(product, components).total_cost


def portfolio_value(products: Iterable[Product], components: ComponentLookup) -> float:
    """Sum of total cost over all products, one unit of each."""
    index = index_components(components)
    return sum((total_cost(p, index) for p in products), 0.0)


def dashboard_summary(products: Sequence[Product], components: Sequence[Component]) -> Dict[str, Any]:
    index = index_components(components)
    product_rows = []
    for product in products:
        breakdown = product_cost(product, index)
        product_rows.append(
            {
                "id": product.id,
                "name": product.name,
                "sku": product.sku,
                "material_cost": breakdown.material_cost,
                "making_charges": breakdown.making_charges,
                "total_cost": breakdown.total_cost,
                "missing_components": breakdown.unresolved_count,
            }
        )
    return {
        "total_products": len(products),
        "total_components": len(components),
        "portfolio_value": portfolio_value(products, index),
        "products": product_rows,
    }
