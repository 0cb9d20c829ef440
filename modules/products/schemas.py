"""Wire schemas for products, shared by the backend and its HTTP client."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductComponentWire(BaseModel):
    component_id: str = Field(..., description="Referenced component id")
    quantity: float = Field(..., description="Quantity per product")


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1)
    sku: str = ""
    # Older backends serialize money as a numeric string
    making_charges: float = Field(0.0, ge=0, description="Labor and overhead charge")
    components: List[ProductComponentWire] = Field(default_factory=list)


class ProductCreate(ProductBase):
    id: Optional[str] = Field(None, description="Client generated id")


class ProductUpdate(ProductBase):
    id: Optional[str] = None


class ProductRead(ProductBase):
    id: str

    model_config = ConfigDict(from_attributes=True)
