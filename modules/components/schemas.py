"""Wire schemas for components, shared by the backend and its HTTP client."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.settings import DEFAULT_CATEGORY, DEFAULT_UNIT


class ComponentBase(BaseModel):
    name: str = Field(..., min_length=1, description="Component name")
    price: float = Field(..., ge=0, description="Unit price")
    unit: str = Field(DEFAULT_UNIT, description="Unit of measure")
    category: str = Field(DEFAULT_CATEGORY, description="Category")


class ComponentCreate(ComponentBase):
    id: Optional[str] = Field(None, description="Client generated id")


class ComponentUpdate(ComponentBase):
    id: Optional[str] = None


class ComponentRead(ComponentBase):
    id: str

    model_config = ConfigDict(from_attributes=True)
