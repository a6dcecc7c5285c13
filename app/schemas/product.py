from typing import Optional
from pydantic import BaseModel, Field


class ProductRequest(BaseModel):
    name: str = Field(..., description="Product name sent with the order.")
    sku: Optional[str] = Field(None, description="Stock-keeping unit; products without one are not synced.")
    is_active: bool = Field(True, description="Whether the product is currently sold.")

class ProductResponse(BaseModel):
    id: int
    name: str
    sku: Optional[str] = None
    is_active: bool
    will_sync: bool = Field(..., description="True when the product has a non-blank SKU.")
