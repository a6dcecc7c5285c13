from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from app.models.order import OrderStatus
from app.schemas.sync import SyncLogResponse


class OrderItemRequest(BaseModel):
    """Schema for a single line item in the order request."""
    product_id: int
    quantity: int = Field(1, ge=1)
    unit_total: Decimal = Field(Decimal("0"), ge=0)

class OrderRequest(BaseModel):
    """Schema for the full order creation request body."""
    id: Optional[int] = Field(None, description="Upstream order id; generated when omitted.")
    order_number: Optional[str] = None
    billing_email: str
    billing_first_name: str = ""
    billing_last_name: str = ""
    status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItemRequest]

class OrderStatusUpdate(BaseModel):
    """Schema for updating an order status."""
    status: OrderStatus

class OrderSummaryResponse(BaseModel):
    """Response schema after an order write."""
    order_id: int
    status: OrderStatus
    synced: bool
    message: str

class OrderItemResponse(BaseModel):
    """Schema for an item inside the detailed order response."""
    product_id: Optional[int] = None
    name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    unit_total: str  # Use string for Decimal type serialization

class OrderDetailResponse(BaseModel):
    """Schema for fetching detailed order information with its sync state."""
    id: int
    order_number: str
    status: OrderStatus
    billing_email: str
    customer_name: str
    items: List[OrderItemResponse]
    synced: bool
    synced_at: Optional[datetime] = None
    sync_history: List[SyncLogResponse] = Field(default_factory=list)
    created_at: datetime
