from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.sync_log import SyncStatus


class ProductLine(BaseModel):
    """One product entry of the outbound webhook body."""
    sku: str = Field(..., min_length=1)
    name: str


class SyncPayload(BaseModel):
    """
    Body of the webhook POST. Serialize with ``to_bytes`` exactly once and use
    those bytes for both the signature and the request body.
    """
    order_id: int
    order_number: str
    email: str
    name: str
    products: List[ProductLine]

    @field_validator("products")
    @classmethod
    def _at_least_one_product(cls, value: List[ProductLine]) -> List[ProductLine]:
        if not value:
            raise ValueError("products must not be empty")
        return value

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class SyncLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    order_number: Optional[str] = None
    customer_email: str
    customer_name: str
    products_data: List[Any]
    sync_status: SyncStatus
    response_code: Optional[int] = None
    response_message: Optional[str] = None
    response_data: Optional[str] = None
    sync_time: datetime
    execution_time: float
    retry_count: int


class SyncLogPage(BaseModel):
    items: List[SyncLogResponse]
    total: int
    page: int
    per_page: int
    total_pages: int


class DailySyncStats(BaseModel):
    date: date
    total: int
    success: int
    failed: int


class SyncStats(BaseModel):
    total: int = 0
    success: int = 0
    failed: int = 0
    pending: int = 0
    recent_7d: int = 0
    avg_execution_time: float = 0.0
    daily_breakdown: List[DailySyncStats] = Field(default_factory=list)


class SyncResultResponse(BaseModel):
    success: bool
    message: str
    log_id: Optional[int] = None
    synced_at: Optional[datetime] = None


class BulkSyncRequest(BaseModel):
    order_ids: List[int] = Field(..., min_length=1)


class BulkSyncResponse(BaseModel):
    queued: List[int]
    skipped: List[int]
    message: str
