# app/models/__init__.py
from .option import Option
from .order import Order, OrderItem, OrderStatus, Product
from .outbox import OutboxEvent
from .processed_event import ProcessedEvent
from .sync_lock import SyncLock
from .sync_log import SyncLog, SyncStatus

# Export all models
__all__ = [
    "Option",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OutboxEvent",
    "ProcessedEvent",
    "Product",
    "SyncLock",
    "SyncLog",
    "SyncStatus",
]
