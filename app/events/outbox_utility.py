from typing import Dict, Any, Optional
from app.models.outbox import OutboxEvent

ORDER_STATUS_CHANGED = "order.status_changed.v1"
ORDER_SYNC_REQUESTED = "order.sync.requested.v1"


async def create_outbox_event(
    aggregate_type: str,
    aggregate_id: Any,
    event_type: str,
    payload: Dict[str, Any],
    conn: Any = None
) -> OutboxEvent:
    """
    Creates a new Outbox event record using the provided database connection (transaction).
    
    CRITICAL: Passing 'conn' ensures the event is created atomically with the business data.
    """
    return await OutboxEvent.create(
        aggregate_type=aggregate_type,
        aggregate_id=str(aggregate_id) if aggregate_id is not None else None,
        event_type=event_type,
        payload=payload,
        published=False,
        attempts=0,
        using_db=conn 
    )


async def request_order_sync(order_id: int, force: bool = False, reason: Optional[str] = None, conn: Any = None) -> OutboxEvent:
    """Queues an asynchronous sync attempt for one order."""
    return await create_outbox_event(
        aggregate_type="order",
        aggregate_id=order_id,
        event_type=ORDER_SYNC_REQUESTED,
        payload={"order_id": order_id, "force": force, "reason": reason},
        conn=conn,
    )
