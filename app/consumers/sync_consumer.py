import logging
from typing import Dict, Any, Optional
from uuid import UUID

from app.core.config import LOG_LEVEL
from app.core.errors import OrderNotFoundError
from app.models.processed_event import ProcessedEvent
from app.services.sync_service import sync_order

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("sync_consumer")

CONSUMER_NAME = "order_sync"


async def _already_processed(event_id_str: str) -> bool:
    if await ProcessedEvent.filter(event_id=event_id_str, consumer=CONSUMER_NAME).exists():
        log.info(f"Idempotency: Event {event_id_str} already processed.")
        return True
    return False


async def _run_sync(order_id: int, event_id_str: str, force: bool, status: Optional[str] = None):
    try:
        result = await sync_order(order_id, force=force, status=status)
        if result.skipped:
            log.info(f"Order {order_id}: no sync attempt ({result.message}).")
        else:
            log.info(f"Order {order_id}: sync {'succeeded' if result.success else 'failed'} (log {result.log_id}).")
    except OrderNotFoundError:
        log.error(f"Order {order_id} not found, dropping event {event_id_str}.")

    await ProcessedEvent.create(event_id=event_id_str, consumer=CONSUMER_NAME)


async def handle_order_status_changed(event_payload: Dict[str, Any], event_id: UUID):
    """
    Consumer logic for 'order.status_changed.v1'. Runs a non-forced sync
    gated on the new status; a failed delivery is recorded in the sync log and
    never raised back to the order flow.
    """
    order_id = int(event_payload["order_id"])
    new_status = event_payload.get("new_status")
    event_id_str = str(event_id)

    log.info(f"--- Worker: status change for Order {order_id} -> {new_status} ---")

    if await _already_processed(event_id_str):
        return
    await _run_sync(order_id, event_id_str, force=False, status=new_status)


async def handle_sync_requested(event_payload: Dict[str, Any], event_id: UUID):
    """Consumer logic for 'order.sync.requested.v1' (bulk and queued operator syncs)."""
    order_id = int(event_payload["order_id"])
    force = bool(event_payload.get("force", True))
    event_id_str = str(event_id)

    log.info(f"--- Worker: SYNC requested for Order {order_id} ({event_payload.get('reason') or 'manual'}) ---")

    if await _already_processed(event_id_str):
        return
    await _run_sync(order_id, event_id_str, force=force)
