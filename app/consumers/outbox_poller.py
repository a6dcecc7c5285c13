import asyncio
import logging
from app.models.outbox import OutboxEvent
# Import all handler functions
from app.consumers.sync_consumer import handle_order_status_changed, handle_sync_requested
from app.core.db import init_db, close_db
from app.core.config import POLLING_INTERVAL, MAX_ATTEMPTS, BATCH_SIZE, LOG_LEVEL
from app.events.outbox_utility import ORDER_STATUS_CHANGED, ORDER_SYNC_REQUESTED

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("outbox_poller")

HANDLERS = {
    ORDER_STATUS_CHANGED: handle_order_status_changed,
    ORDER_SYNC_REQUESTED: handle_sync_requested,
}

async def dispatch_event(event: OutboxEvent):
    """
    Routes an OutboxEvent to the handler registered for its type.
    """
    handler = HANDLERS.get(event.event_type)
    log.info(f"Poller DISPATCHING: {event.event_type} (ID: {event.id.hex[:8]}...)")

    if handler is None:
        log.warning(f"No handler found for event type: {event.event_type}")
        return
    await handler(event.payload, event.id)

async def poll_outbox_for_new_events() -> int:
    """
    Queries the Outbox table for unpublished events and attempts to dispatch them.
    Returns the number of events fetched.
    """
    # Select events that haven't been published and haven't exceeded max attempts
    events = await OutboxEvent.filter(published=False, attempts__lt=MAX_ATTEMPTS).limit(BATCH_SIZE).order_by('created_at')
    
    for event in events:
        try:
            # 1. Dispatch the event (calls the sync handler)
            await dispatch_event(event)
            
            # 2. Mark the event as published on success
            event.published = True
            await event.save(update_fields=['published'])

        except Exception as e:
            # 3. Infrastructure failure (not a failed delivery): count and redispatch later
            event.attempts += 1
            event.last_error = str(e)
            await event.save(update_fields=['attempts', 'last_error'])
            log.exception(f"Dispatch of event {event.id} failed (attempt {event.attempts}/{MAX_ATTEMPTS}).")

    return len(events)

async def start_outbox_poller():
    """Main loop for the poller service."""
    await init_db()
    log.info("--- Outbox Poller Service Started ---")
    
    try:
        while True:
            try:
                await poll_outbox_for_new_events()
            except Exception as e:
                log.error(f"Poller encountered a critical DB error: {e}.")
                
            await asyncio.sleep(POLLING_INTERVAL)
    finally:
        await close_db()

if __name__ == "__main__":
    try:
        asyncio.run(start_outbox_poller())
    except KeyboardInterrupt:
        log.info("Poller service stopped.")
