import logging
import uuid
from datetime import timedelta
from typing import Optional

from tortoise import timezone
from tortoise.exceptions import IntegrityError

from app.core.config import SYNC_LOCK_TTL
from app.models.sync_lock import SyncLock

log = logging.getLogger(__name__)


async def acquire_sync_lock(order_id: int, ttl: int = SYNC_LOCK_TTL) -> Optional[str]:
    """
    Claims the per-order sync marker. Returns a token to release it with, or
    None when another attempt for the same order holds a live marker.
    """
    now = timezone.now()
    # A crashed attempt must not block the order forever
    await SyncLock.filter(order_id=order_id, expires_at__lt=now).delete()

    token = uuid.uuid4().hex
    try:
        await SyncLock.create(order_id=order_id, token=token, expires_at=now + timedelta(seconds=ttl))
    except IntegrityError:
        log.info(f"Sync already in progress for Order {order_id}.")
        return None
    return token


async def release_sync_lock(order_id: int, token: str) -> None:
    await SyncLock.filter(order_id=order_id, token=token).delete()
