from typing import Any

from tortoise import timezone


async def record_success(order, conn: Any = None) -> None:
    """
    Marks the order as synced. There is deliberately no failure counterpart:
    a failed resync leaves an earlier success in place.
    """
    order.synced = True
    order.synced_at = timezone.now()
    await order.save(update_fields=["synced", "synced_at", "updated_at"], using_db=conn)
