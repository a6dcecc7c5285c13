"""
Order sync orchestration: policy gate, payload build, signing, delivery and
the attempt log, for one order at a time.

The attempt's log row and, on success, the order's synced flag are written in
one transaction, and every result returned here is read off that row.
"""
import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from tortoise.transactions import in_transaction

from app.core.config import MAX_MANUAL_RETRIES
from app.core.errors import (
    NoValidSkusError,
    OrderNotFoundError,
    RetryLimitExceededError,
    RetryNotAllowedError,
    SyncLogNotFoundError,
)
from app.events.outbox_utility import request_order_sync
from app.models.order import Order
from app.models.sync_log import SyncLog, SyncStatus
from app.schemas.settings import SyncSettings
from app.services import sync_log_store
from app.services.delivery_client import DeliveryClient, DeliveryResult, TransportError
from app.services.outcome_recorder import record_success
from app.services.payload_builder import build_sync_payload, snapshot_products
from app.services.settings_service import get_settings
from app.services.signer import sign_payload
from app.services.sync_lock import acquire_sync_lock, release_sync_lock
from app.services.sync_policy import should_sync

log = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Sync completed successfully"
IN_PROGRESS_MESSAGE = "Sync already in progress"


class SyncResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    log_id: Optional[int] = None
    synced_at: Optional[datetime] = None
    # True when no attempt was made and nothing was logged
    skipped: bool = False


class BulkSyncSummary(BaseModel):
    queued: List[int] = Field(default_factory=list)
    skipped: List[int] = Field(default_factory=list)


async def load_order(order_id: int) -> Order:
    order = await Order.get_or_none(id=order_id).prefetch_related("items", "items__product")
    if not order:
        raise OrderNotFoundError(order_id)
    return order


def _result_from_log(entry: SyncLog, order: Order) -> SyncResult:
    success = entry.sync_status == SyncStatus.SUCCESS
    return SyncResult(
        success=success,
        message=entry.response_message or "",
        log_id=entry.id,
        synced_at=order.synced_at if success else None,
    )


async def _write_attempt(
    order: Order,
    status: SyncStatus,
    message: str,
    products: List[Dict[str, Any]],
    response_code: Optional[int] = None,
    response_data: Optional[str] = None,
    execution_time: float = 0.0,
    retry_count: int = 0,
) -> SyncResult:
    """Appends the attempt row and, for a success, stamps the order, atomically."""
    async with in_transaction() as conn:
        entry = await sync_log_store.append_log(
            order_id=order.id,
            order_number=order.display_number,
            customer_email=order.billing_email,
            customer_name=order.customer_name,
            products_data=products,
            sync_status=status,
            response_code=response_code,
            response_message=message,
            response_data=response_data,
            execution_time=execution_time,
            retry_count=retry_count,
            conn=conn,
        )
        if status == SyncStatus.SUCCESS:
            await record_success(order, conn=conn)

    return _result_from_log(entry, order)


def _classify(result: DeliveryResult):
    """Maps a delivery result to (status, message, response_code, response_data)."""
    if isinstance(result, TransportError):
        return SyncStatus.FAILED, result.message, None, None
    if result.ok:
        return SyncStatus.SUCCESS, SUCCESS_MESSAGE, result.status_code, result.body
    return SyncStatus.FAILED, f"HTTP {result.status_code}: {result.body}", result.status_code, result.body


async def sync_order(
    order_id: int,
    *,
    force: bool = False,
    status: Optional[str] = None,
    settings: Optional[SyncSettings] = None,
    client: Optional[DeliveryClient] = None,
    retry_count: int = 0,
) -> SyncResult:
    """
    Runs one sync attempt for an order.

    Non-forced calls (the status-change hook) are gated on the sync status
    allow-list and return a skipped result without a log row when the status
    does not qualify. Every other outcome, including a missing configuration
    or an order without SKUs, leaves exactly one log row.
    """
    order = await load_order(order_id)
    settings = settings or await get_settings()

    decision = should_sync(order, settings, status=status, force=force)
    if not decision.proceed:
        if decision.log_failure:
            log.error(f"Order {order_id} not synced: {decision.reason}")
            return await _write_attempt(
                order, SyncStatus.FAILED, decision.reason, snapshot_products(order), retry_count=retry_count
            )
        log.debug(f"Order {order_id} skipped: {decision.reason}")
        return SyncResult(success=False, message=decision.reason, skipped=True)

    token = await acquire_sync_lock(order.id)
    if token is None:
        return SyncResult(success=False, message=IN_PROGRESS_MESSAGE, skipped=True)

    try:
        try:
            payload = build_sync_payload(order)
        except NoValidSkusError as e:
            log.warning(f"Order {order_id} not synced: {e}")
            return await _write_attempt(
                order, SyncStatus.FAILED, str(e), snapshot_products(order), retry_count=retry_count
            )

        # Serialize once: the receiver verifies the signature over these exact bytes
        body = payload.to_bytes()
        signature = sign_payload(body, settings.webhook_secret)

        client = client or DeliveryClient()
        started = time.perf_counter()
        result = await client.deliver(settings.endpoint_url, body, signature)
        execution_time = time.perf_counter() - started

        sync_status, message, response_code, response_data = _classify(result)
        outcome = await _write_attempt(
            order,
            sync_status,
            message,
            [p.model_dump() for p in payload.products],
            response_code=response_code,
            response_data=response_data,
            execution_time=execution_time,
            retry_count=retry_count,
        )
        if outcome.success:
            log.info(f"Order {order_id} synced in {execution_time:.3f}s (log {outcome.log_id}).")
        else:
            log.error(f"Order {order_id} sync failed: {message}")
        return outcome
    finally:
        await release_sync_lock(order.id, token)


async def sync_now(order_id: int, **kwargs) -> SyncResult:
    """Operator-initiated sync: runs regardless of the order's status."""
    return await sync_order(order_id, force=True, **kwargs)


async def retry(order_id: int, log_id: int, **kwargs) -> SyncResult:
    """
    Forced resync referencing a failed attempt. The new row continues the
    attempt's retry chain; chains longer than MAX_MANUAL_RETRIES are refused.
    """
    entry = await sync_log_store.get_log(log_id)
    if not entry:
        raise SyncLogNotFoundError(log_id)
    if entry.order_id != order_id:
        raise RetryNotAllowedError(f"Sync log {log_id} does not belong to Order {order_id}")
    if entry.sync_status != SyncStatus.FAILED:
        raise RetryNotAllowedError(f"Sync log {log_id} is not a failed attempt")
    if entry.retry_count >= MAX_MANUAL_RETRIES:
        raise RetryLimitExceededError(log_id, entry.retry_count)

    log.info(f"Retrying Order {order_id} from sync log {log_id} (retry {entry.retry_count + 1}).")
    return await sync_order(order_id, force=True, retry_count=entry.retry_count + 1, **kwargs)


async def queue_bulk_sync(order_ids: List[int]) -> BulkSyncSummary:
    """
    Queues a forced sync for each order that is not synced yet. Delivery
    happens in the outbox poller; missing and already synced orders are skipped.
    """
    summary = BulkSyncSummary()
    unique_ids = list(dict.fromkeys(order_ids))
    orders = {o.id: o for o in await Order.filter(id__in=unique_ids)}

    async with in_transaction() as conn:
        for order_id in unique_ids:
            order = orders.get(order_id)
            if not order or order.synced:
                summary.skipped.append(order_id)
                continue
            await request_order_sync(order.id, force=True, reason="bulk", conn=conn)
            summary.queued.append(order_id)

    log.info(f"Bulk sync queued {len(summary.queued)} orders, skipped {len(summary.skipped)}.")
    return summary


async def get_stats():
    return await sync_log_store.get_stats()
