import logging
from collections import OrderedDict
from datetime import timedelta
from typing import Any, Dict, List, Optional

from tortoise import timezone
from tortoise.functions import Count

from app.models.sync_log import SyncLog, SyncStatus
from app.schemas.sync import DailySyncStats, SyncStats

log = logging.getLogger(__name__)

RECENT_DAYS = 7


async def append_log(
    order_id: int,
    order_number: Optional[str],
    customer_email: str,
    customer_name: str,
    products_data: List[Dict[str, Any]],
    sync_status: SyncStatus,
    response_message: str,
    response_code: Optional[int] = None,
    response_data: Optional[str] = None,
    execution_time: float = 0.0,
    retry_count: int = 0,
    conn: Any = None,
) -> SyncLog:
    """
    Inserts one attempt row. Passing 'conn' writes it inside the caller's
    transaction (together with the order's synced flag).
    """
    return await SyncLog.create(
        order_id=order_id,
        order_number=order_number,
        customer_email=customer_email or "",
        customer_name=customer_name or "",
        products_data=products_data,
        sync_status=sync_status,
        response_code=response_code,
        response_message=response_message,
        response_data=response_data,
        execution_time=execution_time,
        retry_count=retry_count,
        using_db=conn,
    )


def _filtered(status: Optional[SyncStatus]):
    return SyncLog.filter(sync_status=status) if status else SyncLog.all()


async def list_logs(status: Optional[SyncStatus] = None, limit: int = 20, offset: int = 0) -> List[SyncLog]:
    """Newest attempts first, optionally restricted to one status."""
    return await _filtered(status).order_by("-sync_time", "-id").offset(offset).limit(limit)


async def count_logs(status: Optional[SyncStatus] = None) -> int:
    return await _filtered(status).count()


async def get_log(log_id: int) -> Optional[SyncLog]:
    return await SyncLog.get_or_none(id=log_id)


async def find_latest_for_order(order_id: int) -> Optional[SyncLog]:
    return await SyncLog.filter(order_id=order_id).order_by("-sync_time", "-id").first()


async def list_for_order(order_id: int, limit: int = 10) -> List[SyncLog]:
    return await SyncLog.filter(order_id=order_id).order_by("-sync_time", "-id").limit(limit)


async def purge_logs(older_than_days: int) -> int:
    """
    Deletes rows older than the given number of days, or every row when
    days is 0. Returns the number of rows deleted.
    """
    if older_than_days < 0:
        raise ValueError("older_than_days must be 0 or greater")

    if older_than_days == 0:
        deleted = await SyncLog.all().delete()
    else:
        cutoff = timezone.now() - timedelta(days=older_than_days)
        deleted = await SyncLog.filter(sync_time__lt=cutoff).delete()

    log.info(f"Purged {deleted} sync log rows (older_than_days={older_than_days}).")
    return deleted


async def get_stats() -> SyncStats:
    """Counts per status, recent activity, average duration and a daily breakdown."""
    since = timezone.now() - timedelta(days=RECENT_DAYS)

    per_status = await (
        SyncLog.annotate(count=Count("id"))
        .group_by("sync_status")
        .order_by("sync_status")
        .values("sync_status", "count")
    )
    counts = {SyncStatus(row["sync_status"]): row["count"] for row in per_status}

    durations = await SyncLog.filter(execution_time__gt=0).values_list("execution_time", flat=True)
    avg_execution_time = sum(durations) / len(durations) if durations else 0.0

    # Two columns per row; whole models are never loaded for the breakdown
    recent = await SyncLog.filter(sync_time__gte=since).order_by("-sync_time", "-id").values("sync_time", "sync_status")
    daily: "OrderedDict[Any, Dict[str, int]]" = OrderedDict()
    for row in recent:
        bucket = daily.setdefault(row["sync_time"].date(), {"total": 0, "success": 0, "failed": 0})
        bucket["total"] += 1
        status = SyncStatus(row["sync_status"])
        if status == SyncStatus.SUCCESS:
            bucket["success"] += 1
        elif status == SyncStatus.FAILED:
            bucket["failed"] += 1

    return SyncStats(
        total=sum(counts.values()),
        success=counts.get(SyncStatus.SUCCESS, 0),
        failed=counts.get(SyncStatus.FAILED, 0),
        pending=counts.get(SyncStatus.PENDING, 0),
        recent_7d=len(recent),
        avg_execution_time=round(avg_execution_time, 4),
        daily_breakdown=[DailySyncStats(date=day, **bucket) for day, bucket in daily.items()],
    )
