import logging
import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from app.core.config import DEFAULT_PAGE_SIZE
from app.core.errors import (
    OrderNotFoundError,
    RetryLimitExceededError,
    RetryNotAllowedError,
    SyncLogNotFoundError,
)
from app.models.sync_log import SyncStatus
from app.schemas.response import SuccessResponse
from app.schemas.sync import SyncLogPage, SyncLogResponse, SyncResultResponse
from app.services import sync_log_store
from app.services.sync_service import get_stats, retry

router = APIRouter()
log = logging.getLogger("uvicorn")


@router.get("/", response_model=SuccessResponse)
async def list_sync_logs_endpoint(
    status: Optional[SyncStatus] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=200),
):
    """Sync attempts, newest first, optionally filtered by status."""
    offset = (page - 1) * per_page
    logs = await sync_log_store.list_logs(status=status, limit=per_page, offset=offset)
    total = await sync_log_store.count_logs(status=status)

    data = SyncLogPage(
        items=[SyncLogResponse.model_validate(entry) for entry in logs],
        total=total,
        page=page,
        per_page=per_page,
        total_pages=math.ceil(total / per_page) if total else 0,
    ).model_dump(mode="json")
    return SuccessResponse(data=data)


@router.get("/stats", response_model=SuccessResponse)
async def sync_stats_endpoint():
    """Totals, recent activity and a daily breakdown for dashboards."""
    stats = await get_stats()
    return SuccessResponse(data=stats.model_dump(mode="json"))


@router.delete("/", response_model=SuccessResponse)
async def purge_sync_logs_endpoint(older_than_days: int = Query(..., ge=0)):
    """Deletes logs older than N days; 0 clears every log."""
    deleted = await sync_log_store.purge_logs(older_than_days)
    return SuccessResponse(message=f"Cleared {deleted} log entries", data={"deleted": deleted})


@router.post("/{log_id}/retry", response_model=SuccessResponse)
async def retry_sync_endpoint(log_id: int, order_id: Optional[int] = None):
    """
    Retries the order of a failed attempt with a forced sync. ``order_id`` is
    optional and, when given, must match the attempt's order.
    """
    try:
        if order_id is None:
            entry = await sync_log_store.get_log(log_id)
            if not entry:
                raise SyncLogNotFoundError(log_id)
            order_id = entry.order_id
        result = await retry(order_id, log_id)
    except (SyncLogNotFoundError, OrderNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RetryNotAllowedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RetryLimitExceededError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        log.error(f"Error retrying sync log {log_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to retry sync.")

    if result.skipped:
        raise HTTPException(status_code=409, detail=result.message)

    message = "Order sync retry successful!" if result.success else "Order sync retry failed. Check the logs for details."
    data = SyncResultResponse(
        success=result.success,
        message=result.message,
        log_id=result.log_id,
        synced_at=result.synced_at,
    ).model_dump(mode="json")
    return SuccessResponse(success=result.success, message=message, data=data)
