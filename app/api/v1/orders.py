import logging
from fastapi import APIRouter, HTTPException, status
from app.core.config import LOG_LEVEL
from app.core.errors import OrderNotFoundError
from app.schemas.response import SuccessResponse
from app.services.order_service import create_order, get_order_by_id, update_order_status
from app.services.sync_service import sync_now, queue_bulk_sync
from app.services.sync_log_store import list_for_order
from app.schemas.order import OrderRequest, OrderSummaryResponse, OrderStatusUpdate, OrderDetailResponse
from app.schemas.sync import BulkSyncRequest, BulkSyncResponse, SyncLogResponse, SyncResultResponse

router = APIRouter()
logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("uvicorn")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderRequest):
    """
    Records a new order. Orders created in a syncable status are synced asynchronously.
    """
    try:
        if not request_data.items:
            raise HTTPException(status_code=400, detail="Order must contain items.")

        order = await create_order(
            billing_email=request_data.billing_email,
            billing_first_name=request_data.billing_first_name,
            billing_last_name=request_data.billing_last_name,
            status=request_data.status,
            order_id=request_data.id,
            order_number=request_data.order_number,
            items=[item.model_dump() for item in request_data.items],
        )
        log.info(f"Order {order.id} created with status {order.status}.")
        data = OrderSummaryResponse(
            order_id=order.id,
            status=order.status,
            synced=order.synced,
            message="Order recorded."
        ).model_dump()
        return SuccessResponse(data=data)
    except ValueError as e:
        log.error(f"Value error creating order: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except HTTPException as he:
        log.error(f"HTTP error creating order: {he.detail}")
        raise he
    except Exception as e:
        log.error(f"Error creating order: {e}")
        raise HTTPException(status_code=500, detail="Server failed to create order.")


# Declared before "/{order_id}" routes so "bulk-sync" is never parsed as an id
@router.post("/bulk-sync", status_code=status.HTTP_202_ACCEPTED, response_model=SuccessResponse)
async def bulk_sync_endpoint(request_data: BulkSyncRequest):
    """
    Queues a sync for every listed order that is not synced yet. Returns 202
    because delivery happens in the outbox poller.
    """
    try:
        summary = await queue_bulk_sync(request_data.order_ids)
    except Exception as e:
        log.error(f"Error queueing bulk sync: {e}")
        raise HTTPException(status_code=500, detail="Server failed to queue bulk sync.")

    message = f"{len(summary.queued)} order(s) queued for sync."
    data = BulkSyncResponse(queued=summary.queued, skipped=summary.skipped, message=message).model_dump()
    return SuccessResponse(message=message, data=data)


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: int):
    """Fetches an order with its line items, sync state and recent sync history."""
    try:
        order = await get_order_by_id(order_id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")

        items = [
            {
                "product_id": i.product.id if i.product else None,
                "name": i.product.name if i.product else None,
                "sku": i.product.sku if i.product else None,
                "quantity": i.quantity,
                "unit_total": str(i.unit_total)
            }
            for i in order.items
        ]
        history = [SyncLogResponse.model_validate(entry) for entry in await list_for_order(order.id)]

        data = OrderDetailResponse(
            id=order.id,
            order_number=order.display_number,
            status=order.status,
            billing_email=order.billing_email,
            customer_name=order.customer_name,
            items=items,
            synced=order.synced,
            synced_at=order.synced_at,
            sync_history=history,
            created_at=order.created_at
        ).model_dump(mode="json")
        return SuccessResponse(data=data)
    except HTTPException:
        raise
    except Exception as e:
        log.error(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to fetch order details.")


@router.patch("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(order_id: int, payload: OrderStatusUpdate):
    """
    Updates the status (e.g. 'processing', 'completed'). A sync, when the new
    status qualifies, runs asynchronously and never delays this response.
    """
    try:
        # Pydantic ensures payload.status is a valid OrderStatus Enum value
        order = await update_order_status(order_id, payload.status)
        data = OrderSummaryResponse(
            order_id=order.id,
            status=order.status,
            synced=order.synced,
            message=f"Order status successfully updated to {order.status.value}"
        ).model_dump()
        return SuccessResponse(data=data)
    except ValueError as e:
        log.error(f"Value error updating order status: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log.error(f"Error updating order status: {e}")
        raise HTTPException(status_code=500, detail="Server failed to update order status.")


@router.post("/{order_id}/sync", response_model=SuccessResponse)
async def sync_order_endpoint(order_id: int):
    """
    Operator "sync now": a forced, inline sync attempt. The outcome is also
    recorded in the sync log.
    """
    try:
        result = await sync_now(order_id)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        log.error(f"Error syncing order {order_id}: {e}")
        raise HTTPException(status_code=500, detail="Server failed to sync order.")

    if result.skipped:
        raise HTTPException(status_code=409, detail=result.message)

    message = "Order synced successfully!" if result.success else "Order sync failed. Check the logs for details."
    data = SyncResultResponse(
        success=result.success,
        message=result.message,
        log_id=result.log_id,
        synced_at=result.synced_at,
    ).model_dump(mode="json")
    return SuccessResponse(success=result.success, message=message, data=data)
