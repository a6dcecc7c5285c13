from tortoise.transactions import in_transaction
from typing import List, Dict, Optional
from decimal import Decimal
from app.models.order import Order, OrderItem, Product, OrderStatus
from app.events.outbox_utility import create_outbox_event, ORDER_STATUS_CHANGED


async def create_product(name: str, sku: Optional[str] = None, is_active: bool = True) -> Product:
    return await Product.create(name=name, sku=sku, is_active=is_active)


async def get_product(product_id: int) -> Optional[Product]:
    return await Product.get_or_none(id=product_id)


async def create_order(
    billing_email: str,
    items: List[Dict],
    billing_first_name: str = "",
    billing_last_name: str = "",
    status: OrderStatus = OrderStatus.PENDING,
    order_id: Optional[int] = None,
    order_number: Optional[str] = None,
) -> Order:
    """
    Creates the Order and its line items in one transaction. Orders created
    directly in a syncable status are announced like a status change, so
    they get synced too.
    """
    async with in_transaction() as conn:
        product_ids = [int(it["product_id"]) for it in items]
        products = await Product.filter(id__in=product_ids).using_db(conn)
        product_map = {p.id: p for p in products}

        missing = [pid for pid in product_ids if pid not in product_map]
        if missing:
            raise ValueError(f"Products not found: {', '.join(str(pid) for pid in missing)}")

        values = dict(
            order_number=order_number,
            billing_email=billing_email,
            billing_first_name=billing_first_name,
            billing_last_name=billing_last_name,
            status=status,
        )
        if order_id is not None:
            if await Order.filter(id=order_id).using_db(conn).exists():
                raise ValueError(f"Order {order_id} already exists.")
            values["id"] = order_id

        order = await Order.create(using_db=conn, **values)

        for it in items:
            await OrderItem.create(
                order=order,
                product=product_map[int(it["product_id"])],
                quantity=int(it.get("quantity", 1)),
                unit_total=Decimal(str(it.get("unit_total", "0"))),
                using_db=conn
            )

        if status != OrderStatus.PENDING:
            await _emit_status_changed(order, OrderStatus.PENDING, status, conn)

    return order

async def get_order_by_id(order_id: int) -> Optional[Order]:
    """Fetches order details with items, including the product name/SKU."""
    # Pre-fetch related entities to minimize DB queries (N+1 avoidance)
    return await Order.get_or_none(id=order_id).prefetch_related('items', 'items__product')

async def update_order_status(order_id: int, new_status: OrderStatus) -> Order:
    """
    Updates the order status and, in the same transaction, emits the
    status-change event the sync consumer listens to. A no-op update emits
    nothing.
    """
    async with in_transaction() as conn:
        order = await Order.get_or_none(id=order_id).using_db(conn)

        if not order:
            raise ValueError("Order not found")

        old_status = order.status
        if old_status == new_status:
            return order

        order.status = new_status
        await order.save(update_fields=['status', 'updated_at'], using_db=conn)

        # ATOMIC EVENT EMISSION
        # This insertion happens in the same DB transaction as the order.save()
        await _emit_status_changed(order, old_status, new_status, conn)

    return order


async def _emit_status_changed(order: Order, old_status: OrderStatus, new_status: OrderStatus, conn) -> None:
    await create_outbox_event(
        aggregate_type="order",
        aggregate_id=order.id,
        event_type=ORDER_STATUS_CHANGED,
        payload={
            "order_id": order.id,
            "old_status": OrderStatus(old_status).value,
            "new_status": OrderStatus(new_status).value,
        },
        conn=conn
    )
