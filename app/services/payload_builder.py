from typing import Any, Dict, List, Optional

from app.core.errors import NoValidSkusError
from app.schemas.sync import ProductLine, SyncPayload


def _clean_sku(sku: Optional[str]) -> str:
    return (sku or "").strip()


def _resolved_products(order) -> List[Any]:
    """Products behind the order's line items, in stored order, skipping deleted ones."""
    return [item.product for item in order.items if item.product is not None]


def build_sync_payload(order) -> SyncPayload:
    """
    Builds the webhook body for an order whose items (and their products) are
    already loaded. Items whose SKU is blank after trimming are dropped, order
    is preserved and duplicates are kept.

    Raises NoValidSkusError when no item qualifies.
    """
    products = [
        ProductLine(sku=_clean_sku(product.sku), name=product.name)
        for product in _resolved_products(order)
        if _clean_sku(product.sku)
    ]
    if not products:
        raise NoValidSkusError()

    return SyncPayload(
        order_id=order.id,
        order_number=order.display_number,
        email=order.billing_email,
        name=order.customer_name,
        products=products,
    )


def snapshot_products(order) -> List[Dict[str, Any]]:
    """Every resolvable product of the order, SKU or not, for the attempt log."""
    return [
        {"sku": _clean_sku(product.sku) or None, "name": product.name}
        for product in _resolved_products(order)
    ]
