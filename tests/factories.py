import json
from types import SimpleNamespace

import httpx

from app.models.order import Order, OrderItem, OrderStatus, Product
from app.services.delivery_client import DeliveryClient

WEBHOOK_SECRET = "test-webhook-secret-123"
ENDPOINT_BASE_URL = "https://app.example.test/"
ENDPOINT_URL = "https://app.example.test/api/v1/woocommerce-sync"


class FakeEndpoint:
    """Receiving side of the webhook, backed by httpx.MockTransport."""

    def __init__(self, status_code=200, body='{"status":"ok"}', error=None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("connection refused", request=request)
        return httpx.Response(self.status_code, content=self.body.encode("utf-8"))

    def client(self) -> DeliveryClient:
        return DeliveryClient(timeout=5.0, transport=httpx.MockTransport(self.handler))

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


async def make_order(order_id, status=OrderStatus.PROCESSING, skus=(("BK-1", "Ebook One"),), synced=False):
    """Creates an order with one line item per (sku, name) pair."""
    order = await Order.create(
        id=order_id,
        order_number=str(order_id),
        billing_email="reader@example.com",
        billing_first_name="Ada",
        billing_last_name="Lovelace",
        status=status,
        synced=synced,
    )
    for sku, name in skus:
        product = await Product.create(name=name, sku=sku)
        await OrderItem.create(order=order, product=product, quantity=1, unit_total="9.99")
    return order


def plain_order(items, order_id=1, status="processing"):
    """In-memory order shaped like a prefetched Tortoise Order, for pure functions."""
    return SimpleNamespace(
        id=order_id,
        status=status,
        billing_email="reader@example.com",
        customer_name="Ada Lovelace",
        display_number=str(order_id),
        items=[SimpleNamespace(product=p) for p in items],
    )


def product(sku, name="Item"):
    return SimpleNamespace(sku=sku, name=name)
