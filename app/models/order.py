from enum import Enum
from tortoise import fields, models


class OrderStatus(str, Enum):
    PENDING = "pending"  # Awaiting payment
    PROCESSING = "processing"  # Paid, being fulfilled
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"


class Product(models.Model):
    id = fields.IntField(primary_key=True)
    name = fields.CharField(max_length=255)
    # Cross-system product key; products without one are never synced
    sku = fields.CharField(max_length=100, null=True)
    is_active = fields.BooleanField(default=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "products"
        indexes = [
            ("sku",),
        ]


class Order(models.Model):
    id = fields.IntField(primary_key=True)
    order_number = fields.CharField(max_length=50, null=True)
    billing_email = fields.CharField(max_length=100)
    billing_first_name = fields.CharField(max_length=100, default="")
    billing_last_name = fields.CharField(max_length=100, default="")
    status = fields.CharEnumField(OrderStatus, max_length=20, default=OrderStatus.PENDING)
    # Owned by the outcome recorder: set on a successful sync, never cleared
    synced = fields.BooleanField(default=False)
    synced_at = fields.DatetimeField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("status",),                 # Status-based filtering
            ("synced",),                 # Bulk sync skips synced orders
            ("created_at",),             # Time-based queries
        ]

    @property
    def customer_name(self) -> str:
        return f"{self.billing_first_name} {self.billing_last_name}".strip()

    @property
    def display_number(self) -> str:
        return self.order_number or str(self.id)


class OrderItem(models.Model):
    id = fields.IntField(primary_key=True)
    order = fields.ForeignKeyField("models.Order", related_name="items")
    # Nullable so a deleted product leaves an unresolvable line item behind
    product = fields.ForeignKeyField(
        "models.Product", related_name="order_items", null=True, on_delete=fields.SET_NULL
    )
    quantity = fields.IntField(default=1)
    unit_total = fields.DecimalField(max_digits=12, decimal_places=2, default=0)

    class Meta:
        table = "order_items"
        ordering = ["id"]
        indexes = [
            ("order_id",),              # Order line items
            ("product_id",),
        ]
