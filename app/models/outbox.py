from tortoise import fields, models
import uuid


class OutboxEvent(models.Model):
    """
    Events written in the same transaction as the order change that caused
    them. The poller picks them up and runs the matching sync asynchronously,
    so the request that changed the order never waits on the webhook.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    aggregate_type = fields.CharField(max_length=64) # e.g., 'order'
    aggregate_id = fields.CharField(max_length=64, null=True) # Order id as text
    event_type = fields.CharField(max_length=128) # e.g., 'order.status_changed.v1'
    payload = fields.JSONField()
    published = fields.BooleanField(default=False)
    attempts = fields.IntField(default=0)
    last_error = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "outbox_events"
        indexes = [
            ("published", "created_at"),
        ]
