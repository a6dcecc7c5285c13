from enum import Enum
from tortoise import fields, models


class SyncStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"  # Reserved, no code path writes it


class SyncLog(models.Model):
    """
    One row per sync attempt. Customer and product fields are snapshots taken
    at attempt time, not joined to the live order, so the audit trail survives
    later edits. Rows are never updated; only an age-based purge removes them.
    """
    id = fields.IntField(primary_key=True)
    order_id = fields.BigIntField()
    order_number = fields.CharField(max_length=50, null=True)
    customer_email = fields.CharField(max_length=100)
    customer_name = fields.CharField(max_length=255)
    products_data = fields.JSONField(default=list)
    sync_status = fields.CharEnumField(SyncStatus, max_length=20)
    response_code = fields.IntField(null=True)
    response_message = fields.TextField(null=True)
    response_data = fields.TextField(null=True)
    sync_time = fields.DatetimeField(auto_now_add=True)
    execution_time = fields.FloatField(default=0)
    # Position in a chain of operator retries (0 for the first attempt)
    retry_count = fields.IntField(default=0)

    class Meta:
        table = "sync_logs"
        ordering = ["-sync_time", "-id"]
        indexes = [
            ("order_id",),
            ("sync_status",),
            ("sync_time",),
        ]
