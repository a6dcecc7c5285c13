from tortoise import fields, models


class SyncLock(models.Model):
    """
    "Sync in progress" marker for one order. The primary key makes a second
    concurrent acquire fail at insert time; expired markers are replaced.
    """
    order_id = fields.BigIntField(primary_key=True, generated=False)
    token = fields.CharField(max_length=32)
    expires_at = fields.DatetimeField()

    class Meta:
        table = "sync_locks"
