from tortoise import fields, models


class Option(models.Model):
    """Process-wide key/value settings (e.g. the sync endpoint configuration)."""
    id = fields.IntField(primary_key=True)
    key = fields.CharField(max_length=191, unique=True)
    value = fields.JSONField()
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "options"
