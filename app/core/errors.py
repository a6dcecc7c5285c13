"""Exceptions raised by the order sync core.

Delivery outcomes (transport failures, non-success HTTP codes) are not
exceptions; the delivery client returns them as values and they end up as
failed sync log rows.
"""


class SyncError(Exception):
    """Base class for order sync errors."""


NOT_CONFIGURED_MESSAGE = "Sync not configured: endpoint URL and webhook secret are required"


class ConfigurationError(SyncError):
    """Endpoint URL or webhook secret is missing."""

    def __init__(self, message: str = NOT_CONFIGURED_MESSAGE):
        super().__init__(message)


class NoValidSkusError(SyncError):
    """The order has no line item carrying a non-blank SKU."""

    def __init__(self, message: str = "Order has no products with valid SKUs"):
        super().__init__(message)


class OrderNotFoundError(SyncError, LookupError):
    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class SyncLogNotFoundError(SyncError, LookupError):
    def __init__(self, log_id: int):
        super().__init__(f"Sync log {log_id} not found")
        self.log_id = log_id


class RetryNotAllowedError(SyncError):
    """The referenced log row cannot be retried (wrong order or not failed)."""


class RetryLimitExceededError(SyncError):
    def __init__(self, log_id: int, retry_count: int):
        super().__init__(
            f"Sync log {log_id} has already been retried {retry_count} times"
        )
        self.log_id = log_id
        self.retry_count = retry_count
