from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.errors import ConfigurationError, NOT_CONFIGURED_MESSAGE
from app.schemas.settings import SyncSettings, normalize_status


class SyncDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    proceed: bool
    reason: Optional[str] = None
    # A refusal that must still leave a failed row in the attempt log
    log_failure: bool = False


def should_sync(order, settings: SyncSettings, *, status: Optional[str] = None, force: bool = False) -> SyncDecision:
    """
    Gate in front of every attempt.

    ``status`` overrides the order's stored status (the status-change hook
    passes the new status). ``force`` is used by operator triggers and skips
    the allow-list, never the configuration check.
    """
    try:
        settings.require_configured()
    except ConfigurationError as e:
        return SyncDecision(proceed=False, reason=str(e), log_failure=True)

    if force:
        return SyncDecision(proceed=True)

    current = normalize_status(status if status is not None else order.status)
    if current not in settings.sync_on_status:
        # Not every transition deserves a log row
        return SyncDecision(proceed=False, reason=f"Status '{current}' is not configured for sync")

    return SyncDecision(proceed=True)
