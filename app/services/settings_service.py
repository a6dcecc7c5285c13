import logging

from app.core.config import DEFAULT_ENDPOINT_BASE_URL, DEFAULT_WEBHOOK_SECRET
from app.models.option import Option
from app.schemas.settings import SyncSettings

log = logging.getLogger(__name__)

SETTINGS_KEY = "order_sync_settings"


async def get_settings() -> SyncSettings:
    """Reads the persisted sync configuration (empty defaults when never saved)."""
    option = await Option.get_or_none(key=SETTINGS_KEY)
    if option is None:
        return SyncSettings()
    return SyncSettings.model_validate(option.value)


async def save_settings(settings: SyncSettings) -> SyncSettings:
    value = settings.model_dump()
    await Option.update_or_create(key=SETTINGS_KEY, defaults={"value": value})
    log.info(f"Sync settings saved (endpoint={value['endpoint_base_url'] or '<empty>'}, statuses={value['sync_on_status']}).")
    return SyncSettings.model_validate(value)


async def ensure_default_settings() -> None:
    """Creates the settings entry on first start, seeded from the environment."""
    _, created = await Option.get_or_create(
        key=SETTINGS_KEY,
        defaults={
            "value": SyncSettings(
                endpoint_base_url=DEFAULT_ENDPOINT_BASE_URL,
                webhook_secret=DEFAULT_WEBHOOK_SECRET,
            ).model_dump()
        },
    )
    if created:
        log.info("Default sync settings created.")


def mask_secret(secret: str) -> str:
    if not secret:
        return ""
    if len(secret) <= 4:
        return "*" * len(secret)
    return "*" * (len(secret) - 4) + secret[-4:]
