import pytest

from app.models.option import Option
from app.schemas.settings import SettingsUpdate, SyncSettings, normalize_status
from app.services.settings_service import (
    SETTINGS_KEY,
    ensure_default_settings,
    get_settings,
    mask_secret,
    save_settings,
)


@pytest.mark.parametrize("secret, masked", [
    ("", ""),
    ("abc", "***"),
    ("test-webhook-secret-123", "*******************-123"),
])
def test_mask_secret(secret, masked):
    assert mask_secret(secret) == masked


def test_normalize_status_strips_prefix():
    assert normalize_status("wc-completed") == "completed"
    assert normalize_status(" processing ") == "processing"


def test_endpoint_url_joins_without_double_slash():
    settings = SyncSettings(endpoint_base_url="https://app.example.test/", webhook_secret="x" * 12)
    assert settings.endpoint_url == "https://app.example.test/api/v1/woocommerce-sync"
    assert settings.is_configured


def test_blank_values_are_not_configured():
    assert not SyncSettings(endpoint_base_url="   ", webhook_secret="x" * 12).is_configured


def test_update_validation():
    with pytest.raises(ValueError):
        SettingsUpdate(endpoint_base_url="ftp://app.example.test", webhook_secret="x" * 12)
    with pytest.raises(ValueError):
        SettingsUpdate(endpoint_base_url="http://[::1", webhook_secret="x" * 12)
    with pytest.raises(ValueError):
        SettingsUpdate(endpoint_base_url="https://", webhook_secret="x" * 12)
    assert SettingsUpdate(endpoint_base_url="http://localhost:8000/", webhook_secret="x" * 12).endpoint_base_url
    # Empty values are accepted; the sync path reports them as not configured
    assert SettingsUpdate().webhook_secret == ""


@pytest.mark.asyncio
async def test_settings_default_when_never_saved(db):
    settings = await get_settings()
    assert settings.is_configured is False
    assert settings.sync_on_status == ["completed", "processing"]


@pytest.mark.asyncio
async def test_save_then_get(db, settings):
    await save_settings(settings.model_copy(update={"sync_on_status": ["completed"]}))
    await save_settings(settings)

    loaded = await get_settings()
    assert loaded == settings
    assert await Option.filter(key=SETTINGS_KEY).count() == 1


@pytest.mark.asyncio
async def test_ensure_default_settings_keeps_existing(db, settings):
    await save_settings(settings)

    await ensure_default_settings()

    assert await get_settings() == settings
