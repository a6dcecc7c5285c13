import logging
from fastapi import APIRouter
from app.schemas.response import SuccessResponse
from app.schemas.settings import SettingsResponse, SettingsUpdate, SyncSettings
from app.services.settings_service import get_settings, mask_secret, save_settings

log = logging.getLogger("uvicorn")

router = APIRouter()


def _to_response(settings: SyncSettings) -> SettingsResponse:
    return SettingsResponse(
        endpoint_base_url=settings.endpoint_base_url,
        webhook_secret=mask_secret(settings.webhook_secret),
        sync_on_status=settings.sync_on_status,
        is_configured=settings.is_configured,
        endpoint_url=settings.endpoint_url if settings.endpoint_base_url else "",
    )


@router.get("/", response_model=SuccessResponse)
async def get_settings_endpoint():
    """Current sync configuration with the webhook secret masked."""
    return SuccessResponse(data=_to_response(await get_settings()).model_dump())


@router.put("/", response_model=SuccessResponse)
async def update_settings_endpoint(payload: SettingsUpdate):
    """Replaces the sync configuration."""
    settings = await save_settings(SyncSettings.model_validate(payload.model_dump()))
    return SuccessResponse(message="Settings saved successfully!", data=_to_response(settings).model_dump())
