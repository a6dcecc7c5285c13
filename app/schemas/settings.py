from typing import List

import httpx
from pydantic import BaseModel, Field, field_validator

from app.core.config import DEFAULT_SYNC_STATUSES, MIN_SECRET_LENGTH, SYNC_ENDPOINT_PATH
from app.core.errors import ConfigurationError


def normalize_status(status: str) -> str:
    """Drops the 'wc-' storage prefix so statuses compare against the allow-list."""
    status = str(getattr(status, "value", status) or "").strip()
    if status.startswith("wc-"):
        return status[len("wc-"):]
    return status


class SyncSettings(BaseModel):
    """Sync configuration, passed explicitly to the policy and the orchestrator."""
    endpoint_base_url: str = ""
    webhook_secret: str = ""
    sync_on_status: List[str] = Field(default_factory=lambda: list(DEFAULT_SYNC_STATUSES))

    @field_validator("endpoint_base_url", "webhook_secret")
    @classmethod
    def _strip(cls, value: str) -> str:
        return (value or "").strip()

    @field_validator("sync_on_status")
    @classmethod
    def _normalize_statuses(cls, value: List[str]) -> List[str]:
        return [normalize_status(s) for s in value if normalize_status(s)]

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint_base_url and self.webhook_secret)

    def require_configured(self) -> None:
        if not self.is_configured:
            raise ConfigurationError()

    @property
    def endpoint_url(self) -> str:
        return self.endpoint_base_url.rstrip("/") + SYNC_ENDPOINT_PATH


class SettingsUpdate(SyncSettings):
    """Settings write request; a non-empty secret must meet the length floor."""

    @field_validator("webhook_secret")
    @classmethod
    def _secret_length(cls, value: str) -> str:
        value = (value or "").strip()
        if value and len(value) < MIN_SECRET_LENGTH:
            raise ValueError(f"webhook_secret must be at least {MIN_SECRET_LENGTH} characters")
        return value

    @field_validator("endpoint_base_url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            return value
        if not value.startswith(("http://", "https://")):
            raise ValueError("endpoint_base_url must start with http:// or https://")
        try:
            host = httpx.URL(value).host
        except httpx.InvalidURL:
            host = ""
        if not host:
            raise ValueError("endpoint_base_url is not a valid URL")
        return value


class SettingsResponse(BaseModel):
    endpoint_base_url: str
    webhook_secret: str  # Masked
    sync_on_status: List[str]
    is_configured: bool
    endpoint_url: str
