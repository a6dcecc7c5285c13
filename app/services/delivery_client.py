import logging
from typing import Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict

from app.core.config import SIGNATURE_HEADER, SYNC_TIMEOUT

log = logging.getLogger(__name__)

SUCCESS_CODES = (200, 201)


class TransportError(BaseModel):
    """The request never produced an HTTP response (bad URL, DNS, connect, timeout...)."""
    model_config = ConfigDict(frozen=True)

    message: str
    ok: bool = False
    status_code: Optional[int] = None
    body: Optional[str] = None


class HttpResult(BaseModel):
    """The endpoint answered. Only 200 and 201 count as a delivered sync."""
    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return self.status_code in SUCCESS_CODES


DeliveryResult = Union[TransportError, HttpResult]


class DeliveryClient:
    """Single-attempt webhook POST. Never retries, never touches orders or logs."""

    def __init__(self, timeout: float = SYNC_TIMEOUT, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._timeout = timeout
        self._transport = transport

    async def deliver(self, url: str, body: bytes, signature: str) -> DeliveryResult:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            SIGNATURE_HEADER: signature,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(url, content=body, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # InvalidURL (unparsable endpoint) is not an HTTPError subclass
            message = str(e) or e.__class__.__name__
            log.warning(f"Webhook delivery to {url} failed before a response: {message}")
            return TransportError(message=message)

        log.info(f"Webhook delivery to {url} answered HTTP {resp.status_code}")
        return HttpResult(status_code=resp.status_code, body=resp.text)
