"""Webhook signature: base64-encoded HMAC-SHA256 of the exact request body."""

import base64
import hashlib
import hmac


def sign_payload(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, secret: str, signature: str) -> bool:
    """Recomputes the signature over ``body`` and compares in constant time."""
    return hmac.compare_digest(sign_payload(body, secret), signature or "")
