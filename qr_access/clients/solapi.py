"""
SOLAPI messaging client.

Signs each request with the HMAC-SHA256 scheme documented by SOLAPI and sends
single SMS/LMS messages through the v4 REST API.
"""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timezone
from hashlib import sha256
from typing import Any, Dict

import httpx

from qr_access.core.config import MessagingSettings


class MessageDeliveryError(Exception):
    """Raised when SOLAPI refuses or fails to accept a message."""


class SolapiMessagingClient:
    """Send text messages via SOLAPI."""

    SEND_PATH = "/messages/v4/send"

    def __init__(
        self,
        settings: MessagingSettings,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._base_url = str(settings.base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def build_authorization_header(
        self, *, date: str | None = None, salt: str | None = None
    ) -> str:
        """Return the ``Authorization`` header value for a request."""
        date = date or datetime.now(timezone.utc).isoformat(timespec="seconds")
        salt = salt or secrets.token_hex(16)
        signature = hmac.new(
            self._settings.api_secret.encode("utf-8"),
            f"{date}{salt}".encode("utf-8"),
            sha256,
        ).hexdigest()
        return (
            f"HMAC-SHA256 apiKey={self._settings.api_key}, "
            f"date={date}, salt={salt}, signature={signature}"
        )

    async def send_text(self, *, to: str, text: str) -> Dict[str, Any]:
        """Send ``text`` to ``to`` and return SOLAPI's message descriptor."""
        payload = {
            "message": {
                "to": to,
                "from": self._settings.sender_number,
                "text": text,
            }
        }
        headers = {"Authorization": self.build_authorization_header()}

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self.SEND_PATH, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise MessageDeliveryError(f"SOLAPI request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise MessageDeliveryError(
                f"SOLAPI returned {response.status_code}: {response.text}"
            )
        return response.json()


__all__ = ["MessageDeliveryError", "SolapiMessagingClient"]
