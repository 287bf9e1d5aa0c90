"""Client for the external QR access event log."""

from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from qr_access.core.config import EventLogSettings
from qr_access.utils.http import RetryConfig, request_with_retry

logger = logging.getLogger(__name__)


class EventLogError(Exception):
    """Raised when the event log cannot be reached or rejects a request."""


class EventLogClient:
    """List and record QR scan events on the access control server."""

    EVENTS_PATH = "/qr-events"

    def __init__(
        self,
        settings: EventLogSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = str(settings.base_url).rstrip("/")
        self._timeout = settings.timeout_seconds
        self._retry = RetryConfig(attempts=settings.read_attempts)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def count_events(self) -> int:
        """Return how many events the log currently lists."""
        try:
            async with self._client() as client:
                response = await request_with_retry(
                    client.get, self.EVENTS_PATH, retry_config=self._retry
                )
        except httpx.HTTPError as exc:
            raise EventLogError(f"Failed to list QR events: {exc}") from exc

        # An unparseable listing counts as empty.
        try:
            payload = response.json()
        except ValueError:
            logger.warning("Event log returned a non-JSON listing")
            return 0

        events = payload.get("qr_events", payload) if isinstance(payload, dict) else payload
        return len(events) if isinstance(events, list) else 0

    async def submit_event(self, payload: Dict[str, Any]) -> None:
        """Record a single scan event. Never retried."""
        try:
            async with self._client() as client:
                response = await client.post(self.EVENTS_PATH, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise EventLogError(f"Failed to record QR event: {exc}") from exc
        logger.debug("Recorded QR event: %s", payload)


__all__ = ["EventLogClient", "EventLogError"]
