"""
Verification of scanned QR tokens.

A scan is committed only after the external event log has accepted the access
event, so any upstream failure leaves the token pending and the visitor can
simply scan again.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from qr_access.clients import EventLogClient, EventLogError
from qr_access.core.errors import (
    SubmissionFailureError,
    TokenAlreadyConsumedError,
    TokenExpiredError,
    TokenNotFoundError,
    UpstreamUnavailableError,
)
from qr_access.models import TokenRecord, TokenStatus
from qr_access.schemas import QREventClient, QREventData, QREventPayload
from qr_access.services.token_store import TokenStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenVerificationService:
    """Redeem tokens, reporting each successful scan to the event log."""

    def __init__(
        self,
        *,
        store: TokenStore,
        event_log: EventLogClient,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._event_log = event_log
        self._clock = clock

    async def verify(self, token: str) -> TokenRecord:
        """Consume ``token`` and return its verified record."""
        async with self._store.locked(token) as record:
            if record is None:
                logger.info("Verification for unknown token %s", token)
                raise TokenNotFoundError()

            now = self._clock()
            if record.is_valid and record.is_expired(now):
                self._store.mark(token, is_valid=False, status=TokenStatus.EXPIRED)
                logger.info("Token %s expired at %s", token, record.expires_at.isoformat())
                raise TokenExpiredError()

            if not record.is_valid:
                raise TokenAlreadyConsumedError()
            if record.status is not TokenStatus.PENDING:
                raise TokenAlreadyConsumedError(record.status.value)

            try:
                event_count = await self._event_log.count_events()
            except EventLogError as exc:
                logger.warning("Event log pre-check failed for token %s: %s", token, exc)
                raise UpstreamUnavailableError() from exc
            logger.info("Event log currently lists %s events", event_count)

            payload = self._build_event_payload(record, requested_at=now)
            try:
                await self._event_log.submit_event(payload.model_dump())
            except EventLogError as exc:
                logger.warning("Event submission failed for token %s: %s", token, exc)
                raise SubmissionFailureError() from exc

            verified = self._store.mark(
                token, is_valid=False, status=TokenStatus.VERIFIED
            )
            logger.info("Token %s verified for %s", token, verified.phone_number)
            return verified

    @staticmethod
    def _build_event_payload(
        record: TokenRecord, *, requested_at: datetime
    ) -> QREventPayload:
        return QREventPayload(
            client=QREventClient(device_id=record.device_id),
            data=QREventData(
                phone=record.phone_number,
                purpose=record.purpose,
                requested_at=requested_at.isoformat(),
                status=record.status.value,
            ),
        )


__all__ = ["TokenVerificationService"]
