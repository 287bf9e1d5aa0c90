"""
Issuance of single-use QR access tokens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable
from urllib.parse import urlencode
from uuid import uuid4

from qr_access.clients import QRCodeRenderer, SolapiMessagingClient
from qr_access.core.errors import BadRequestError, DeliveryFailureError
from qr_access.models import TokenRecord
from qr_access.schemas import IssuanceRequest
from qr_access.services.token_store import TokenStore

logger = logging.getLogger(__name__)

SMS_TEMPLATE = "[Access verification] Open the link below to verify your QR code.\n\n{url}"

# One year.
MAX_VALID_MINUTES = 60 * 24 * 365


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class IssuedToken:
    record: TokenRecord
    verification_url: str
    qr_image: str


class TokenIssuanceService:
    """Create a token, render its verification link and text it to the visitor."""

    def __init__(
        self,
        *,
        store: TokenStore,
        renderer: QRCodeRenderer,
        messenger: SolapiMessagingClient,
        public_host: str,
        purpose: str = "Visitor",
        device_id: str = "device",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._renderer = renderer
        self._messenger = messenger
        self._public_host = public_host.rstrip("/")
        self._purpose = purpose
        self._device_id = device_id
        self._clock = clock

    async def issue(self, request: IssuanceRequest) -> IssuedToken:
        phone_number, minutes = self._validate(request)

        now = self._clock()
        record = TokenRecord(
            token=str(uuid4()),
            phone_number=phone_number,
            expires_at=now + timedelta(minutes=minutes),
            purpose=self._purpose,
            device_id=self._device_id,
            issued_at=now,
        )
        self._store.put(record)
        logger.info(
            "Issued QR token %s for %s valid until %s",
            record.token,
            phone_number,
            record.expires_at.isoformat(),
        )

        url = self.build_verification_url(record.token)
        # The stored record is kept even if delivery fails below.
        try:
            qr_image = await self._renderer.render_data_url(url)
            await self._messenger.send_text(
                to=phone_number, text=SMS_TEMPLATE.format(url=url)
            )
        except Exception as exc:
            logger.exception("QR rendering or SMS delivery failed for token %s", record.token)
            raise DeliveryFailureError() from exc

        return IssuedToken(record=record, verification_url=url, qr_image=qr_image)

    def build_verification_url(self, token: str) -> str:
        return f"{self._public_host}/verify-qr?{urlencode({'token': token})}"

    @staticmethod
    def _validate(request: IssuanceRequest) -> tuple[str, int]:
        phone_raw = (request.phone_number or "").strip()
        minutes_raw = request.valid_time
        if not phone_raw or minutes_raw is None or minutes_raw == "":
            raise BadRequestError()
        if isinstance(minutes_raw, bool):
            raise BadRequestError("Validity time must be a whole number of minutes.")

        try:
            minutes = int(str(minutes_raw).strip())
        except ValueError as exc:
            raise BadRequestError("Validity time must be a whole number of minutes.") from exc
        if minutes <= 0:
            raise BadRequestError("Validity time must be a positive number of minutes.")
        if minutes > MAX_VALID_MINUTES:
            raise BadRequestError(
                f"Validity time must not exceed {MAX_VALID_MINUTES} minutes."
            )

        phone_number = phone_raw.replace("-", "")
        if not phone_number:
            raise BadRequestError()
        return phone_number, minutes


__all__ = ["IssuedToken", "MAX_VALID_MINUTES", "SMS_TEMPLATE", "TokenIssuanceService"]
