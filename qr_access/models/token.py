"""
Domain model for a single issued QR access token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class TokenStatus(str, Enum):
    """Lifecycle states of a token record."""

    PENDING = "pending"
    EXPIRED = "expired"
    VERIFIED = "verified"

    @property
    def is_terminal(self) -> bool:
        return self is not TokenStatus.PENDING


@dataclass(slots=True)
class TokenRecord:
    """Verification record owned by the token store."""

    token: str
    phone_number: str
    expires_at: datetime
    purpose: str
    device_id: str
    is_valid: bool = True
    status: TokenStatus = TokenStatus.PENDING
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


__all__ = ["TokenRecord", "TokenStatus"]
