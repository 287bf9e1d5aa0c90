"""In-memory storage for issued QR tokens with per-token locking."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import AsyncIterator, Dict, Optional

from qr_access.models import TokenRecord, TokenStatus


@dataclass(slots=True)
class _Entry:
    record: TokenRecord
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


class TokenStore:
    """
    Process-wide mapping from token value to its verification record.

    Callers only ever receive copies of records; every mutation goes through
    :meth:`mark`, which refuses transitions that would undo a consumption or
    an expiry. The read-check-then-write sequence of a verification is
    serialized with :meth:`locked`.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def put(self, record: TokenRecord) -> None:
        if record.token in self._entries:
            raise ValueError(f"Token {record.token!r} already exists")
        self._entries[record.token] = _Entry(record=replace(record))

    def get(self, token: str) -> Optional[TokenRecord]:
        entry = self._entries.get(token)
        if entry is None:
            return None
        return replace(entry.record)

    def mark(
        self,
        token: str,
        *,
        is_valid: bool | None = None,
        status: TokenStatus | None = None,
    ) -> TokenRecord:
        """Apply an in-place update to a stored record and return a snapshot."""
        entry = self._entries.get(token)
        if entry is None:
            raise KeyError(token)
        record = entry.record

        if is_valid is True and not record.is_valid:
            raise ValueError("An invalidated token cannot become valid again")
        if status is not None and status is not record.status:
            if record.status.is_terminal:
                raise ValueError(
                    f"Token already {record.status.value}; cannot move to {status.value}"
                )
            record.status = status
        if is_valid is not None:
            record.is_valid = is_valid
        return replace(record)

    @asynccontextmanager
    async def locked(self, token: str) -> AsyncIterator[Optional[TokenRecord]]:
        """
        Hold the token's lock and yield a fresh snapshot of its record.

        Yields ``None`` when the token is unknown, including when the record
        was reclaimed while waiting for the lock.
        """
        entry = self._entries.get(token)
        if entry is None:
            yield None
            return
        async with entry.lock:
            current = self._entries.get(token)
            yield replace(entry.record) if current is entry else None

    def purge_expired(self, before: datetime) -> int:
        """Drop records that expired before ``before`` and are not being verified."""
        stale = [
            token
            for token, entry in self._entries.items()
            if entry.record.expires_at < before and not entry.lock.locked()
        ]
        for token in stale:
            del self._entries[token]
        return len(stale)


__all__ = ["TokenStore"]
