"""Periodic reclamation of long-expired token records."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from qr_access.services.token_store import TokenStore

logger = logging.getLogger(__name__)


class ExpiredTokenReclaimer:
    """Sweep the token store so memory does not grow with every issued code."""

    def __init__(
        self,
        store: TokenStore,
        *,
        interval_seconds: float,
        retention_seconds: int,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._store = store
        self._interval = interval_seconds
        self._retention = timedelta(seconds=retention_seconds)
        self._clock = clock

    def reclaim_once(self) -> int:
        removed = self._store.purge_expired(self._clock() - self._retention)
        if removed:
            logger.info("Reclaimed %s expired tokens, %s remain", removed, len(self._store))
        return removed

    async def run_forever(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.reclaim_once()
            except Exception:
                logger.exception("Expired token sweep failed")


__all__ = ["ExpiredTokenReclaimer"]
