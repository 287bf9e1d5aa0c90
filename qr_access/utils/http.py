"""HTTP utilities providing retry/backoff semantics for idempotent calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)


class RetryConfig:
    def __init__(self, *, attempts: int = 1, backoff_seconds: float = 0.5) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds


async def request_with_retry(
    func: Callable[..., Awaitable[httpx.Response]],
    *args,
    retry_config: RetryConfig | None = None,
    **kwargs,
) -> httpx.Response:
    """
    Invoke ``func`` until it returns a 2xx response or attempts run out.

    Only use this for side-effect free requests; the last error is re-raised.
    """
    config = retry_config or RetryConfig()
    last_exception: httpx.HTTPError | None = None

    for attempt in range(1, config.attempts + 1):
        try:
            response = await func(*args, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as exc:
            last_exception = exc
            if attempt >= config.attempts:
                break
            logger.warning(
                "Request attempt %s/%s failed: %s", attempt, config.attempts, exc
            )
            await asyncio.sleep(config.backoff_seconds * attempt)

    if last_exception is not None:
        raise last_exception
    raise RuntimeError("Request failed without raising an exception")


__all__ = ["RetryConfig", "request_with_retry"]
