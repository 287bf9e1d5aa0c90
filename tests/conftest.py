"""Pytest configuration shared across the suite."""

from datetime import datetime, timedelta, timezone

import pytest

try:
    from . import _bootstrap  # noqa: F401
except ImportError:  # pragma: no cover - rootdir-relative collection
    import _bootstrap  # type: ignore # noqa: F401


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


class FakeClock:
    """Controllable replacement for ``datetime.now(timezone.utc)``."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
