from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from qr_access.clients import EventLogError
from qr_access.core.errors import (
    SubmissionFailureError,
    TokenAlreadyConsumedError,
    TokenExpiredError,
    TokenNotFoundError,
    UpstreamUnavailableError,
)
from qr_access.models import TokenRecord, TokenStatus
from qr_access.services import TokenStore, TokenVerificationService

pytestmark = pytest.mark.anyio


class FakeEventLog:
    def __init__(self) -> None:
        self.events: list[dict] = []
        self.count_calls = 0
        self.fail_count = False
        self.fail_submit = False
        self.gate: asyncio.Event | None = None

    async def count_events(self) -> int:
        self.count_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_count:
            raise EventLogError("connection refused")
        return len(self.events)

    async def submit_event(self, payload: dict) -> None:
        if self.fail_submit:
            raise EventLogError("500 Internal Server Error")
        self.events.append(payload)


@pytest.fixture
def store() -> TokenStore:
    return TokenStore()


@pytest.fixture
def event_log() -> FakeEventLog:
    return FakeEventLog()


@pytest.fixture
def service(store, event_log, clock) -> TokenVerificationService:
    return TokenVerificationService(store=store, event_log=event_log, clock=clock)


@pytest.fixture
def issued(store, clock) -> TokenRecord:
    record = TokenRecord(
        token="tok-1",
        phone_number="01012345678",
        expires_at=clock.now + timedelta(minutes=1),
        purpose="Visitor",
        device_id="gate-a",
    )
    store.put(record)
    return record


async def test_fresh_token_verifies_exactly_once(service, store, issued) -> None:
    verified = await service.verify(issued.token)

    assert verified.status is TokenStatus.VERIFIED
    assert verified.is_valid is False
    assert store.get(issued.token).status is TokenStatus.VERIFIED

    with pytest.raises(TokenAlreadyConsumedError):
        await service.verify(issued.token)


async def test_successful_scan_posts_event_payload(service, event_log, issued, clock) -> None:
    await service.verify(issued.token)

    assert event_log.events == [
        {
            "client": {"device_id": "gate-a"},
            "data": {
                "phone": "01012345678",
                "purpose": "Visitor",
                "requested_at": clock.now.isoformat(),
                "status": "pending",
            },
        }
    ]


async def test_unknown_token_is_not_found(service, issued) -> None:
    with pytest.raises(TokenNotFoundError):
        await service.verify("does-not-exist")


async def test_expired_scan_then_rescan_reports_already_consumed(
    service, store, event_log, issued, clock
) -> None:
    clock.advance(minutes=1, seconds=1)

    with pytest.raises(TokenExpiredError):
        await service.verify(issued.token)
    record = store.get(issued.token)
    assert record.status is TokenStatus.EXPIRED
    assert record.is_valid is False

    with pytest.raises(TokenAlreadyConsumedError):
        await service.verify(issued.token)
    assert event_log.count_calls == 0
    assert event_log.events == []


async def test_scan_exactly_at_expiry_is_still_accepted(service, issued, clock) -> None:
    clock.now = issued.expires_at

    verified = await service.verify(issued.token)
    assert verified.status is TokenStatus.VERIFIED


async def test_verified_token_stays_verified_after_expiry(service, store, issued, clock) -> None:
    await service.verify(issued.token)
    clock.advance(hours=1)

    with pytest.raises(TokenAlreadyConsumedError):
        await service.verify(issued.token)
    assert store.get(issued.token).status is TokenStatus.VERIFIED


async def test_precheck_failure_leaves_token_pending(service, store, event_log, issued) -> None:
    event_log.fail_count = True

    with pytest.raises(UpstreamUnavailableError):
        await service.verify(issued.token)

    record = store.get(issued.token)
    assert record.status is TokenStatus.PENDING
    assert record.is_valid is True
    assert event_log.events == []

    event_log.fail_count = False
    verified = await service.verify(issued.token)
    assert verified.status is TokenStatus.VERIFIED


async def test_submission_failure_leaves_token_pending(service, store, event_log, issued) -> None:
    event_log.fail_submit = True

    with pytest.raises(SubmissionFailureError):
        await service.verify(issued.token)

    record = store.get(issued.token)
    assert record.status is TokenStatus.PENDING
    assert record.is_valid is True

    event_log.fail_submit = False
    verified = await service.verify(issued.token)
    assert verified.status is TokenStatus.VERIFIED
    assert len(event_log.events) == 1


async def test_concurrent_scans_only_one_succeeds(service, event_log, issued) -> None:
    event_log.gate = asyncio.Event()

    first = asyncio.create_task(service.verify(issued.token))
    second = asyncio.create_task(service.verify(issued.token))
    await asyncio.sleep(0)
    event_log.gate.set()

    results = await asyncio.gather(first, second, return_exceptions=True)

    successes = [r for r in results if isinstance(r, TokenRecord)]
    conflicts = [r for r in results if isinstance(r, TokenAlreadyConsumedError)]
    assert len(successes) == 1
    assert len(conflicts) == 1
    assert len(event_log.events) == 1


async def test_distinct_failures_map_to_distinct_statuses() -> None:
    statuses = {
        TokenNotFoundError.status_code,
        TokenExpiredError.status_code,
        TokenAlreadyConsumedError.status_code,
        UpstreamUnavailableError.status_code,
        SubmissionFailureError.status_code,
    }
    assert len(statuses) == 5
