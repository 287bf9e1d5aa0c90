from __future__ import annotations

import json

import httpx
import pytest

from qr_access.clients import EventLogClient, EventLogError
from qr_access.core.config import EventLogSettings

pytestmark = pytest.mark.anyio


def _client(handler, *, attempts: int = 1) -> EventLogClient:
    settings = EventLogSettings(
        EVENT_LOG_BASE_URL="https://events.example.com",
        EVENT_LOG_TIMEOUT=2.0,
        EVENT_LOG_READ_ATTEMPTS=attempts,
    )
    return EventLogClient(settings, transport=httpx.MockTransport(handler))


async def test_count_events_reads_wrapped_listing() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"qr_events": [{"id": 1}, {"id": 2}]})

    assert await _client(handler).count_events() == 2
    assert seen[0].method == "GET"
    assert str(seen[0].url) == "https://events.example.com/qr-events"


async def test_count_events_accepts_bare_list_and_odd_shapes() -> None:
    assert await _client(lambda r: httpx.Response(200, json=[{}, {}, {}])).count_events() == 3
    assert await _client(lambda r: httpx.Response(200, json={"total": 9})).count_events() == 0


async def test_count_events_wraps_http_errors() -> None:
    with pytest.raises(EventLogError):
        await _client(lambda r: httpx.Response(503)).count_events()


async def test_count_events_wraps_connection_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(EventLogError):
        await _client(handler).count_events()


async def test_count_events_retries_when_configured() -> None:
    responses = iter([httpx.Response(502), httpx.Response(200, json=[{}])])

    count = await _client(lambda r: next(responses), attempts=2).count_events()
    assert count == 1


async def test_submit_event_posts_json_once() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": 10})

    payload = {"client": {"device_id": "device"}, "data": {"phone": "0101"}}
    await _client(handler, attempts=3).submit_event(payload)

    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == payload


async def test_submit_event_is_not_retried_on_failure() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    with pytest.raises(EventLogError):
        await _client(handler, attempts=3).submit_event({"client": {}, "data": {}})
    assert len(calls) == 1


async def test_count_events_treats_non_json_listing_as_empty() -> None:
    count = await _client(lambda r: httpx.Response(200, text="<html>ok</html>")).count_events()
    assert count == 0
