from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest

from pyklaviyo._transport import HttpTransport
from pyklaviyo.config import KlaviyoConfig
from pyklaviyo.exceptions import (
    KlaviyoApiError,
    KlaviyoAuthenticationError,
    KlaviyoRateLimitError,
    KlaviyoTransportError,
)


@dataclass
class FakeResponse:
    status: int
    body: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    async def text(self) -> str:
        return self.body


class FakeRequestContext:
    def __init__(self, outcome: FakeResponse | Exception) -> None:
        self._outcome = outcome

    async def __aenter__(self) -> FakeResponse:
        if isinstance(self._outcome, Exception):
            raise self._outcome
        return self._outcome

    async def __aexit__(self, *exc: Any) -> None:
        return None


class FakeSession:
    """Stands in for ``aiohttp.ClientSession``, replaying queued outcomes."""

    def __init__(self, *outcomes: FakeResponse | Exception) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeRequestContext:
        self.calls.append({"method": method, "url": url, **kwargs})
        return FakeRequestContext(self._outcomes.pop(0))


class FakeSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _transport(session: FakeSession, sleep: FakeSleep, **config: Any) -> HttpTransport:
    cfg = KlaviyoConfig(api_key="pk_test", user_agent_suffix="Shop", **config)
    return HttpTransport(cfg, session, sleep=sleep)  # type: ignore[arg-type]


def _errors(detail: str) -> str:
    return json.dumps({"errors": [{"status": 400, "detail": detail}]})


@pytest.mark.asyncio
async def test_get_sends_auth_headers_and_params() -> None:
    session = FakeSession(FakeResponse(200, json.dumps({"data": [{"id": "M1"}]})))
    transport = _transport(session, FakeSleep())

    body = await transport.request("GET", "/api/profiles/", params={"filter": 'equals(email,"a@x.com")'})

    assert body == {"data": [{"id": "M1"}]}
    [call] = session.calls
    assert call["method"] == "GET"
    assert call["url"] == "https://a.klaviyo.com/api/profiles/"
    assert call["params"] == {"filter": 'equals(email,"a@x.com")'}
    assert call["data"] is None
    headers = call["headers"]
    assert headers["authorization"] == "Klaviyo-API-Key pk_test"
    assert headers["revision"] == "2024-10-15"
    assert headers["accept"] == "application/vnd.api+json"
    assert headers["user-agent"] == "pyklaviyo-python Shop"
    assert "content-type" not in headers


@pytest.mark.asyncio
async def test_post_serializes_json_body_and_accepts_empty_reply() -> None:
    session = FakeSession(FakeResponse(202, ""))
    transport = _transport(session, FakeSleep())
    document = {"data": {"type": "event", "attributes": {"metric": {"name": "Opened"}}}}

    assert await transport.request("POST", "/api/events/", json_body=document) == {}

    [call] = session.calls
    assert json.loads(call["data"]) == document
    assert call["headers"]["content-type"] == "application/vnd.api+json"


@pytest.mark.asyncio
async def test_client_error_is_not_retried() -> None:
    session = FakeSession(FakeResponse(400, _errors("Invalid email")))
    sleep = FakeSleep()
    transport = _transport(session, sleep)

    with pytest.raises(KlaviyoApiError) as exc_info:
        await transport.request("POST", "/api/events/", json_body={"data": {}})

    exc = exc_info.value
    assert exc.status_code == 400
    assert exc.endpoint == "/api/events/"
    assert exc.errors[0]["detail"] == "Invalid email"
    assert "Invalid email" in str(exc)
    assert len(session.calls) == 1
    assert sleep.delays == []


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [401, 403])
async def test_auth_failures(status: int) -> None:
    session = FakeSession(FakeResponse(status, _errors("Bad key")))
    transport = _transport(session, FakeSleep())

    with pytest.raises(KlaviyoAuthenticationError):
        await transport.request("GET", "/api/metrics/")


@pytest.mark.asyncio
async def test_throttled_request_is_retried_after_retry_after() -> None:
    session = FakeSession(
        FakeResponse(429, _errors("Throttled"), headers={"Retry-After": "2"}),
        FakeResponse(200, json.dumps({"data": []})),
    )
    sleep = FakeSleep()
    transport = _transport(session, sleep)

    assert await transport.request("GET", "/api/lists/") == {"data": []}
    assert len(session.calls) == 2
    assert sleep.delays == [2.0]


@pytest.mark.asyncio
async def test_server_errors_exhaust_retries() -> None:
    session = FakeSession(*(FakeResponse(503, "unavailable") for _ in range(3)))
    sleep = FakeSleep()
    transport = _transport(session, sleep, num_retries=2)

    with pytest.raises(KlaviyoApiError) as exc_info:
        await transport.request("GET", "/api/metrics/")

    assert exc_info.value.status_code == 503
    assert len(session.calls) == 3
    assert sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_persistent_throttling_raises_rate_limit_error() -> None:
    session = FakeSession(FakeResponse(429, ""), FakeResponse(429, ""))
    transport = _transport(session, FakeSleep(), num_retries=1)

    with pytest.raises(KlaviyoRateLimitError):
        await transport.request("GET", "/api/metrics/")


@pytest.mark.asyncio
async def test_network_errors_are_retried_then_raised() -> None:
    session = FakeSession(
        aiohttp.ClientConnectionError("connection reset"),
        aiohttp.ClientConnectionError("connection reset"),
    )
    transport = _transport(session, FakeSleep(), num_retries=1)

    with pytest.raises(KlaviyoTransportError, match="connection reset"):
        await transport.request("GET", "/api/metrics/")
    assert len(session.calls) == 2


@pytest.mark.asyncio
async def test_zero_retries_makes_a_single_attempt() -> None:
    session = FakeSession(FakeResponse(500, "boom"))
    sleep = FakeSleep()
    transport = _transport(session, sleep, num_retries=0)

    with pytest.raises(KlaviyoApiError):
        await transport.request("GET", "/api/metrics/")
    assert len(session.calls) == 1
    assert sleep.delays == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["<html>oops</html>", "[1, 2]"])
async def test_unexpected_body_raises_transport_error(body: str) -> None:
    session = FakeSession(FakeResponse(200, body))
    transport = _transport(session, FakeSleep())

    with pytest.raises(KlaviyoTransportError) as exc_info:
        await transport.request("GET", "/api/metrics/")
    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("retry_after", ["nan", "inf", "soon"])
async def test_unusable_retry_after_falls_back_to_backoff(retry_after: str) -> None:
    session = FakeSession(
        FakeResponse(429, "", headers={"Retry-After": retry_after}),
        FakeResponse(200, json.dumps({"data": []})),
    )
    sleep = FakeSleep()
    transport = _transport(session, sleep)

    assert await transport.request("GET", "/api/lists/") == {"data": []}
    assert sleep.delays == [0.5]
