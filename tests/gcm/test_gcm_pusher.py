"""Tests for the HTTP gateway pusher using httpx.MockTransport."""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from pushgate.exceptions import (
    GCMAuthenticationError,
    GCMConnectionError,
    GCMMalformedRequestError,
    GCMServerError,
)
from pushgate.gcm.config import GCMConfig
from pushgate.gcm.connection import GCMConnection
from pushgate.gcm.notification import GCMNotification
from pushgate.gcm.pusher import GCMPusher
from pushgate.gcm.results import GCMResult


@pytest.fixture
def gcm_config() -> GCMConfig:
    return GCMConfig(key="sender-key", retry_delay=0.0)


def _ok_body(request: httpx.Request) -> dict:
    ids = json.loads(request.content)["registration_ids"]
    results = []
    for registration_id in ids:
        if registration_id.startswith("bad"):
            results.append({"error": "InvalidRegistration"})
        else:
            results.append({"message_id": f"m-{registration_id}"})
    return {"multicast_id": 1, "results": results}


def test_as_gcm_json():
    notification = GCMNotification(["a", "b"], {"message": "hi"})

    assert json.loads(notification.as_gcm_json()) == {
        "registration_ids": ["a", "b"],
        "data": {"message": "hi"},
    }


def test_slice_default_quantity():
    ids = [f"id-{i}" for i in range(1201)]

    notifications = GCMNotification.slice(ids, {})

    assert [n.count for n in notifications] == [500, 500, 201]


def test_config_validation():
    with pytest.raises(ValueError, match="key"):
        GCMConfig(key="")
    with pytest.raises(ValueError, match="slice_quantity"):
        GCMConfig(key="k", slice_quantity=1001)


@pytest.mark.asyncio
async def test_connection_sends_key_and_parses_results(gcm_config):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_ok_body(request))

    connection = GCMConnection(gcm_config, transport=httpx.MockTransport(handler))

    results = await connection.post(GCMNotification(["a", "bad-b"], {}).as_gcm_json(), 2)

    assert seen[0].headers["Authorization"] == "key=sender-key"
    assert seen[0].headers["Content-Type"] == "application/json"
    assert str(seen[0].url) == gcm_config.url
    assert results.individual_results == (
        GCMResult(message_id="m-a"),
        GCMResult(error="InvalidRegistration"),
    )
    assert results.success == 1
    assert results.failed == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error"),
    [
        (400, GCMMalformedRequestError),
        (401, GCMAuthenticationError),
        (503, GCMServerError),
        (418, GCMConnectionError),
    ],
)
async def test_connection_maps_status_codes(gcm_config, status, error):
    transport = httpx.MockTransport(lambda request: httpx.Response(status, text="nope"))
    connection = GCMConnection(gcm_config, transport=transport)

    with pytest.raises(error):
        await connection.post("{}", 1)


@pytest.mark.asyncio
async def test_server_error_carries_retry_after(gcm_config):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(503, headers={"Retry-After": "0"})
    )
    connection = GCMConnection(gcm_config, transport=transport)

    with pytest.raises(GCMServerError) as exc_info:
        await connection.post("{}", 1)

    assert exc_info.value.retry_after == 0.0


@pytest.mark.asyncio
async def test_network_error_wrapped(gcm_config):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    connection = GCMConnection(gcm_config, transport=httpx.MockTransport(handler))

    with pytest.raises(GCMConnectionError) as exc_info:
        await connection.post("{}", 1)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_pusher_pairs_results(gcm_config):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=_ok_body(request)))
    notification = GCMNotification(["a", "bad-b", "c"], {"k": "v"})

    await GCMPusher(gcm_config, transport=transport).push([notification])

    assert notification.success == 2
    assert notification.failed == 1
    assert notification.paired_results["bad-b"].error == "InvalidRegistration"
    assert notification.paired_results["a"].message_id == "m-a"


@pytest.mark.asyncio
async def test_pusher_retries_server_errors(gcm_config):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls < 3:
            return httpx.Response(500)
        return httpx.Response(200, json=_ok_body(request))

    notification = GCMNotification(["a"], {})

    await GCMPusher(gcm_config, transport=httpx.MockTransport(handler)).push([notification])

    assert calls == 3
    assert notification.individual_results == (GCMResult(message_id="m-a"),)


@pytest.mark.asyncio
async def test_pusher_gives_up_after_max_attempts(gcm_config, caplog):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(502)

    notifications = [GCMNotification(["a", "b"], {}), GCMNotification(["c"], {})]
    logger = logging.getLogger("test.gcm")

    with caplog.at_level(logging.INFO, logger="test.gcm"):
        await GCMPusher(
            gcm_config, transport=httpx.MockTransport(handler), logger=logger
        ).push(notifications)

    assert calls == 10
    assert notifications[0].individual_results == (GCMResult(error="GCMServerError"),) * 2
    assert notifications[1].failed == 1
    messages = [r.getMessage() for r in caplog.records if r.name == "test.gcm"]
    assert "Finished page: 2/2" in messages
    assert any("attempts: 5" in m for m in messages)


@pytest.mark.asyncio
async def test_pusher_does_not_retry_auth_errors(gcm_config):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(401)

    notification = GCMNotification(["a"], {})

    await GCMPusher(gcm_config, transport=httpx.MockTransport(handler)).push([notification])

    assert calls == 1
    assert notification.paired_results == {"a": GCMResult(error="GCMAuthenticationError")}


@pytest.mark.asyncio
async def test_pusher_rejects_result_count_mismatch(gcm_config):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"results": [{"message_id": "1"}]})
    )
    notification = GCMNotification(["a", "b"], {})

    await GCMPusher(gcm_config, transport=transport).push([notification])

    assert notification.failed == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json=[{"message_id": "1"}]),
        httpx.Response(200, json={"results": ["1"]}),
    ],
    ids=["html", "list", "non-object-entry"],
)
async def test_unreadable_ok_response_fails_notification_only(gcm_config, response):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls == 1:
            return response
        return httpx.Response(200, json=_ok_body(request))

    notifications = [GCMNotification(["a"], {}), GCMNotification(["b"], {})]

    await GCMPusher(gcm_config, transport=httpx.MockTransport(handler)).push(notifications)

    assert notifications[0].individual_results == (GCMResult(error="GCMError"),)
    assert notifications[1].individual_results == (GCMResult(message_id="m-b"),)
    assert calls == 2


def test_pusher_slice_uses_configured_quantity():
    config = GCMConfig(key="sender-key", slice_quantity=1000)
    ids = [f"id-{i}" for i in range(1201)]

    notifications = GCMPusher(config).slice(ids, {})

    assert [n.count for n in notifications] == [1000, 201]


@pytest.mark.asyncio
async def test_pushing_again_refreshes_paired_results(gcm_config):
    responses = iter([httpx.Response(401), None])

    def handler(request: httpx.Request) -> httpx.Response:
        response = next(responses)
        return response if response is not None else httpx.Response(200, json=_ok_body(request))

    pusher = GCMPusher(gcm_config, transport=httpx.MockTransport(handler))
    notification = GCMNotification(["a"], {})

    await pusher.push([notification])
    await pusher.push([notification])

    assert notification.paired_results == {"a": GCMResult(message_id="m-a")}


def test_default_logger_is_the_module_logger(gcm_config):
    assert GCMPusher(gcm_config)._log.name == "pushgate.gcm.pusher"
