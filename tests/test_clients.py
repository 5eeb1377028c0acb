"""Tests for retrying clients - behavior focused with httpx.MockTransport."""

import httpx
import pytest

from request_retry.clients import AsyncRetryClient, RetryClient
from request_retry.exceptions import (
    ClientFault,
    ContentContractViolation,
    ProxyFailure,
    ServerFault,
    TransportFault,
)
from request_retry.retry import RetryPolicy


# --- Helpers ---


class ScriptedHandler:
    """Mock transport handler replaying responses or raising exceptions in order."""

    def __init__(self, *outcomes):
        self.outcomes = outcomes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        item = self.outcomes[min(len(self.requests), len(self.outcomes) - 1)]
        self.requests.append(request)
        if isinstance(item, Exception):
            raise item
        return item


FAST = RetryPolicy(base_delay=0.0, jitter=0.0)


def make_client(handler, policy=FAST, **kwargs) -> RetryClient:
    return RetryClient(
        base_url="http://test",
        policy=policy,
        transport=httpx.MockTransport(handler),
        sleep=lambda _: None,
        **kwargs,
    )


def make_async_client(handler, policy=FAST, **kwargs) -> AsyncRetryClient:
    async def no_sleep(_):
        return None

    return AsyncRetryClient(
        base_url="http://test",
        policy=policy,
        transport=httpx.MockTransport(handler),
        sleep=no_sleep,
        **kwargs,
    )


# --- Sync client ---


class TestRetryClient:
    """Test RetryClient behavior."""

    def test_returns_response_on_success(self):
        handler = ScriptedHandler(httpx.Response(200, text="hello"))

        with make_client(handler) as client:
            response = client.get("/items")

        assert response.text == "hello"
        assert handler.requests[0].url == "http://test/items"

    def test_retries_server_error_then_succeeds(self):
        handler = ScriptedHandler(httpx.Response(502), httpx.Response(200))

        with make_client(handler) as client:
            response = client.get("/items")

        assert response.status_code == 200
        assert len(handler.requests) == 2

    def test_post_500_is_not_retried(self):
        handler = ScriptedHandler(httpx.Response(500), httpx.Response(200))

        with make_client(handler) as client:
            with pytest.raises(ServerFault) as exc_info:
                client.post("/items", json={"name": "widget"})

        assert len(handler.requests) == 1
        assert exc_info.value.attempts == 1

    def test_client_error_is_not_retried(self):
        handler = ScriptedHandler(httpx.Response(404, text="no such item"))

        with make_client(handler) as client:
            with pytest.raises(ClientFault) as exc_info:
                client.delete("/items/9")

        assert len(handler.requests) == 1
        assert exc_info.value.body == "no such item"

    def test_connection_errors_exhaust_budget(self):
        handler = ScriptedHandler(httpx.ConnectError("Connection refused"))

        with make_client(handler) as client:
            with pytest.raises(TransportFault) as exc_info:
                client.get("/items")

        assert len(handler.requests) == 3
        assert exc_info.value.attempts == 3

    def test_proxy_error_fails_on_first_attempt(self):
        handler = ScriptedHandler(httpx.ProxyError("tunnel could not be established"))

        with make_client(handler) as client:
            with pytest.raises(ProxyFailure):
                client.get("/items")

        assert len(handler.requests) == 1

    def test_get_json_returns_decoded_body(self):
        handler = ScriptedHandler(httpx.Response(200, json={"items": [1, 2]}))

        with make_client(handler) as client:
            assert client.get_json("/items") == {"items": [1, 2]}

    def test_client_level_json_expectation(self):
        handler = ScriptedHandler(
            httpx.Response(200, text="not json"),
            httpx.Response(200, text="not json"),
        )

        with make_client(handler, expect_json=True) as client:
            with pytest.raises(ContentContractViolation):
                client.put("/items/1", json={"name": "widget"})

            # Per-request override wins
            assert client.put("/items/1", expect_json=False).text == "not json"

    def test_sends_default_headers(self):
        handler = ScriptedHandler(httpx.Response(204))

        with make_client(handler, headers={"X-Token": "abc"}) as client:
            client.patch("/items/1", json={"name": "gadget"})

        assert handler.requests[0].headers["X-Token"] == "abc"

    def test_on_complete_receives_final_result(self):
        handler = ScriptedHandler(httpx.Response(503), httpx.Response(201))
        deliveries = []

        with make_client(handler) as client:
            response = client.request(
                "POST",
                "/items",
                on_complete=lambda err, resp: deliveries.append((err, resp)),
            )

        assert deliveries == [(None, response)]


# --- Async client ---


class TestAsyncRetryClient:
    """Test AsyncRetryClient behavior."""

    @pytest.mark.asyncio
    async def test_retries_rate_limit_then_succeeds(self):
        handler = ScriptedHandler(
            httpx.Response(429, headers={"Retry-After": "1"}),
            httpx.Response(200, json={"ok": True}),
        )

        async with make_async_client(handler) as client:
            body = await client.get_json("/items")

        assert body == {"ok": True}
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_server_error_cap(self):
        handler = ScriptedHandler(httpx.Response(503), httpx.Response(503), httpx.Response(200))

        async with make_async_client(handler) as client:
            with pytest.raises(ServerFault) as exc_info:
                await client.get("/items")

        assert len(handler.requests) == 2
        assert exc_info.value.attempts == 2

    @pytest.mark.asyncio
    async def test_read_timeout_then_success(self):
        handler = ScriptedHandler(httpx.ReadTimeout("timed out"), httpx.Response(200))

        async with make_async_client(handler) as client:
            response = await client.post("/items", json={"name": "widget"})

        assert response.status_code == 200
        assert len(handler.requests) == 2


class TestClientInterface:
    """Test that both clients expose the same interface."""

    @pytest.mark.parametrize(
        "name",
        ["request", "get", "post", "put", "patch", "delete", "get_json"],
    )
    def test_both_have_method(self, name):
        assert callable(getattr(RetryClient, name))
        assert callable(getattr(AsyncRetryClient, name))
