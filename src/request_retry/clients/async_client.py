"""
Asynchronous retrying client on top of httpx.AsyncClient.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from .base import BaseRetryClient
from ..retry import RetryEngine, RetryPolicy
from ..retry.context import CompletionCallback

logger = logging.getLogger(__name__)


class AsyncRetryClient(BaseRetryClient):
    """
    Async HTTP client that retries per a RetryPolicy.

    Waits between attempts are scheduled as cancellable asyncio timers;
    attempts for one request never overlap.
    """

    def __init__(
        self,
        base_url: str = "",
        policy: RetryPolicy | None = None,
        expect_json: bool = False,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL prepended to relative request URLs
            policy: Retry policy for failed attempts
            expect_json: Require JSON bodies unless overridden per request
            headers: Headers sent with every request
            transport: Custom httpx transport (e.g. httpx.MockTransport)
            sleep: Coroutine function used to wait between attempts
        """
        super().__init__(base_url, policy, expect_json)
        self.engine = RetryEngine(self.policy, async_sleep=sleep)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.policy.timeout,
            transport=transport,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        expect_json: bool | None = None,
        on_complete: CompletionCallback | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        logger.debug(f"HTTP {method.upper()} {url}")
        return await self.engine.arun(
            lambda: self._client.request(method, url, **kwargs),
            method=method,
            expect_json=self._resolve_expect_json(expect_json),
            on_complete=on_complete,
        )

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET a URL that must answer with JSON and return the decoded body."""
        response = await self.request("GET", url, expect_json=True, **kwargs)
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncRetryClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
