"""
Synchronous retrying client on top of httpx.Client.
"""

import logging
import time
from typing import Any, Callable

import httpx

from .base import BaseRetryClient
from ..retry import RetryEngine, RetryPolicy
from ..retry.context import CompletionCallback

logger = logging.getLogger(__name__)


class RetryClient(BaseRetryClient):
    """
    Blocking HTTP client that retries per a RetryPolicy.

    Features:
    - Tiered caps for transport faults, 5xx and 429 responses
    - Retry-After aware delays with exponential backoff fallback
    - One TerminalError per failed request
    """

    def __init__(
        self,
        base_url: str = "",
        policy: RetryPolicy | None = None,
        expect_json: bool = False,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL prepended to relative request URLs
            policy: Retry policy for failed attempts
            expect_json: Require JSON bodies unless overridden per request
            headers: Headers sent with every request
            transport: Custom httpx transport (e.g. httpx.MockTransport)
            sleep: Function used to wait between attempts
        """
        super().__init__(base_url, policy, expect_json)
        self.engine = RetryEngine(self.policy, sleep=sleep)
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self.policy.timeout,
            transport=transport,
        )

    def request(
        self,
        method: str,
        url: str,
        *,
        expect_json: bool | None = None,
        on_complete: CompletionCallback | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        logger.debug(f"HTTP {method.upper()} {url}")
        return self.engine.run(
            lambda: self._client.request(method, url, **kwargs),
            method=method,
            expect_json=self._resolve_expect_json(expect_json),
            on_complete=on_complete,
        )

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", url, **kwargs)

    def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET a URL that must answer with JSON and return the decoded body."""
        return self.request("GET", url, expect_json=True, **kwargs).json()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RetryClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
