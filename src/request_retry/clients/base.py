"""
Base retrying client interface.

Defines the common interface shared by the sync and async httpx wrappers.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..retry import RetryPolicy


class BaseRetryClient(ABC):
    """
    Abstract base class for retrying HTTP clients.

    Both wrappers delegate the transport to httpx and consult the retry
    engine after every attempt.
    """

    def __init__(
        self,
        base_url: str = "",
        policy: RetryPolicy | None = None,
        expect_json: bool = False,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL prepended to relative request URLs
            policy: Retry policy for failed attempts
            expect_json: Require JSON bodies unless overridden per request
        """
        self.base_url = base_url.rstrip("/")
        self.policy = policy or RetryPolicy()
        self.expect_json = expect_json

    def _resolve_expect_json(self, expect_json: bool | None) -> bool:
        return self.expect_json if expect_json is None else expect_json

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        *,
        expect_json: bool | None = None,
        **kwargs: Any,
    ) -> Any:
        """
        Send a request, retrying according to the policy.

        Args:
            method: HTTP method
            url: Absolute URL, or path relative to base_url
            expect_json: Override the client's JSON expectation
            **kwargs: Passed through to httpx

        Returns:
            The successful httpx.Response (awaitable for async clients)

        Raises:
            TerminalError: Once retrying stops without success
        """
        ...
