"""
Attempt outcomes handed to the retry engine after each try.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Union

import httpx

logger = logging.getLogger(__name__)

PROXY_MARKERS = ("proxy", "tunnel")


@dataclass(frozen=True)
class TransportError:
    """No response was received (socket, tunnel or network failure)."""

    message: str
    proxy: bool = False

    @classmethod
    def from_exception(cls, exc: Exception) -> "TransportError":
        """Classify an httpx transport exception."""
        message = str(exc) or type(exc).__name__
        lowered = message.lower()
        proxy = isinstance(exc, httpx.ProxyError) or any(m in lowered for m in PROXY_MARKERS)
        return cls(message=message, proxy=proxy)


@dataclass(frozen=True)
class HttpResponse:
    """A response was received."""

    status_code: int
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers))

    @property
    def has_structured_body(self) -> bool:
        return isinstance(self.body, (dict, list))

    @classmethod
    def from_httpx(cls, response: httpx.Response, expect_json: bool = False) -> "HttpResponse":
        """
        Build an outcome from an httpx response.

        When JSON is expected the body is decoded; a body that does not decode
        is kept as raw text, which the decider rejects as unstructured.
        """
        body: Any = response.text if response.content else None
        if expect_json and body is not None:
            try:
                body = response.json()
            except ValueError:
                logger.debug(f"Response body of status {response.status_code} is not valid JSON")
        return cls(status_code=response.status_code, headers=response.headers, body=body)


AttemptOutcome = Union[TransportError, HttpResponse, None]
