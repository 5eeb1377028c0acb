"""
Terminal error classes surfaced once retrying stops.

Each exception includes a `retryable` flag describing the class of fault:
whether a request failing this way is normally worth another attempt. A raised
error is always final; the flag only explains how the engine treated it.
"""

from typing import Any


class TerminalError(Exception):
    """Base exception for every error delivered by the retry engine."""

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
        body: Any = None,
        attempts: int = 0,
        retry_after: float | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.retryable = retryable
        self.status_code = status_code
        self.body = body
        self.attempts = attempts
        self.retry_after = retry_after

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"(status: {self.status_code})")
        if self.attempts:
            suffix = "attempt" if self.attempts == 1 else "attempts"
            parts.append(f"after {self.attempts} {suffix}")
        return " ".join(parts)


class ProxyFailure(TerminalError):
    """Raised when a proxy or tunnel could not be established. Never retried."""

    def __init__(self, message: str = "Proxy connection failed", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class TransportFault(TerminalError):
    """Raised when no response was received. Retried up to the global budget."""

    def __init__(self, message: str = "Transport failure", **kwargs):
        super().__init__(message, retryable=True, **kwargs)


class ContentContractViolation(TerminalError):
    """Raised when JSON was expected but the body was not structured. Not retryable."""

    def __init__(self, message: str = "Expected JSON", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class ServerFault(TerminalError):
    """Raised for 5xx responses. Retried up to the server error cap."""

    def __init__(self, message: str = "Server error", **kwargs):
        super().__init__(message, retryable=True, **kwargs)


class RateLimited(TerminalError):
    """Raised for 429 responses. Retried up to the rate limit cap."""

    def __init__(self, message: str = "Too Many Requests", **kwargs):
        super().__init__(message, retryable=True, **kwargs)


class ClientFault(TerminalError):
    """Raised for 4xx responses other than 429. Not retryable."""

    def __init__(self, message: str = "Client error", **kwargs):
        super().__init__(message, retryable=False, **kwargs)


class BudgetExhausted(TerminalError):
    """Raised when the attempt budget ran out with no more specific cause."""

    def __init__(self, message: str = "Too many attempts", **kwargs):
        super().__init__(message, retryable=False, **kwargs)
