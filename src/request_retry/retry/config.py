"""
Retry policy and verdict definitions.
"""

from dataclasses import dataclass
from enum import Enum

DEFAULT_MAX_WAIT = 5.0


class Verdict(str, Enum):
    """Outcome of a retry decision for one completed attempt."""

    RETRY = "retry"  # wait, then attempt again
    SUCCEED = "succeed"  # stop, hand the response back
    FAIL = "fail"  # stop, synthesize a terminal error


@dataclass(frozen=True)
class RetryPolicy:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Global bound on attempts per request (default: 3)
        server_error_cap: Attempts allowed while the server answers 5xx (default: 2)
        rate_limit_cap: Attempts allowed while the server answers 429 (default: 2)
        base_delay: Backoff for the first retry in seconds (default: 1.0)
        jitter: Upper bound of the random delay added to backoff, in seconds (default: 1.0)
        max_wait: Longest server-requested wait honored, None to honor any (default: None)
        fail_on_proxy_error: Treat proxy/tunnel failures as fatal (default: True)
        timeout: Per-attempt timeout in seconds handed to the HTTP client (default: 3.0)

    The caps only narrow the budget: a cap above max_attempts is accepted and
    behaves as if it equaled max_attempts.
    """

    max_attempts: int = 3
    server_error_cap: int = 2
    rate_limit_cap: int = 2
    base_delay: float = 1.0
    jitter: float = 1.0
    max_wait: float | None = None
    fail_on_proxy_error: bool = True
    timeout: float = 3.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.server_error_cap < 1 or self.rate_limit_cap < 1:
            raise ValueError("server_error_cap and rate_limit_cap must be at least 1")
        if self.base_delay < 0 or self.jitter < 0:
            raise ValueError("base_delay and jitter must not be negative")
        if self.max_wait is not None and self.max_wait < 0:
            raise ValueError(f"max_wait must not be negative, got {self.max_wait}")

    @classmethod
    def default(cls) -> "RetryPolicy":
        """Preset matching the plain defaults."""
        return cls()

    @classmethod
    def guarded(cls) -> "RetryPolicy":
        """Preset that refuses to wait longer than DEFAULT_MAX_WAIT on a 429."""
        return cls(max_wait=DEFAULT_MAX_WAIT)

    @classmethod
    def lenient(cls) -> "RetryPolicy":
        """Preset that retries proxy failures like any other transport error."""
        return cls(fail_on_proxy_error=False)

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        """Preset for no retry (single attempt only)."""
        return cls(max_attempts=1, server_error_cap=1, rate_limit_cap=1)
