"""
Backoff calculation and Retry-After handling.
"""

import logging
import math
import random
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable

from .config import RetryPolicy
from .context import AttemptContext
from .outcome import AttemptOutcome, HttpResponse

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def calculate_backoff(attempt: int, policy: RetryPolicy) -> float:
    """
    Calculate backoff delay for a given attempt.

    Args:
        attempt: One-based attempt number that just failed
        policy: Retry policy

    Returns:
        Delay in seconds, in [base * 2**(attempt - 1), base * 2**(attempt - 1) + jitter)
    """
    delay = policy.base_delay * (2 ** max(0, attempt - 1))
    if policy.jitter > 0:
        delay += random.random() * policy.jitter
    return delay


def parse_retry_after(value: str | None, now: datetime | None = None) -> float | None:
    """
    Parse a Retry-After header value into seconds.

    Args:
        value: Header value, either delta-seconds or an HTTP-date
        now: Reference time for HTTP-dates (default: current UTC time)

    Returns:
        Seconds to wait (negative for dates in the past, math.inf for
        delta-seconds too large to represent), or None when the value is
        missing or cannot be parsed
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isascii() and value.isdigit():
        try:
            return float(int(value))
        except (OverflowError, ValueError):
            logger.debug(f"Retry-After of {len(value)} digits treated as unbounded")
            return math.inf

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        logger.debug(f"Unparseable Retry-After value: {value!r}")
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return (when - (now or utcnow())).total_seconds()


class DelayCalculator:
    """
    Computes the wait before the next attempt.

    Rate-limited responses honor the server's Retry-After hint; everything
    else gets exponential backoff with jitter.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.policy = policy or RetryPolicy()
        self.clock = clock

    def delay(self, outcome: AttemptOutcome, ctx: AttemptContext) -> float:
        ctx.last_wait = None

        if not isinstance(outcome, HttpResponse) or outcome.status_code != 429:
            return calculate_backoff(ctx.attempt_number, self.policy)

        wait = parse_retry_after(outcome.headers.get("retry-after"), now=self.clock())
        if wait is None or (math.isinf(wait) and self.policy.max_wait is None):
            wait = calculate_backoff(ctx.attempt_number, self.policy)
        else:
            logger.debug(f"Server requested a wait of {wait:.1f}s")

        ctx.last_wait = wait
        return wait

    def exceeds_max_wait(self, wait: float) -> bool:
        """Check if a wait is longer than the configured ceiling."""
        return self.policy.max_wait is not None and wait > self.policy.max_wait
