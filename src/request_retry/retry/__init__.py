"""
request-retry - Retry Logic.

Per-attempt retry decisions, Retry-After aware backoff with jitter, and
terminal error synthesis.
"""

from .config import DEFAULT_MAX_WAIT, RetryPolicy, Verdict
from .context import AttemptContext, CompletionLatch, FailureCause
from .outcome import AttemptOutcome, HttpResponse, TransportError
from .backoff import DelayCalculator, calculate_backoff, parse_retry_after
from .decider import RetryDecider
from .synthesizer import ErrorSynthesizer
from .engine import RetryEngine, with_retry, async_with_retry

__all__ = [
    "DEFAULT_MAX_WAIT",
    "RetryPolicy",
    "Verdict",
    "AttemptContext",
    "CompletionLatch",
    "FailureCause",
    "AttemptOutcome",
    "HttpResponse",
    "TransportError",
    "DelayCalculator",
    "calculate_backoff",
    "parse_retry_after",
    "RetryDecider",
    "ErrorSynthesizer",
    "RetryEngine",
    "with_retry",
    "async_with_retry",
]
