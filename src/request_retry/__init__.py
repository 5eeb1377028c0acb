"""
request-retry - HTTP retry policy engine.

Decides after every attempt whether to retry, how long to wait, and which
single error to surface once retrying stops.
"""

from .clients import BaseRetryClient, RetryClient, AsyncRetryClient
from .exceptions import (
    TerminalError,
    ProxyFailure,
    TransportFault,
    ContentContractViolation,
    ServerFault,
    RateLimited,
    ClientFault,
    BudgetExhausted,
)
from .retry import (
    AttemptContext,
    DelayCalculator,
    ErrorSynthesizer,
    HttpResponse,
    RetryDecider,
    RetryEngine,
    RetryPolicy,
    TransportError,
    Verdict,
    async_with_retry,
    calculate_backoff,
    parse_retry_after,
    with_retry,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Clients
    "BaseRetryClient",
    "RetryClient",
    "AsyncRetryClient",
    # Exceptions
    "TerminalError",
    "ProxyFailure",
    "TransportFault",
    "ContentContractViolation",
    "ServerFault",
    "RateLimited",
    "ClientFault",
    "BudgetExhausted",
    # Retry
    "AttemptContext",
    "DelayCalculator",
    "ErrorSynthesizer",
    "HttpResponse",
    "RetryDecider",
    "RetryEngine",
    "RetryPolicy",
    "TransportError",
    "Verdict",
    "async_with_retry",
    "calculate_backoff",
    "parse_retry_after",
    "with_retry",
]
