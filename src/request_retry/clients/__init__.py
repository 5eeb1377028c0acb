"""
request-retry - HTTP Clients.

httpx wrappers that consult the retry engine after every attempt.
"""

from .base import BaseRetryClient
from .sync_client import RetryClient
from .async_client import AsyncRetryClient

__all__ = [
    "BaseRetryClient",
    "RetryClient",
    "AsyncRetryClient",
]
