"""
request-retry - Exception Hierarchy.

Terminal errors produced when the retry engine stops, one class per fault kind.
"""

from .base import (
    TerminalError,
    ProxyFailure,
    TransportFault,
    ContentContractViolation,
    ServerFault,
    RateLimited,
    ClientFault,
    BudgetExhausted,
)

__all__ = [
    "TerminalError",
    "ProxyFailure",
    "TransportFault",
    "ContentContractViolation",
    "ServerFault",
    "RateLimited",
    "ClientFault",
    "BudgetExhausted",
]
