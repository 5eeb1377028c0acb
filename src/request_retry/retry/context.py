"""
Per-request attempt state shared by the decider, delay calculator and error synthesizer.
"""

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from ..exceptions import TerminalError

CompletionCallback = Callable[[TerminalError | None, Any], None]


class CompletionLatch:
    """Single-fire guard: only the first call to fire() returns True."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def fire(self) -> bool:
        with self._lock:
            if self._fired:
                return False
            self._fired = True
            return True


@dataclass
class FailureCause:
    """Why the decider stopped: the error class and, optionally, an explicit message."""

    error_class: type[TerminalError]
    message: str | None = None


@dataclass
class AttemptContext:
    """
    State for one logical request, threaded through all of its attempts.

    Attributes:
        max_attempts: Global attempt budget, fixed for the context's lifetime
        method: HTTP method of the request
        expect_json: Whether the response body must be JSON
        attempt_number: Current attempt, starting at 1
        last_wait: Wait computed for the latest 429, if any
        failure: Cause recorded by the decider on a FAIL verdict
        pending: Timer for the next attempt while one is scheduled
    """

    max_attempts: int
    method: str = "GET"
    expect_json: bool = False
    attempt_number: int = 1
    last_wait: float | None = None
    failure: FailureCause | None = None
    pending: asyncio.Future | None = field(default=None, repr=False)
    latch: CompletionLatch = field(default_factory=CompletionLatch, repr=False)

    def __post_init__(self) -> None:
        self.method = self.method.upper()

    @property
    def completed(self) -> bool:
        return self.latch.fired

    @property
    def budget_exhausted(self) -> bool:
        return self.attempt_number >= self.max_attempts

    def cancel_pending(self) -> bool:
        """Cancel the scheduled timer, if one is still running."""
        pending, self.pending = self.pending, None
        if pending is not None and not pending.done():
            pending.cancel()
            return True
        return False

    def deliver(
        self,
        callback: CompletionCallback | None,
        error: TerminalError | None,
        response: Any = None,
    ) -> bool:
        """
        Hand the final result to the caller's completion callback.

        Returns False without calling anything when a result was already
        delivered for this context.
        """
        if not self.latch.fire():
            return False
        if callback is not None:
            callback(error, response)
        return True
