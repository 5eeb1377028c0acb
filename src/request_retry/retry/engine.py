"""
Attempt loops and retry decorators built on the decider, delay calculator and synthesizer.
"""

import asyncio
import functools
import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, ParamSpec

import httpx

from .backoff import DelayCalculator, utcnow
from .config import RetryPolicy, Verdict
from .context import AttemptContext, CompletionCallback, FailureCause
from .decider import RetryDecider
from .outcome import AttemptOutcome, HttpResponse, TransportError
from .synthesizer import ErrorSynthesizer
from ..exceptions import RateLimited

logger = logging.getLogger(__name__)

P = ParamSpec("P")


def _describe(outcome: AttemptOutcome) -> str:
    if isinstance(outcome, HttpResponse):
        return f"status {outcome.status_code}"
    if isinstance(outcome, TransportError):
        return outcome.message
    return "network error"


class RetryEngine:
    """
    Runs one logical request through repeated attempts.

    `send` performs a single attempt and either returns an httpx.Response or
    raises an httpx.TransportError. Any other exception propagates unchanged.
    The caller sees only the final outcome: the successful response, or one
    TerminalError.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.policy = policy or RetryPolicy()
        self.decider = RetryDecider(self.policy)
        self.calculator = DelayCalculator(self.policy, clock=clock)
        self.synthesizer = ErrorSynthesizer()
        self._sleep = sleep
        self._async_sleep = async_sleep

    def new_context(self, method: str = "GET", expect_json: bool = False) -> AttemptContext:
        return AttemptContext(
            max_attempts=self.policy.max_attempts,
            method=method,
            expect_json=expect_json,
        )

    def evaluate(self, outcome: AttemptOutcome, ctx: AttemptContext) -> tuple[Verdict, float | None]:
        """
        Decide on a completed attempt and, for a retry, compute the wait.

        A rate-limit wait beyond the policy's max_wait turns the retry into a
        failure; the computed wait stays recorded on the context.
        """
        verdict = self.decider.decide(outcome, ctx)
        if verdict is not Verdict.RETRY:
            return verdict, None

        wait = self.calculator.delay(outcome, ctx)
        if ctx.last_wait is not None and self.calculator.exceeds_max_wait(wait):
            ctx.failure = FailureCause(
                RateLimited,
                f"Retry-After of {wait:.1f}s exceeds maximum wait of {self.policy.max_wait:.1f}s",
            )
            return Verdict.FAIL, wait

        logger.warning(
            f"Retry {ctx.attempt_number}/{ctx.max_attempts}: {ctx.method} {_describe(outcome)}, "
            f"waiting {wait:.1f}s"
        )
        return Verdict.RETRY, wait

    def _attempt(
        self, ctx: AttemptContext, send: Callable[[], httpx.Response]
    ) -> tuple[AttemptOutcome, httpx.Response | None, httpx.TransportError | None]:
        try:
            response = send()
        except httpx.TransportError as e:
            return TransportError.from_exception(e), None, e
        return HttpResponse.from_httpx(response, ctx.expect_json), response, None

    async def _async_attempt(
        self, ctx: AttemptContext, send: Callable[[], Awaitable[httpx.Response]]
    ) -> tuple[AttemptOutcome, httpx.Response | None, httpx.TransportError | None]:
        try:
            response = await send()
        except httpx.TransportError as e:
            return TransportError.from_exception(e), None, e
        return HttpResponse.from_httpx(response, ctx.expect_json), response, None

    def run(
        self,
        send: Callable[[], httpx.Response],
        *,
        method: str = "GET",
        expect_json: bool = False,
        on_complete: CompletionCallback | None = None,
    ) -> httpx.Response:
        """Run a request synchronously until it succeeds or fails for good."""
        ctx = self.new_context(method, expect_json)

        while True:
            outcome, response, exc = self._attempt(ctx, send)
            verdict, wait = self.evaluate(outcome, ctx)

            if verdict is Verdict.SUCCEED:
                ctx.deliver(on_complete, None, response)
                return response
            if verdict is Verdict.FAIL:
                break

            self._sleep(max(0.0, wait))
            ctx.attempt_number += 1

        error = self.synthesizer.synthesize(outcome, ctx)
        self.synthesizer.deliver(error, ctx, on_complete, response)
        raise error from exc

    async def arun(
        self,
        send: Callable[[], Awaitable[httpx.Response]],
        *,
        method: str = "GET",
        expect_json: bool = False,
        on_complete: CompletionCallback | None = None,
    ) -> httpx.Response:
        """Run a request asynchronously until it succeeds or fails for good."""
        ctx = self.new_context(method, expect_json)

        while True:
            outcome, response, exc = await self._async_attempt(ctx, send)
            verdict, wait = self.evaluate(outcome, ctx)

            if verdict is Verdict.SUCCEED:
                ctx.deliver(on_complete, None, response)
                return response
            if verdict is Verdict.FAIL:
                break

            ctx.pending = asyncio.ensure_future(self._async_sleep(max(0.0, wait)))
            try:
                await ctx.pending
            finally:
                ctx.pending = None
            ctx.attempt_number += 1

        error = self.synthesizer.synthesize(outcome, ctx)
        self.synthesizer.deliver(error, ctx, on_complete, response)
        raise error from exc


def with_retry(
    policy: RetryPolicy | None = None,
    method: str = "GET",
    expect_json: bool = False,
    on_complete: CompletionCallback | None = None,
) -> Callable[[Callable[P, httpx.Response]], Callable[P, httpx.Response]]:
    """
    Decorator for synchronous functions performing one request attempt.

    Args:
        policy: Retry policy (default: RetryPolicy())
        method: HTTP method the function sends, used by the 500 rule
        expect_json: Whether the response body must be JSON
        on_complete: Optional callback(error, response) invoked once per call

    Returns:
        Decorated function with retry behavior
    """
    engine = RetryEngine(policy)

    def decorator(func: Callable[P, httpx.Response]) -> Callable[P, httpx.Response]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> httpx.Response:
            return engine.run(
                lambda: func(*args, **kwargs),
                method=method,
                expect_json=expect_json,
                on_complete=on_complete,
            )

        return wrapper

    return decorator


def async_with_retry(
    policy: RetryPolicy | None = None,
    method: str = "GET",
    expect_json: bool = False,
    on_complete: CompletionCallback | None = None,
) -> Callable[[Callable[P, Awaitable[httpx.Response]]], Callable[P, Awaitable[httpx.Response]]]:
    """
    Decorator for async functions performing one request attempt.

    Args:
        policy: Retry policy (default: RetryPolicy())
        method: HTTP method the function sends, used by the 500 rule
        expect_json: Whether the response body must be JSON
        on_complete: Optional callback(error, response) invoked once per call

    Returns:
        Decorated async function with retry behavior
    """
    engine = RetryEngine(policy)

    def decorator(
        func: Callable[P, Awaitable[httpx.Response]],
    ) -> Callable[P, Awaitable[httpx.Response]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> httpx.Response:
            return await engine.arun(
                lambda: func(*args, **kwargs),
                method=method,
                expect_json=expect_json,
                on_complete=on_complete,
            )

        return wrapper

    return decorator
