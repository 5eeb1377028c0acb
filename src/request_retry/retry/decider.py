"""
Retry decision for a completed attempt.
"""

import logging

from .config import RetryPolicy, Verdict
from .context import AttemptContext, FailureCause
from .outcome import AttemptOutcome, HttpResponse, TransportError
from ..exceptions import (
    BudgetExhausted,
    ClientFault,
    ContentContractViolation,
    ProxyFailure,
    RateLimited,
    ServerFault,
    TerminalError,
    TransportFault,
)

logger = logging.getLogger(__name__)


class RetryDecider:
    """
    Decides whether to retry, succeed or fail after each attempt.

    Caps are tiered: `max_attempts` bounds the overall effort while
    `server_error_cap` and `rate_limit_cap` bound 5xx and 429 streaks.
    A 500 is only retried for GET requests.
    """

    def __init__(self, policy: RetryPolicy | None = None):
        self.policy = policy or RetryPolicy()

    def decide(self, outcome: AttemptOutcome, ctx: AttemptContext) -> Verdict:
        verdict = self._evaluate(outcome, ctx)
        logger.debug(
            f"{ctx.method} attempt {ctx.attempt_number}/{ctx.max_attempts}: {verdict.value}"
        )
        return verdict

    def _evaluate(self, outcome: AttemptOutcome, ctx: AttemptContext) -> Verdict:
        if isinstance(outcome, TransportError):
            if outcome.proxy and self.policy.fail_on_proxy_error:
                return self._fail(ctx, ProxyFailure, outcome.message)
            if ctx.budget_exhausted:
                return self._fail(ctx, TransportFault, outcome.message)
            return Verdict.RETRY

        if outcome is None:
            if ctx.budget_exhausted:
                return self._fail(ctx, TransportFault)
            return Verdict.RETRY

        return self._evaluate_response(outcome, ctx)

    def _evaluate_response(self, response: HttpResponse, ctx: AttemptContext) -> Verdict:
        status = response.status_code

        if ctx.expect_json and not response.has_structured_body:
            return self._fail(ctx, ContentContractViolation, "Expected JSON")

        if 200 <= status <= 399:
            return Verdict.SUCCEED

        if status == 500 and ctx.method != "GET":
            return self._fail(ctx, ServerFault)

        if 500 <= status <= 599 and ctx.attempt_number >= self.policy.server_error_cap:
            return self._fail(ctx, ServerFault)
        if status == 429 and ctx.attempt_number >= self.policy.rate_limit_cap:
            return self._fail(ctx, RateLimited)
        if 400 <= status <= 499 and status != 429:
            return self._fail(ctx, ClientFault)

        if ctx.budget_exhausted:
            if status == 429:
                return self._fail(ctx, RateLimited)
            if 500 <= status <= 599:
                return self._fail(ctx, ServerFault)
            return self._fail(ctx, BudgetExhausted)

        return Verdict.RETRY

    @staticmethod
    def _fail(
        ctx: AttemptContext,
        error_class: type[TerminalError],
        message: str | None = None,
    ) -> Verdict:
        ctx.failure = FailureCause(error_class, message)
        return Verdict.FAIL
