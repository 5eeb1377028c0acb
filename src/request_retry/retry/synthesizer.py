"""
Terminal error construction and at-most-once delivery.
"""

import logging
from typing import Any

import httpx

from .context import AttemptContext, CompletionCallback
from .outcome import AttemptOutcome, HttpResponse
from ..exceptions import BudgetExhausted, TerminalError

logger = logging.getLogger(__name__)


class ErrorSynthesizer:
    """Builds the single error a caller sees once retrying stops."""

    def synthesize(self, outcome: AttemptOutcome, ctx: AttemptContext) -> TerminalError:
        response = outcome if isinstance(outcome, HttpResponse) else None

        error_class: type[TerminalError] = BudgetExhausted
        message = None
        if ctx.failure is not None:
            error_class = ctx.failure.error_class
            message = ctx.failure.message

        if not message:
            if response is not None:
                message = httpx.codes.get_reason_phrase(response.status_code) or (
                    f"HTTP {response.status_code}"
                )
            else:
                message = "Too many attempts"

        kwargs: dict[str, Any] = {"attempts": ctx.attempt_number}
        if response is not None:
            kwargs["status_code"] = response.status_code
            if response.body is not None:
                kwargs["body"] = response.body
        if ctx.last_wait is not None:
            kwargs["retry_after"] = ctx.last_wait

        return error_class(message, **kwargs)

    def deliver(
        self,
        error: TerminalError,
        ctx: AttemptContext,
        on_complete: CompletionCallback | None = None,
        response: Any = None,
    ) -> bool:
        """
        Deliver a terminal error exactly once.

        Any scheduled retry timer is cancelled first so that a late timer
        cannot start another attempt or deliver a second result.
        """
        if ctx.cancel_pending():
            logger.debug(f"Cancelled pending retry of {ctx.method} request")
        delivered = ctx.deliver(on_complete, error, response)
        if delivered:
            logger.error(f"{ctx.method} request failed: {error}")
        return delivered
