"""Tests for exceptions module - behavior focused."""

import pytest
from request_retry.exceptions import (
    TerminalError,
    ProxyFailure,
    TransportFault,
    ContentContractViolation,
    ServerFault,
    RateLimited,
    ClientFault,
    BudgetExhausted,
)


class TestRetryableFlag:
    """Test that exceptions describe whether their fault class is retryable."""

    @pytest.mark.parametrize("exception_class", [TransportFault, ServerFault, RateLimited])
    def test_transient_faults_are_retryable(self, exception_class):
        assert exception_class().retryable is True

    @pytest.mark.parametrize(
        "exception_class",
        [ProxyFailure, ContentContractViolation, ClientFault, BudgetExhausted],
    )
    def test_fatal_faults_are_not_retryable(self, exception_class):
        assert exception_class().retryable is False

    def test_base_error_not_retryable_by_default(self):
        """Base TerminalError should not be retryable by default."""
        error = TerminalError("test")
        assert error.retryable is False


class TestDiagnosticFields:
    """Test the context a terminal error carries."""

    def test_fields_default_to_absent(self):
        error = TerminalError("boom")

        assert error.status_code is None
        assert error.body is None
        assert error.attempts == 0
        assert error.retry_after is None

    def test_fields_are_stored(self):
        error = RateLimited(status_code=429, body={"error": "slow down"}, attempts=2, retry_after=30.0)

        assert error.status_code == 429
        assert error.body == {"error": "slow down"}
        assert error.attempts == 2
        assert error.retry_after == 30.0

    def test_default_messages(self):
        assert BudgetExhausted().message == "Too many attempts"
        assert ContentContractViolation().message == "Expected JSON"


class TestExceptionStringRepresentation:
    """Test that exception string includes useful context."""

    def test_str_includes_message(self):
        error = TerminalError("Something went wrong")
        assert "Something went wrong" in str(error)

    def test_str_includes_status_code_when_set(self):
        error = TerminalError("Error", status_code=503)
        assert "503" in str(error)

    def test_str_includes_attempts_when_set(self):
        error = TerminalError("Error", attempts=3)
        assert "after 3 attempts" in str(error)

    def test_str_uses_singular_for_one_attempt(self):
        error = ClientFault("Not Found", status_code=404, attempts=1)
        assert str(error) == "Not Found (status: 404) after 1 attempt"


class TestExceptionInheritance:
    """Test that all exceptions inherit from TerminalError."""

    @pytest.mark.parametrize(
        "exception_class",
        [
            ProxyFailure,
            TransportFault,
            ContentContractViolation,
            ServerFault,
            RateLimited,
            ClientFault,
            BudgetExhausted,
        ],
    )
    def test_inherits_from_base(self, exception_class):
        """All exception types should be catchable as TerminalError."""
        error = exception_class()
        assert isinstance(error, TerminalError)
