"""Unit tests for the error taxonomy."""

import pytest

from chainvalue.utils.exceptions import (
    ChainCallError,
    ConfigError,
    EncodingError,
    FeeFetchError,
    GasEstimationError,
    NonceFetchError,
    ReceiptError,
    SigningError,
    StoreReadError,
    StoreWriteError,
    SubmissionError,
    is_retryable,
)


class TestRetryability:
    """Tests for is_retryable."""

    @pytest.mark.parametrize(
        "error_cls",
        [
            ChainCallError,
            NonceFetchError,
            FeeFetchError,
            GasEstimationError,
            SigningError,
            SubmissionError,
            ReceiptError,
            StoreWriteError,
            StoreReadError,
        ],
    )
    def test_remote_failures_retryable(self, error_cls):
        """Chain and store failures may be retried by the caller."""
        assert is_retryable(error_cls("boom"))

    @pytest.mark.parametrize("error_cls", [ConfigError, EncodingError])
    def test_input_failures_not_retryable(self, error_cls):
        """Configuration and encoding failures need a fix first."""
        assert not is_retryable(error_cls("boom"))

    def test_foreign_exception_not_retryable(self):
        assert not is_retryable(RuntimeError("boom"))


class TestStep:
    """Tests for the failing-step attribute."""

    def test_default_step_per_kind(self):
        assert NonceFetchError("x").step == "get nonce"
        assert SubmissionError("x").step == "send transaction"
        assert StoreWriteError("x").step == "store value"

    def test_explicit_step_overrides_default(self):
        error = ChainCallError("x", step="get block number")
        assert error.step == "get block number"
        # Class default untouched
        assert ChainCallError("y").step == "chain call"
