"""
Exception handling utilities.

Defines categorized exception types for proper error handling.

Every failure at a remote boundary (chain RPC, database) is wrapped in one of
these types with a message naming the step that failed. Nothing in the
service retries; callers use ``is_retryable`` to build their own policy.
"""


class ChainValueError(Exception):
    """Base class for all service errors."""

    retryable: bool = False
    step: str = "operation"

    def __init__(self, message: str, *, step: str | None = None) -> None:
        super().__init__(message)
        if step is not None:
            self.step = step


class ConfigError(ChainValueError):
    """Raised when required configuration is missing or invalid (e.g. contract address)."""

    step = "configuration"


class EncodingError(ChainValueError):
    """Raised when contract call arguments cannot be ABI-encoded."""

    step = "encode call"


# Chain boundary


class ChainError(ChainValueError):
    """Base for blockchain RPC failures."""

    retryable = True
    step = "chain call"


class ChainCallError(ChainError):
    """Raised when a read call or network query fails or cannot be decoded."""


class NonceFetchError(ChainError):
    """Raised when the signer nonce cannot be fetched."""

    step = "get nonce"


class FeeFetchError(ChainError):
    """Raised when the gas price suggestion cannot be fetched."""

    step = "get gas price"


class GasEstimationError(ChainError):
    """Raised when gas estimation fails (including calls that would revert)."""

    step = "estimate gas"


class SigningError(ChainError):
    """Raised when the chain id cannot be fetched or signing fails."""

    step = "sign transaction"


class SubmissionError(ChainError):
    """Raised when the signed transaction is rejected by the node."""

    step = "send transaction"


class ReceiptError(ChainError):
    """Raised when a transaction receipt cannot be resolved."""

    step = "get transaction receipt"


# Store boundary


class StoreError(ChainValueError):
    """Base for ledger persistence failures."""

    retryable = True
    step = "database"


class StoreWriteError(StoreError):
    """Raised when a ledger record cannot be stored."""

    step = "store value"


class StoreReadError(StoreError):
    """Raised when the ledger cannot be queried."""

    step = "read ledger"


def is_retryable(exc: BaseException) -> bool:
    """
    Check if a failed operation may be retried by the caller.

    Args:
        exc: Exception to check

    Returns:
        True if the caller may retry
    """
    return isinstance(exc, ChainValueError) and exc.retryable
