"""
RPC Wrapper with Timeout and Error Wrapping.

Every blockchain RPC call goes through ``guarded_rpc`` so that a failure
surfaces as the error kind of the step that issued it. There are no retries
here: a failed call is reported to the caller as-is.
"""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from loguru import logger

from chainvalue.config.constants import BLOCKCHAIN_TIMEOUT
from chainvalue.utils.exceptions import ChainError, ChainValueError

T = TypeVar("T")


async def guarded_rpc(
    awaitable: Awaitable[T],
    error_cls: type[ChainError],
    operation_name: str,
    timeout: float = BLOCKCHAIN_TIMEOUT,
) -> T:
    """
    Await an RPC call with a deadline, wrapping any failure.

    Args:
        awaitable: RPC coroutine to execute
        error_cls: Error kind raised on failure
        operation_name: Step name used in the message ("estimate gas")
        timeout: Deadline in seconds

    Returns:
        Result of the call

    Raises:
        ChainError: Subclass given by error_cls, chained to the original error
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as e:
        error_msg = f"failed to {operation_name}: timed out after {timeout}s"
        logger.error(error_msg)
        raise error_cls(error_msg, step=operation_name) from e
    except ChainValueError:
        raise
    except Exception as e:
        error_msg = f"failed to {operation_name}: {e}"
        logger.error(error_msg)
        raise error_cls(error_msg, step=operation_name) from e
