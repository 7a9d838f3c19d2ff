"""
Response envelope and error mapping.
"""

from typing import Any

from aiohttp import web

from chainvalue.utils.exceptions import (
    ChainError,
    ChainValueError,
    ConfigError,
    EncodingError,
    ReceiptError,
    StoreError,
)


def envelope(
    success: bool,
    data: Any = None,
    error: str | None = None,
    message: str | None = None,
    status: int = 200,
) -> web.Response:
    """
    Build a JSON response in the uniform envelope.

    Absent fields are omitted from the body.
    """
    body: dict[str, Any] = {"success": success}
    if data is not None:
        body["data"] = data
    if error:
        body["error"] = error
    if message:
        body["message"] = message
    return web.json_response(body, status=status)


def status_for_error(exc: ChainValueError) -> int:
    """Map an error kind to an HTTP status code."""
    if isinstance(exc, (ConfigError, EncodingError)):
        return 400
    if isinstance(exc, ReceiptError):
        return 404
    if isinstance(exc, ChainError):
        return 502
    if isinstance(exc, StoreError):
        return 503
    return 500


def error_response(exc: ChainValueError, prefix: str | None = None) -> web.Response:
    """
    Build a failure envelope for a service error.

    Args:
        exc: Error raised by the service layer
        prefix: Human-readable context ("Failed to get value from blockchain")
    """
    error = f"{prefix}: {exc}" if prefix else str(exc)
    return envelope(False, error=error, status=status_for_error(exc))
