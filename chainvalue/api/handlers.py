"""
Route handlers.

Each handler translates one HTTP request into a service call and the
outcome into the response envelope.
"""

import json

from aiohttp import web
from loguru import logger
from pydantic import ValidationError

from chainvalue import __version__
from chainvalue.config.constants import API_PREFIX, API_TITLE
from chainvalue.services.contract_value_service import ContractValueService
from chainvalue.utils.exceptions import ChainValueError, ReceiptError, is_retryable
from chainvalue.utils.validation import validate_tx_hash

from .responses import envelope, error_response
from .schemas import SetValueRequest

SERVICE_KEY = web.AppKey("service", ContractValueService)


def _service(request: web.Request) -> ContractValueService:
    return request.app[SERVICE_KEY]


async def set_value_handler(request: web.Request) -> web.Response:
    """
    POST /api/set - write a value on-chain and record it.

    Returns 200 on success, 206 when the transaction was submitted but the
    ledger record could not be stored.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return envelope(False, error=f"Invalid request body: {e}", status=400)

    try:
        payload = SetValueRequest.model_validate(body)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        return envelope(False, error=f"Invalid request body: {details}", status=400)

    try:
        result = await _service(request).set_value(payload.value, wait=payload.wait)
    except ChainValueError as e:
        logger.error(f"Set value failed at {e.step} (retryable={is_retryable(e)}): {e}")
        return error_response(e, prefix="Failed to set value on blockchain")

    if result.is_partial:
        return envelope(
            False,
            data=result.to_dict(),
            error=(
                "Value set on blockchain but failed to store in database: "
                f"{result.ledger_error}"
            ),
            status=206,
        )

    return envelope(True, data=result.to_dict(), message="Value set successfully")


async def get_value_handler(request: web.Request) -> web.Response:
    """GET /api/get - read the current on-chain value."""
    try:
        result = await _service(request).get_value()
    except ChainValueError as e:
        return error_response(e, prefix="Failed to get value from blockchain")
    return envelope(True, data=result.to_dict())


async def sync_handler(request: web.Request) -> web.Response:
    """POST /api/sync - record the on-chain value if the ledger drifted."""
    try:
        result = await _service(request).sync()
    except ChainValueError as e:
        return error_response(e, prefix="Sync failed")
    return envelope(
        True,
        data=result.to_dict(),
        message=f"Sync completed. Updated: {str(result.updated).lower()}",
    )


async def check_handler(request: web.Request) -> web.Response:
    """GET /api/check - compare the ledger with the chain without writing."""
    try:
        result = await _service(request).check()
    except ChainValueError as e:
        return error_response(e, prefix="Check failed")
    return envelope(True, data=result.to_dict())


async def history_handler(request: web.Request) -> web.Response:
    """GET /api/history?limit=&offset= - ledger records, newest first."""
    try:
        records, limit, offset = await _service(request).history(
            request.query.get("limit"), request.query.get("offset")
        )
    except ChainValueError as e:
        return error_response(e, prefix="Failed to get history")
    return envelope(
        True,
        data={
            "history": [record.to_dict() for record in records],
            "pagination": {"limit": limit, "offset": offset, "count": len(records)},
        },
    )


async def status_handler(request: web.Request) -> web.Response:
    """GET /api/status - network, ledger and contract snapshot."""
    try:
        snapshot = await _service(request).status()
    except ChainValueError as e:
        return error_response(e, prefix="Failed to get network status")
    return envelope(True, data=snapshot.to_dict())


async def receipt_handler(request: web.Request) -> web.Response:
    """GET /api/tx/{tx_hash} - one-shot receipt lookup."""
    tx_hash = request.match_info["tx_hash"]
    if not validate_tx_hash(tx_hash):
        return envelope(False, error="Invalid transaction hash", status=400)

    try:
        receipt = await _service(request).get_receipt(tx_hash)
    except ReceiptError as e:
        return envelope(False, error=f"Transaction receipt not found: {e}", status=404)
    except ChainValueError as e:
        return error_response(e, prefix="Failed to get transaction receipt")
    return envelope(True, data=receipt.to_dict())


async def health_handler(request: web.Request) -> web.Response:
    """
    GET /api/health - dependency liveness.

    Returns:
        200 when every dependency answers, 503 otherwise
    """
    report = await _service(request).health()
    return envelope(
        report.healthy,
        data=report.to_dict(),
        status=200 if report.healthy else 503,
    )


async def index_handler(request: web.Request) -> web.Response:
    """GET / - service description."""
    return envelope(
        True,
        data={
            "name": API_TITLE,
            "version": __version__,
            "endpoints": {
                "set": f"POST {API_PREFIX}/set",
                "get": f"GET {API_PREFIX}/get",
                "sync": f"POST {API_PREFIX}/sync",
                "check": f"GET {API_PREFIX}/check",
                "history": f"GET {API_PREFIX}/history",
                "status": f"GET {API_PREFIX}/status",
                "receipt": f"GET {API_PREFIX}/tx/{{tx_hash}}",
                "health": f"GET {API_PREFIX}/health",
            },
        },
    )
