"""
HTTP middlewares.

Access logging, CORS and last-resort error recovery.
"""

import time

from aiohttp import web
from loguru import logger

from chainvalue.utils.exceptions import ChainValueError

from .responses import envelope, error_response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@web.middleware
async def access_log_middleware(request: web.Request, handler) -> web.StreamResponse:
    started = time.monotonic()
    response = await handler(request)
    elapsed_ms = (time.monotonic() - started) * 1000
    logger.info(
        f"{request.method} {request.path} -> {response.status} ({elapsed_ms:.1f}ms)"
    )
    return response


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Answer preflight requests and attach CORS headers to every response."""
    if request.method == "OPTIONS":
        return web.Response(status=204, headers=CORS_HEADERS)

    try:
        response = await handler(request)
    except web.HTTPException as e:
        e.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """
    Convert anything a handler let escape into an envelope.

    Service errors keep their mapped status; unexpected exceptions become a
    500 without leaking details to the client.
    """
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except ChainValueError as e:
        logger.warning(f"{request.method} {request.path} failed: {e}")
        return error_response(e)
    except Exception as e:
        logger.exception(f"Unhandled error in {request.method} {request.path}: {e}")
        return envelope(False, error="Internal server error", status=500)
