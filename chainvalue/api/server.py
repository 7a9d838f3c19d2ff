"""
API server lifecycle.

Builds the aiohttp application and runs it on an AppRunner/TCPSite pair.
"""

import asyncio

from aiohttp import web
from loguru import logger

from chainvalue.config.constants import API_PREFIX
from chainvalue.services.contract_value_service import ContractValueService

from .handlers import (
    SERVICE_KEY,
    check_handler,
    get_value_handler,
    health_handler,
    history_handler,
    index_handler,
    receipt_handler,
    set_value_handler,
    status_handler,
    sync_handler,
)
from .middlewares import access_log_middleware, cors_middleware, error_middleware


def create_app(service: ContractValueService) -> web.Application:
    """
    Create the API application.

    Args:
        service: Service instance shared by all handlers

    Returns:
        Configured aiohttp application
    """
    app = web.Application(
        middlewares=[access_log_middleware, cors_middleware, error_middleware]
    )
    app[SERVICE_KEY] = service

    app.router.add_get("/", index_handler)
    app.router.add_post(f"{API_PREFIX}/set", set_value_handler)
    app.router.add_get(f"{API_PREFIX}/get", get_value_handler)
    app.router.add_post(f"{API_PREFIX}/sync", sync_handler)
    app.router.add_get(f"{API_PREFIX}/check", check_handler)
    app.router.add_get(f"{API_PREFIX}/history", history_handler)
    app.router.add_get(f"{API_PREFIX}/status", status_handler)
    app.router.add_get(API_PREFIX + "/tx/{tx_hash}", receipt_handler)
    app.router.add_get(f"{API_PREFIX}/health", health_handler)

    return app


async def start_api_server(
    app: web.Application,
    host: str = "0.0.0.0",
    port: int = 8080,
) -> web.AppRunner:
    """
    Start serving the application.

    Args:
        app: Application from ``create_app``
        host: Host to bind to
        port: Port to bind to

    Returns:
        AppRunner for cleanup
    """
    # Requests are logged by access_log_middleware
    runner = web.AppRunner(app, access_log=None)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"API server started on {host}:{port}")
    logger.info(f"  - Health: http://{host}:{port}{API_PREFIX}/health")

    return runner


async def stop_api_server(
    runner: web.AppRunner,
    timeout: int = 5,
) -> None:
    """
    Stop the API server gracefully.

    Args:
        runner: AppRunner to cleanup
        timeout: Maximum time to wait for cleanup in seconds
    """
    logger.info("Stopping API server...")
    try:
        await asyncio.wait_for(runner.cleanup(), timeout=timeout)
        logger.info("API server stopped successfully")
    except TimeoutError:
        logger.warning(f"API server cleanup timed out after {timeout}s")
