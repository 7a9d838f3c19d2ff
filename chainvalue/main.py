"""
Chain Value API entry point.

Sets up logging and the database, wires the service graph and serves the
HTTP API until SIGINT/SIGTERM.
"""

import asyncio
import signal
import sys

from loguru import logger

from chainvalue.api import create_app, start_api_server, stop_api_server
from chainvalue.bootstrap import build_service
from chainvalue.config.database import create_engine, create_session_maker, init_models
from chainvalue.config.logging import setup_logging
from chainvalue.config.settings import settings


async def main() -> None:
    """Initialize and run the API server."""
    setup_logging(settings.log_level, settings.log_file)

    engine = create_engine(settings.database_url, echo=settings.database_echo)
    if settings.create_tables:
        await init_models(engine)

    service = build_service(settings, create_session_maker(engine))
    runner = await start_api_server(
        create_app(service), host=settings.api_host, port=settings.api_port
    )

    # Graceful shutdown event
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await stop_event.wait()
    finally:
        logger.info("Graceful shutdown initiated...")
        await stop_api_server(runner)
        await service.close()
        await engine.dispose()
        logger.info("Graceful shutdown complete")


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("API stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"API crashed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
