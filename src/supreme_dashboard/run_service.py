"""Process entry point for the Supreme dashboard.

Usage:
    python -m supreme_dashboard.run_service
"""

from __future__ import annotations

import asyncio
import signal

import hypercorn.asyncio
from hypercorn import Config

from supreme_dashboard.app import create_app
from supreme_dashboard.config import Settings
from supreme_service_libs.error_handling import install_process_handlers
from supreme_service_libs.logging_utils import configure_service_logging, create_service_logger
from supreme_service_libs.quart_app import SupremeApp

logger = create_service_logger("dashboard.run_service")


async def serve(app: SupremeApp, settings: Settings) -> None:
    """Install process handlers on the running loop, then serve until signalled."""
    app.process_handlers = install_process_handlers(app.error_pipeline)

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown_event.set)

    config = Config()
    config.bind = [f"{settings.HTTP_HOST}:{settings.HTTP_PORT}"]
    config.loglevel = settings.LOG_LEVEL.lower()
    config.graceful_timeout = settings.GRACEFUL_TIMEOUT
    config.accesslog = "-"
    config.errorlog = "-"

    logger.info(f"Starting Supreme dashboard on {config.bind[0]}")
    await hypercorn.asyncio.serve(app, config, shutdown_trigger=shutdown_event.wait)


def main() -> None:
    settings = Settings()
    configure_service_logging(
        settings.SERVICE_NAME,
        environment=settings.ENVIRONMENT.value,
        log_level=settings.LOG_LEVEL,
    )
    app = create_app(settings)
    asyncio.run(serve(app, settings))
    logger.info("Supreme dashboard stopped")


if __name__ == "__main__":
    main()
