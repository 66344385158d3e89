"""Entry point - starts the FastAPI server."""

import asyncio
import signal
import sys

import structlog
import uvicorn

from taskflow_service.logging import configure_logging
from taskflow_service.rest.app import create_app
from taskflow_service.settings import get_settings

logger = structlog.get_logger()


async def main() -> int:
    settings = get_settings()
    configure_logging(settings)

    # A missing signing secret is fatal at startup, not a per-request failure.
    if not settings.jwt_secret:
        logger.error("jwt_secret_missing", hint="set JWT_SECRET")
        return 1

    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host="0.0.0.0",
        port=settings.rest_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    logger.info(
        "starting_service",
        rest_port=settings.rest_port,
        env=settings.env or "development",
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, server.handle_exit, sig, None)

    await server.serve()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
