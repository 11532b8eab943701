"""Entry point - configures logging and starts the REST server."""

import asyncio
import logging
import signal

import structlog
import uvicorn

from grant_portal_service.rest.app import create_app
from grant_portal_service.settings import settings

logger = structlog.get_logger()


def configure_logging(level: str, fmt: str) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


async def main() -> None:
    configure_logging(settings.log_level, settings.log_format)

    app = create_app()
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
        organization_id=settings.identity_organization_id,
    )

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, server.handle_exit, sig, None)

    await server.serve()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
