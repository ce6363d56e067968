"""Entry point for the Reading List API.

Starts the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults ``0.0.0.0``
and ``8080``); see ``reading_list_api.app.core.config``.

Usage:
    PORT=8080 python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from reading_list_api.app.core.config import settings
from reading_list_api.app.main import app


logger = logging.getLogger(__name__)


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    logger.info("listening on http://localhost:%d", settings.port)
    await server.serve()


def main() -> None:
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass


if __name__ == "__main__":
    main()
