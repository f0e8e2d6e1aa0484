"""Uvicorn runner for the note store API."""

import structlog
import uvicorn

from coffeenotes.app import App
from coffeenotes.config import Config
from coffeenotes.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def run_server(app: App, config: Config) -> None:
    """Serve the API. Uvicorn keeps the logging set up by setup_logging; access lines only in debug mode."""
    fastapi_app = create_fastapi_app(app, config)
    logger.info("server_starting", host=config.host, port=config.port, cors_origins=config.cors_origins)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=None,
        log_level="debug" if config.debug else "info",
        access_log=config.debug,
    )
