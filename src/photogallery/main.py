"""
Server entry point for photogallery.

Run with ``photogallery`` (console script) or
``uvicorn photogallery.main:create_application --factory``.
"""

import os

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from .api import create_app
from .config import load_config
from .logging_config import configure_structured_logging, get_logger

logger = get_logger(__name__)


def create_application(env_file: str = ".env") -> FastAPI:
    """Load configuration from the environment (and .env) and build the app."""
    if os.path.exists(env_file):
        load_dotenv(dotenv_path=env_file)

    config = load_config()
    configure_structured_logging(config.log_level, development=config.is_development)
    return create_app(config)


def main() -> None:
    """Start the HTTP server."""
    host = os.getenv("HOST", "0.0.0.0")  # nosec B104
    port = int(os.getenv("PORT", "8080"))
    logger.info("application_starting", host=host, port=port)
    uvicorn.run("photogallery.main:create_application", factory=True, host=host, port=port)


if __name__ == "__main__":
    main()
