"""
User API application entry point.

Exposes the application instance Uvicorn serves as ``user_api.main:app``.
"""

import logging

import uvicorn

from user_api.app_factory import create_application
from user_api.core.config.settings import get_settings

logger = logging.getLogger(__name__)

# Create application instance using the factory
app = create_application(get_settings())


def run() -> None:
    """Serve the application with Uvicorn using the configured host and port."""
    settings = get_settings()

    logger.info(
        f"Starting Uvicorn server. Host: {settings.SERVER_HOST}, Port: {settings.SERVER_PORT}, LogLevel: {settings.LOG_LEVEL.lower()}"
    )
    uvicorn.run(
        "user_api.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        workers=settings.UVICORN_WORKERS,
    )


if __name__ == "__main__":
    run()
