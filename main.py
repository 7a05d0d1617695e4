import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from shorturl_app.api import routes
from shorturl_app.api.errors import register_exception_handlers
from shorturl_app.config import Settings, load_settings
from shorturl_app.exceptions import ConfigurationError, ShortURLError
from shorturl_app.logging_config import setup_logging
from shorturl_app.middleware.logging import add_logging_middleware
from shorturl_app.storage.factory import StorageFactory
from shorturl_app.storage.strategies import StorageStrategy

logger = logging.getLogger("shorturl")


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StorageStrategy] = None
) -> FastAPI:
    """
    Build the application.

    Settings and storage are resolved at startup (not import time) unless
    given explicitly, then kept on `app.state` for the request handlers.
    Startup fails - and no connection is accepted - if the configuration is
    invalid or the selected backend cannot be reached. Under `main()` a bad
    configuration exits with status 1; a backend that cannot be reached
    fails the lifespan, and uvicorn exits with status 3.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            app_settings = settings if settings is not None else load_settings()
            app_storage = storage if storage is not None else StorageFactory.create(app_settings)
            await app_storage.connect()
        except ShortURLError as e:
            logger.error(f"Error: {e.message}")
            raise

        app.state.settings = app_settings
        app.state.storage = app_storage
        logger.info(f"[+] HTTP server running on http://{app_settings.host}:{app_settings.port}")
        try:
            yield
        finally:
            await app_storage.close()

    # Every path is a potential short id, so no docs routes
    app = FastAPI(
        title="URL Shortener",
        version="1.0.0",
        description="A URL shortener service built with FastAPI",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan
    )

    add_logging_middleware(app)
    register_exception_handlers(app)
    app.include_router(routes.router)

    return app


app = create_app()


def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Error: {e.message}")
        return 1

    setup_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
