from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from stockinfo.api.errors import http_error_handler, unhandled_error_handler
from stockinfo.api.routes import health_router, router
from stockinfo.config.logging_config import configure_logging
from stockinfo.config.settings import Settings, settings
from stockinfo.db.session import create_tables

logger = structlog.get_logger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(app_settings)
        if app_settings.create_tables:
            await create_tables()
        if not app_settings.alpha_vantage.api_key:
            logger.warning("alpha_vantage_key_missing")
        logger.info("application_started", environment=app_settings.environment)
        yield
        logger.info("application_stopped")

    app = FastAPI(title="stockinfo", lifespan=lifespan)
    app.include_router(health_router)
    app.include_router(router)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    return app


app = create_app()
