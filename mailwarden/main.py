"""
MailWarden API Application

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from mailwarden.api.dependencies import get_settings, init_engine, init_store
from mailwarden.api.routes import get_api_router
from mailwarden.utils.constants import APP_DESCRIPTION

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} API...")

    init_store(settings=settings)
    engine = init_engine(settings)
    logger.info(f"Detection engine initialized with {len(engine.strategies)} strategies")
    logger.info(f"  Internal domains: {', '.join(engine.context.internal_domains) or '-'}")
    logger.info(f"  Trusted domains: {', '.join(engine.context.trusted_domains) or '-'}")

    yield

    logger.info(f"Shutting down {settings.app_name} API...")


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description=APP_DESCRIPTION,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.include_router(get_api_router())

    @app.get("/")
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    return app


app = create_app()
