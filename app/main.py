"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from app.core.config import Settings, settings as default_settings
from app.core.logging_setup import setup_logging
from app.db.session import DatabaseConfig, check_connection, create_pool
from app.errors import register_exception_handlers
from app.routers import health, task

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; the database pool is opened by the lifespan."""
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        On startup: configure logging, open the connection pool and check it.
        On shutdown: dispose of the pool.
        """
        setup_logging(app_settings.LOG_LEVEL)
        logger.info("Starting %s...", app_settings.APP_NAME)

        database = create_pool(DatabaseConfig.from_settings(app_settings))
        app.state.database = database
        await check_connection(database)

        yield  # The server runs while we're "yielded" here

        logger.info("Shutting down %s...", app_settings.APP_NAME)
        await database.dispose()

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Task management REST API",
        version="0.1.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # Include routers (API endpoints)
    app.include_router(health.router, tags=["Health"])
    app.include_router(task.router)

    return app


app = create_app()
