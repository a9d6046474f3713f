"""
Application assembly for the accounts API.

`create_app` builds the FastAPI instance; the module-level `app` is what
uvicorn serves. The connection pool lives on `app.state.pool` for the
lifetime of the process and is opened, migrated and closed by `lifespan`.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import psycopg
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from learnovous.adapters.repository.postgres import run_migrations
from learnovous.api.v1 import router as v1_router
from learnovous.config.settings import get_settings

logger = logging.getLogger(__name__)

API_TITLE = "learnovous-accounts"
API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    logger.info(
        "Database pool opened (min=%d, max=%d)", settings.pool_min_size, settings.pool_max_size
    )

    run_migrations(pool)
    app.state.pool = pool
    logger.info("Accounts API ready (email backend: %s)", settings.email_backend)

    try:
        yield
    finally:
        pool.close()
        logger.info("Database pool closed")


def health_check(request: Request) -> JSONResponse:
    """
    Report whether the database answers.

    Returns 503 instead of raising when the pool cannot run a trivial query.
    """
    try:
        with request.app.state.pool.connection() as conn:
            conn.execute("SELECT 1")
    except psycopg.Error:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy"},
        )
    return JSONResponse(content={"status": "healthy"})


def create_app() -> FastAPI:
    application = FastAPI(
        title=API_TITLE,
        description="Account lifecycle API - User registration with email/OTP account confirmation",
        version=API_VERSION,
        openapi_tags=[
            {"name": "v1", "description": "Register users and confirm their accounts"},
        ],
        lifespan=lifespan,
    )
    application.include_router(v1_router, prefix="/v1")
    application.add_api_route("/health", health_check, methods=["GET"], tags=["health"])
    return application


app = create_app()
