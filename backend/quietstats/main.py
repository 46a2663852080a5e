"""
QuietStats API application.

Read-only reporting over the anonymized event stream: dashboard reports,
funnels, goals, segments and revenue.

Run locally with ``uvicorn quietstats.main:app --reload``.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quietstats.core.config import settings
from quietstats.core.database import close_db, init_db
from quietstats.core.logging import LoggerContextMiddleware, configure_logging, get_logger
from quietstats.middleware import ErrorHandlerMiddleware, RequestIdMiddleware
from quietstats.routers import (
    conversions_router,
    health_router,
    reports_router,
    revenue_router,
    segments_router,
)

configure_logging()
logger = get_logger(__name__)

API_PREFIX = "/api"


def init_sentry() -> None:
    import sentry_sdk

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"quietstats@{settings.app_version}",
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info("Sentry initialized")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "Starting QuietStats",
        version=settings.app_version,
        environment=settings.environment,
        default_filter=settings.default_filter,
    )
    await init_db()
    if settings.sentry_dsn:
        init_sentry()

    yield

    logger.info("Stopping QuietStats")
    await close_db()


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware and routers."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Privacy-first web analytics reporting API",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Middleware added last runs first
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(LoggerContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    app.include_router(health_router)
    for router in (reports_router, conversions_router, segments_router, revenue_router):
        app.include_router(router, prefix=API_PREFIX)

    logger.debug("Application created", routes=len(app.routes))
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "quietstats.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
