"""FastAPI application factory.

Creates the app with logging and metrics middleware, Sentry, exception
handlers for the webhook failure taxonomy, and the API router.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import Response

from src.dealwon.config import get_settings
from src.dealwon.core.errors import register_exception_handlers
from src.dealwon.core.monitoring import MetricsMiddleware, get_metrics_response, init_sentry
from src.dealwon.api.middleware.logging import LoggingMiddleware, configure_structlog
from src.dealwon.api.v1.router import router as v1_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging and Sentry on startup."""
    log = structlog.get_logger(__name__)
    settings = get_settings()
    configure_structlog(settings)

    if settings.SENTRY_DSN:
        init_sentry(dsn=settings.SENTRY_DSN, environment=settings.ENVIRONMENT.value)

    log.info(
        "startup.complete",
        environment=settings.ENVIRONMENT.value,
        hubspot_base=settings.HUBSPOT_BASE_URL,
        frontegg_base=settings.FRONTEGG_BASE_URL,
        frontegg_identity_base=settings.frontegg_identity_base,
    )
    yield
    log.info("shutdown.complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Deal-Won Provisioner",
        version="0.1.0",
        description="Provisions Frontegg tenants and admins from HubSpot deal-won webhooks",
        lifespan=lifespan,
    )

    # Middleware is added in reverse order (last added = outermost)

    # Logging middleware (logs every request with timing)
    app.add_middleware(LoggingMiddleware)

    # Metrics middleware (outermost -- records Prometheus metrics for all requests)
    app.add_middleware(MetricsMiddleware)

    register_exception_handlers(app)

    app.include_router(v1_router)

    # Prometheus metrics endpoint (infrastructure route, outside v1 router)
    @app.get("/metrics", include_in_schema=False)
    async def metrics(request: Request) -> Response:
        """Prometheus metrics endpoint."""
        return get_metrics_response()

    return app


# Module-level app for uvicorn
app = create_app()
