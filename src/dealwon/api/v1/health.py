"""Health check endpoints.

Provides liveness (/health) and readiness (/health/ready) checks. The
service has no datastore, so readiness only verifies that the credentials
the webhook needs are configured.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.dealwon.api.deps import get_app_settings
from src.dealwon.config import Settings

router = APIRouter(tags=["health"])

REQUIRED_SETTINGS = (
    "WEBHOOK_SECRET",
    "HUBSPOT_TOKEN",
    "FRONTEGG_CLIENT_ID",
    "FRONTEGG_API_KEY",
)


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Basic liveness check -- no external dependencies are contacted."""
    return {"status": "ok", "environment": settings.ENVIRONMENT.value}


def _check_configuration(settings: Settings) -> dict:
    """Report each required setting as ok/missing."""
    return {
        name: "ok" if getattr(settings, name) else "missing"
        for name in REQUIRED_SETTINGS
    }


@router.get("/health/ready")
async def readiness_check(settings: Settings = Depends(get_app_settings)):
    """Readiness check: 200 when all credentials are configured, 503 otherwise."""
    checks = _check_configuration(settings)
    ready = all(value == "ok" for value in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "degraded",
            "checks": checks,
        },
    )
