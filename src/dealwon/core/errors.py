"""Failure taxonomy for the deal-won webhook and its FastAPI handlers.

Every failure path in the pipeline raises one of these exceptions. The
handlers registered by ``register_exception_handlers`` map them onto the
webhook's JSON error bodies:

- AuthFailure         -> 401 {"error": message}
- InputFailure        -> 400 {"error": message}
- PreconditionFailure -> 422 {"error": message}
- IntegrationFailure  -> 500 {"error": "internal_error", "detail": message}

Unexpected exceptions are rendered like IntegrationFailure.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class DealWonError(Exception):
    """Base class for classified webhook failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "internal_error"
    error_code: str = "internal_error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message}


class AuthFailure(DealWonError):
    """Missing or mismatched webhook bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "unauthorized"
    error_code = "unauthorized"


class InputFailure(DealWonError):
    """Unparseable or incomplete payload."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "bad_request"
    error_code = "bad_request"


class PreconditionFailure(DealWonError):
    """The CRM data cannot satisfy provisioning (no company, contact or email)."""

    status_code = 422
    default_message = "unprocessable"
    error_code = "unprocessable"


class IntegrationFailure(DealWonError):
    """Unexpected response from HubSpot or Frontegg, or missing configuration."""

    def to_body(self) -> dict:
        return {"error": self.error_code, "detail": self.message}


def internal_error_response(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error", "detail": detail},
    )


async def deal_won_error_handler(request: Request, exc: DealWonError) -> JSONResponse:
    """Render a classified failure as its JSON body and status code."""
    if exc.status_code >= 500:
        logger.error("deal_won.error", path=request.url.path, detail=exc.message)
    else:
        logger.info(
            "deal_won.rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: surface the causing message for operator diagnosis."""
    logger.error(
        "deal_won.error",
        path=request.url.path,
        detail=str(exc),
        exc_info=exc,
    )
    return internal_error_response(str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DealWonError, deal_won_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
