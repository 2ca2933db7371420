"""Deal-won webhook endpoint.

HubSpot Workflow "Send a webhook" action -> POST /api/deal-won with
``Authorization: Bearer <WEBHOOK_SECRET>`` and a JSON body carrying
``dealId`` (or ``objectId``).

Responses:
- 200 DealWonResponse
- 400 {"error": ...} invalid JSON or missing deal id
- 401 {"error": ...} bad or missing bearer token
- 422 {"error": ...} no company, no contact, or contact without email
- 500 {"error": "internal_error", "detail": ...} HubSpot/Frontegg failure
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request

from src.dealwon.api.deps import get_app_settings, get_provisioner
from src.dealwon.config import Settings
from src.dealwon.core.errors import DealWonError, IntegrationFailure
from src.dealwon.core.monitoring import record_deal_won_event
from src.dealwon.core.security import verify_webhook_authorization
from src.dealwon.schemas.webhook import DealWonResponse, ErrorResponse, InternalErrorResponse
from src.dealwon.services.deal_won import DealWonProvisioner, extract_deal_id, parse_payload

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["webhooks"])


@router.post(
    "/deal-won",
    response_model=DealWonResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": InternalErrorResponse},
    },
)
async def deal_won(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    provisioner: DealWonProvisioner = Depends(get_provisioner),
) -> DealWonResponse:
    """Provision a Frontegg tenant and admin for a won HubSpot deal."""
    try:
        verify_webhook_authorization(request.headers.get("Authorization"), settings.WEBHOOK_SECRET)

        payload = parse_payload(await request.body())
        deal_id = extract_deal_id(payload)
        logger.info("deal_won.received", deal_id=deal_id)

        result = await provisioner.provision(deal_id)
    except DealWonError as exc:
        record_deal_won_event(exc.error_code)
        raise
    except Exception as exc:
        record_deal_won_event(IntegrationFailure.error_code)
        raise IntegrationFailure(str(exc)) from exc

    record_deal_won_event("ok")
    return result.to_response()
