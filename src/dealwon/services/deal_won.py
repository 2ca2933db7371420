"""Deal-won provisioning pipeline.

Turns a HubSpot "deal won" workflow event into a Frontegg tenant with an
invited admin:

1. Resolve the deal's primary company and fetch its name/domain
2. Resolve the deal's primary contact and fetch its email
3. Exchange Frontegg credentials for a management token
4. Create tenant ``hsco-<companyId>`` (409 = already exists)
5. Invite the contact as tenant admin (409 = already invited)

Steps run strictly in order and any failure aborts the rest. Nothing is
rolled back: if the invite fails after the tenant was created, re-driving
the same deal converges because both Frontegg calls are idempotent.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog
from pydantic import BaseModel

from src.dealwon.config import Settings
from src.dealwon.core.errors import InputFailure, PreconditionFailure
from src.dealwon.core.monitoring import record_provisioning_step
from src.dealwon.crm.hubspot import HubSpotClient
from src.dealwon.crm.schemas import AssociationKind, Company
from src.dealwon.identity.frontegg import FronteggClient
from src.dealwon.identity.schemas import ProvisionResult
from src.dealwon.schemas.webhook import DealWonResponse

logger = structlog.get_logger(__name__)

DEAL_ID_FIELDS = ("dealId", "objectId")


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def parse_payload(raw: bytes) -> Any:
    """Decode the webhook body.

    Raises:
        InputFailure: Body is not valid JSON.
    """
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        raise InputFailure("Invalid JSON payload") from exc


def extract_deal_id(payload: Any) -> str:
    """Deal id from ``dealId`` or ``objectId``; the first non-empty value wins.

    HubSpot workflows send custom JSON, so the id may be a number or string.

    Raises:
        InputFailure: Neither field holds a non-empty value.
    """
    if isinstance(payload, dict):
        for field in DEAL_ID_FIELDS:
            value = payload.get(field)
            if value is None or value == "" or isinstance(value, bool):
                continue
            if isinstance(value, float) and value.is_integer():
                value = int(value)
            deal_id = str(value).strip()
            if deal_id:
                return deal_id
    raise InputFailure("dealId missing")


class DealWonResult(BaseModel):
    """Outcome of a fully provisioned deal."""

    deal_id: str
    tenant_id: str
    company: Company
    invited: str
    tenant: ProvisionResult
    invite: ProvisionResult

    def to_response(self) -> DealWonResponse:
        return DealWonResponse(
            tenant_id=self.tenant_id,
            invited=self.invited,
            company_name=self.company.name,
            company_domain=self.company.domain,
        )


class DealWonProvisioner:
    """Runs the HubSpot lookup + Frontegg provisioning pipeline for one deal.

    Args:
        settings: Immutable application settings.
        hubspot: HubSpot CRM client.
        frontegg: Frontegg management client.
    """

    def __init__(self, settings: Settings, hubspot: HubSpotClient, frontegg: FronteggClient) -> None:
        self._settings = settings
        self._hubspot = hubspot
        self._frontegg = frontegg

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> DealWonProvisioner:
        return cls(
            settings=settings,
            hubspot=HubSpotClient.from_settings(settings, transport=transport),
            frontegg=FronteggClient.from_settings(settings, transport=transport),
        )

    async def provision(self, deal_id: str) -> DealWonResult:
        """Provision the tenant and admin invite for ``deal_id``.

        Raises:
            PreconditionFailure: No associated company, no associated
                contact, or the contact has no email.
            IntegrationFailure: HubSpot/Frontegg returned an unexpected
                response or configuration is missing.
        """
        log = logger.bind(deal_id=deal_id)

        # HubSpot: primary company and contact for the deal
        company_id = await self._hubspot.get_primary_associated_id(deal_id, AssociationKind.company)
        if not company_id:
            raise PreconditionFailure("No associated company")

        company = await self._hubspot.get_company(company_id)

        contact_id = await self._hubspot.get_primary_associated_id(deal_id, AssociationKind.contact)
        if not contact_id:
            raise PreconditionFailure("No associated contact")

        email = await self._hubspot.get_contact_email(contact_id)
        if not email:
            raise PreconditionFailure("POC contact has no email")

        log.info(
            "deal_won.crm_resolved",
            company_id=company_id,
            company_name=company.name,
            contact_id=contact_id,
        )

        # Frontegg: token, then idempotent tenant + invite
        mgmt_token = await self._frontegg.get_management_token()

        tenant_id = self._settings.tenant_id_for(company_id)
        tenant = await self._frontegg.create_tenant(mgmt_token, tenant_id, company.name)
        record_provisioning_step(tenant.step, tenant.outcome.value)
        tenant.raise_for_failure()

        invite = await self._frontegg.invite_admin(mgmt_token, tenant_id, email)
        record_provisioning_step(invite.step, invite.outcome.value)
        invite.raise_for_failure()

        log.info(
            "deal_won.provisioned",
            tenant_id=tenant_id,
            tenant_outcome=tenant.outcome.value,
            invite_outcome=invite.outcome.value,
        )
        return DealWonResult(
            deal_id=deal_id,
            tenant_id=tenant_id,
            company=company,
            invited=email,
            tenant=tenant,
            invite=invite,
        )
