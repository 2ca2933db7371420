"""Async read-only client for the HubSpot CRM endpoints the webhook needs.

Covers association label catalogs, deal associations, and the company and
contact properties consumed by provisioning. Every call authenticates with
the static private-app token from configuration. There is no retry: a
non-2xx response raises IntegrationFailure and aborts the webhook.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from src.dealwon.config import Settings
from src.dealwon.core.errors import IntegrationFailure
from src.dealwon.crm.associations import find_primary_type_id, select_primary_object_id
from src.dealwon.crm.schemas import (
    AssociationKind,
    AssociationLabel,
    AssociationRecord,
    Company,
    Contact,
)

logger = structlog.get_logger(__name__)


class HubSpotClient:
    """Async client for the HubSpot CRM v3/v4 REST API.

    Args:
        token: HubSpot private app token.
        base_url: API root (default: https://api.hubapi.com).
        timeout: Per-request timeout in seconds.
        default_company_name: Name used when a company has none.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.hubapi.com",
        timeout: float = 30.0,
        default_company_name: str = "New Account",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._default_company_name = default_company_name
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> HubSpotClient:
        return cls(
            token=settings.HUBSPOT_TOKEN,
            base_url=settings.HUBSPOT_BASE_URL,
            timeout=settings.HTTP_TIMEOUT,
            default_company_name=settings.DEFAULT_COMPANY_NAME,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        """Create a new httpx client with auth headers."""
        if not self._token:
            raise IntegrationFailure("HUBSPOT_TOKEN environment variable not set")
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.get(path, params=params)
        if response.is_error:
            raise IntegrationFailure(
                f"HubSpot {path} -> {response.status_code} {response.text}"
            )
        return response.json()

    # ── Associations ─────────────────────────────────────────────────────

    async def get_association_labels(self, kind: AssociationKind) -> list[AssociationLabel]:
        """Label catalog for deal -> company/contact associations."""
        data = await self._get(f"/crm/v4/associations/{kind.label_pair}/labels")
        return [AssociationLabel.model_validate(item) for item in data.get("results") or []]

    async def list_deal_associations(
        self, deal_id: str, kind: AssociationKind
    ) -> list[AssociationRecord]:
        """All companies/contacts associated with a deal, in HubSpot order."""
        data = await self._get(f"/crm/v4/objects/deals/{deal_id}/associations/{kind.plural}")
        return [AssociationRecord.model_validate(item) for item in data.get("results") or []]

    async def get_primary_associated_id(self, deal_id: str, kind: AssociationKind) -> str | None:
        """Primary associated company/contact id, else the first one, else None."""
        labels = await self.get_association_labels(kind)
        primary_type_id = find_primary_type_id(labels)
        records = await self.list_deal_associations(deal_id, kind)
        object_id = select_primary_object_id(records, primary_type_id)
        logger.info(
            "hubspot.primary_association_resolved",
            deal_id=deal_id,
            kind=kind.value,
            primary_type_id=primary_type_id,
            candidates=len(records),
            object_id=object_id,
        )
        return object_id

    # ── Objects ──────────────────────────────────────────────────────────

    async def get_company(self, company_id: str) -> Company:
        data = await self._get(
            f"/crm/v3/objects/companies/{company_id}",
            params={"properties": "name,domain"},
        )
        properties = data.get("properties") or {}
        return Company(
            id=company_id,
            name=properties.get("name") or self._default_company_name,
            domain=properties.get("domain") or "",
        )

    async def get_contact(self, contact_id: str) -> Contact:
        data = await self._get(
            f"/crm/v3/objects/contacts/{contact_id}",
            params={"properties": "email"},
        )
        properties = data.get("properties") or {}
        return Contact(id=contact_id, email=properties.get("email") or None)

    async def get_contact_email(self, contact_id: str) -> str | None:
        """Contact email, or None when the property is missing or blank."""
        contact = await self.get_contact(contact_id)
        return contact.email
