"""Async client for the Frontegg management API.

Obtains a vendor management token via the client-credentials exchange,
creates tenants, and bulk-invites tenant admins. Tenant creation and the
admin invite are idempotent: Frontegg answers 409 when the tenant already
exists or the user is already invited, which is reported as
ProvisionOutcome.ALREADY_EXISTS rather than an error.
"""

from __future__ import annotations

import httpx
import structlog

from src.dealwon.config import Settings
from src.dealwon.core.errors import IntegrationFailure
from src.dealwon.identity.schemas import (
    BulkInviteRequest,
    InviteUser,
    ProvisionOutcome,
    ProvisionResult,
    TenantCreateRequest,
)

logger = structlog.get_logger(__name__)

TENANT_HEADER = "frontegg-tenant-id"


def _step_result(step: str, response: httpx.Response, failure_prefix: str) -> ProvisionResult:
    """Classify a provisioning response as created / already exists / failed."""
    if response.is_success:
        return ProvisionResult(
            step=step,
            outcome=ProvisionOutcome.CREATED,
            status_code=response.status_code,
        )
    # TODO: inspect the 409 body once Frontegg documents distinct conflict codes
    if response.status_code == httpx.codes.CONFLICT:
        return ProvisionResult(
            step=step,
            outcome=ProvisionOutcome.ALREADY_EXISTS,
            status_code=response.status_code,
            detail=response.text,
        )
    return ProvisionResult(
        step=step,
        outcome=ProvisionOutcome.FAILED,
        status_code=response.status_code,
        detail=f"{failure_prefix} -> {response.status_code} {response.text}",
    )


class FronteggClient:
    """Async client for Frontegg vendor-level management endpoints.

    Args:
        client_id: Frontegg vendor client id.
        api_key: Frontegg vendor API key (secret).
        base_url: Frontegg API root (default: https://api.frontegg.com).
        identity_base: Identity service root (default: ``{base_url}/identity``).
        admin_role_id: Optional role id attached to admin invitations.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        client_id: str,
        api_key: str,
        base_url: str = "https://api.frontegg.com",
        identity_base: str | None = None,
        admin_role_id: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client_id = client_id
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._identity_base = (identity_base or f"{self._base_url}/identity").rstrip("/")
        self._admin_role_id = admin_role_id or None
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> FronteggClient:
        return cls(
            client_id=settings.FRONTEGG_CLIENT_ID,
            api_key=settings.FRONTEGG_API_KEY,
            base_url=settings.FRONTEGG_BASE_URL,
            identity_base=settings.frontegg_identity_base,
            admin_role_id=settings.ADMIN_ROLE_ID,
            timeout=settings.HTTP_TIMEOUT,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
            transport=self._transport,
        )

    async def get_management_token(self) -> str:
        """Exchange client id + API key for a short-lived vendor token.

        POST /auth/vendor with {"clientId", "secret"}.

        Raises:
            IntegrationFailure: Credentials not configured, non-2xx response,
                or no token in the response body.
        """
        if not self._client_id or not self._api_key:
            raise IntegrationFailure(
                "FRONTEGG_CLIENT_ID or FRONTEGG_API_KEY environment variables not set"
            )

        async with self._client() as client:
            response = await client.post(
                f"{self._base_url}/auth/vendor",
                json={"clientId": self._client_id, "secret": self._api_key},
            )
        if response.is_error:
            raise IntegrationFailure(f"/auth/vendor -> {response.status_code} {response.text}")

        token = (response.json() or {}).get("token")
        if not token:
            raise IntegrationFailure("No token received from Frontegg")
        logger.debug("frontegg.token_obtained")
        return token

    async def create_tenant(self, mgmt_token: str, tenant_id: str, name: str) -> ProvisionResult:
        """Create a tenant. POST /tenants/resources/tenants/v1."""
        body = TenantCreateRequest(tenant_id=tenant_id, name=name)
        async with self._client() as client:
            response = await client.post(
                f"{self._base_url}/tenants/resources/tenants/v1",
                json=body.to_payload(),
                headers={"Authorization": f"Bearer {mgmt_token}"},
            )
        result = _step_result("create_tenant", response, "Create tenant")
        if result.outcome is ProvisionOutcome.ALREADY_EXISTS:
            logger.info("frontegg.tenant_exists", tenant_id=tenant_id)
        elif result.succeeded:
            logger.info("frontegg.tenant_created", tenant_id=tenant_id, name=name)
        return result

    async def invite_admin(self, mgmt_token: str, tenant_id: str, email: str) -> ProvisionResult:
        """Invite ``email`` as tenant admin. POST /resources/users/bulk/v1/invite."""
        role_ids = [self._admin_role_id] if self._admin_role_id else None
        body = BulkInviteRequest(users=[InviteUser(email=email, role_ids=role_ids)])
        async with self._client() as client:
            response = await client.post(
                f"{self._identity_base}/resources/users/bulk/v1/invite",
                json=body.to_payload(),
                headers={
                    "Authorization": f"Bearer {mgmt_token}",
                    TENANT_HEADER: tenant_id,
                },
            )
        result = _step_result("invite_admin", response, "Invite admin")
        if result.outcome is ProvisionOutcome.ALREADY_EXISTS:
            logger.info("frontegg.admin_already_invited", tenant_id=tenant_id, email=email)
        elif result.succeeded:
            logger.info("frontegg.admin_invited", tenant_id=tenant_id, email=email)
        return result
