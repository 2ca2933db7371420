"""Shared test helpers: settings factory and in-memory HubSpot/Frontegg APIs."""

from __future__ import annotations

import json
import re

import httpx

from src.dealwon.config import Settings

WEBHOOK_SECRET = "test-webhook-secret"
AUTH_HEADER = {"Authorization": f"Bearer {WEBHOOK_SECRET}"}

COMPANY_PRIMARY_TYPE_ID = 5
CONTACT_PRIMARY_TYPE_ID = 3


def make_settings(**overrides) -> Settings:
    """Create a Settings instance with all credentials configured."""
    defaults = {
        "WEBHOOK_SECRET": WEBHOOK_SECRET,
        "HUBSPOT_TOKEN": "hs-test-token",
        "FRONTEGG_CLIENT_ID": "fe-client-id",
        "FRONTEGG_API_KEY": "fe-api-key",
        "ADMIN_ROLE_ID": "",
        "ENVIRONMENT": "development",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def association(object_id: int, *type_ids: int) -> dict:
    """HubSpot v4 association record."""
    return {
        "toObjectId": object_id,
        "associationTypes": [
            {"category": "HUBSPOT_DEFINED", "typeId": type_id, "label": None}
            for type_id in type_ids
        ],
    }


class FakeApis:
    """In-memory HubSpot and Frontegg APIs for httpx.MockTransport.

    Defaults model deal 555 with primary company 9001 (Acme, acme.com)
    and primary contact 7777 (poc@acme.com). Tests mutate the public
    attributes to shape other scenarios.
    """

    def __init__(self) -> None:
        self.labels: dict[str, list[dict]] = {
            "company": [
                {"category": "HUBSPOT_DEFINED", "typeId": 341, "label": None},
                {"category": "HUBSPOT_DEFINED", "typeId": COMPANY_PRIMARY_TYPE_ID, "label": "Primary"},
            ],
            "contact": [
                {"category": "USER_DEFINED", "typeId": 99, "label": "Primary buyer"},
                {"category": "HUBSPOT_DEFINED", "typeId": CONTACT_PRIMARY_TYPE_ID, "label": "Primary"},
            ],
        }
        self.associations: dict[tuple[str, str], list[dict]] = {
            ("555", "companies"): [association(9001, 341, COMPANY_PRIMARY_TYPE_ID)],
            ("555", "contacts"): [association(7777, CONTACT_PRIMARY_TYPE_ID)],
        }
        self.companies: dict[str, dict] = {
            "9001": {"name": "Acme", "domain": "acme.com"},
        }
        self.contacts: dict[str, dict] = {
            "7777": {"email": "poc@acme.com"},
        }

        # Frontegg state
        self.token_response: tuple[int, dict | str] = (200, {"token": "mgmt-token", "expiresIn": 86400})
        self.tenant_status_override: int | None = None
        self.invite_status_override: int | None = None
        self.tenants: dict[str, str] = {}
        self.invited: set[tuple[str, str]] = set()

        self.requests: list[httpx.Request] = []
        self.handler_override = None

    # ── Routing ──────────────────────────────────────────────────────────

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler_override is not None:
            return self.handler_override(request)
        if request.url.host == "api.hubapi.com":
            return self._hubspot(request)
        if request.url.host == "api.frontegg.com":
            return self._frontegg(request)
        return httpx.Response(404, text=f"unknown host {request.url.host}")

    def paths(self, host: str | None = None) -> list[str]:
        return [
            r.url.path for r in self.requests if host is None or r.url.host == host
        ]

    def _hubspot(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        match = re.fullmatch(r"/crm/v4/associations/deal/(company|contact)/labels", path)
        if match:
            return httpx.Response(200, json={"results": self.labels[match.group(1)]})

        match = re.fullmatch(r"/crm/v4/objects/deals/([^/]+)/associations/(companies|contacts)", path)
        if match:
            results = self.associations.get((match.group(1), match.group(2)), [])
            return httpx.Response(200, json={"results": results})

        match = re.fullmatch(r"/crm/v3/objects/(companies|contacts)/([^/]+)", path)
        if match:
            store = self.companies if match.group(1) == "companies" else self.contacts
            properties = store.get(match.group(2))
            if properties is None:
                return httpx.Response(404, json={"status": "error", "message": "resource not found"})
            return httpx.Response(200, json={"id": match.group(2), "properties": properties})

        return httpx.Response(404, text="not found")

    def _frontegg(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content or b"{}")

        if path == "/auth/vendor":
            status_code, content = self.token_response
            if isinstance(content, dict):
                return httpx.Response(status_code, json=content)
            return httpx.Response(status_code, text=content)

        if path == "/tenants/resources/tenants/v1":
            if self.tenant_status_override is not None:
                return httpx.Response(self.tenant_status_override, text="tenant error")
            tenant_id = body["tenantId"]
            if tenant_id in self.tenants:
                return httpx.Response(409, json={"errors": ["Tenant already exists"]})
            self.tenants[tenant_id] = body["name"]
            return httpx.Response(201, json={"tenantId": tenant_id, "name": body["name"]})

        if path == "/identity/resources/users/bulk/v1/invite":
            if self.invite_status_override is not None:
                return httpx.Response(self.invite_status_override, text="invite error")
            tenant_id = request.headers.get("frontegg-tenant-id", "")
            email = body["users"][0]["email"]
            if (tenant_id, email) in self.invited:
                return httpx.Response(409, json={"errors": ["User already invited"]})
            self.invited.add((tenant_id, email))
            return httpx.Response(201, json={"tasks": []})

        return httpx.Response(404, text="not found")
