"""Unit tests for HubSpotClient.

Requests are served by FakeApis through httpx.MockTransport -- no network.
"""

from __future__ import annotations

import httpx
import pytest

from src.dealwon.core.errors import IntegrationFailure
from src.dealwon.crm.hubspot import HubSpotClient
from src.dealwon.crm.schemas import AssociationKind
from tests.helpers import association


@pytest.fixture
def hubspot(transport) -> HubSpotClient:
    return HubSpotClient(token="hs-test-token", transport=transport)


class TestRequests:
    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, hubspot, fake_apis):
        await hubspot.get_association_labels(AssociationKind.company)

        request = fake_apis.requests[-1]
        assert request.headers["Authorization"] == "Bearer hs-test-token"
        assert request.url.path == "/crm/v4/associations/deal/company/labels"

    @pytest.mark.asyncio
    async def test_company_requests_name_and_domain(self, hubspot, fake_apis):
        await hubspot.get_company("9001")

        request = fake_apis.requests[-1]
        assert request.url.path == "/crm/v3/objects/companies/9001"
        assert request.url.params["properties"] == "name,domain"

    @pytest.mark.asyncio
    async def test_missing_token_fails_before_any_request(self, fake_apis, transport):
        client = HubSpotClient(token="", transport=transport)

        with pytest.raises(IntegrationFailure, match="HUBSPOT_TOKEN"):
            await client.get_company("9001")
        assert fake_apis.requests == []

    @pytest.mark.asyncio
    async def test_error_status_raises_with_path_and_body(self, hubspot):
        with pytest.raises(IntegrationFailure) as exc_info:
            await hubspot.get_company("404404")

        message = exc_info.value.message
        assert message.startswith("HubSpot /crm/v3/objects/companies/404404 -> 404")
        assert "resource not found" in message


class TestPrimaryAssociation:
    @pytest.mark.asyncio
    async def test_resolves_primary_company(self, hubspot, fake_apis):
        fake_apis.associations[("555", "companies")] = [
            association(1111, 341),
            association(9001, 341, 5),
        ]

        assert await hubspot.get_primary_associated_id("555", AssociationKind.company) == "9001"
        assert fake_apis.paths() == [
            "/crm/v4/associations/deal/company/labels",
            "/crm/v4/objects/deals/555/associations/companies",
        ]

    @pytest.mark.asyncio
    async def test_resolves_primary_contact(self, hubspot):
        assert await hubspot.get_primary_associated_id("555", AssociationKind.contact) == "7777"

    @pytest.mark.asyncio
    async def test_falls_back_to_first_when_no_primary_label(self, hubspot, fake_apis):
        fake_apis.labels["company"] = [{"category": "HUBSPOT_DEFINED", "typeId": 341, "label": None}]
        fake_apis.associations[("555", "companies")] = [
            association(2222, 341),
            association(9001, 341, 5),
        ]

        assert await hubspot.get_primary_associated_id("555", AssociationKind.company) == "2222"

    @pytest.mark.asyncio
    async def test_no_associations(self, hubspot):
        assert await hubspot.get_primary_associated_id("999", AssociationKind.company) is None


class TestEntityDetails:
    @pytest.mark.asyncio
    async def test_company_name_and_domain(self, hubspot):
        company = await hubspot.get_company("9001")

        assert company.id == "9001"
        assert company.name == "Acme"
        assert company.domain == "acme.com"

    @pytest.mark.asyncio
    async def test_company_defaults(self, hubspot, fake_apis):
        fake_apis.companies["8000"] = {"name": "", "domain": None}

        company = await hubspot.get_company("8000")

        assert company.name == "New Account"
        assert company.domain == ""

    @pytest.mark.asyncio
    async def test_configured_default_company_name(self, fake_apis, transport):
        fake_apis.companies["8000"] = {}
        client = HubSpotClient(
            token="hs-test-token",
            default_company_name="Unnamed",
            transport=transport,
        )

        assert (await client.get_company("8000")).name == "Unnamed"

    @pytest.mark.asyncio
    async def test_contact_email(self, hubspot, fake_apis):
        assert await hubspot.get_contact_email("7777") == "poc@acme.com"
        assert fake_apis.requests[-1].url.params["properties"] == "email"

    @pytest.mark.asyncio
    async def test_contact_without_email(self, hubspot, fake_apis):
        fake_apis.contacts["7000"] = {"email": ""}
        assert await hubspot.get_contact_email("7000") is None

        fake_apis.contacts["7001"] = {}
        assert await hubspot.get_contact_email("7001") is None

    @pytest.mark.asyncio
    async def test_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="bad gateway")

        client = HubSpotClient(token="t", transport=httpx.MockTransport(handler))

        with pytest.raises(IntegrationFailure, match="-> 502 bad gateway"):
            await client.get_contact_email("1")
