"""Models for Frontegg provisioning requests and results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.dealwon.core.errors import IntegrationFailure


class ProvisionOutcome(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


class ProvisionResult(BaseModel):
    """Result of an idempotent provisioning step (tenant create, admin invite).

    A 409 from Frontegg maps to ALREADY_EXISTS and counts as success.
    """

    step: str
    outcome: ProvisionOutcome
    status_code: int
    detail: str = ""

    @property
    def succeeded(self) -> bool:
        return self.outcome is not ProvisionOutcome.FAILED

    def raise_for_failure(self) -> ProvisionResult:
        """Raise IntegrationFailure with the step detail when the step failed."""
        if not self.succeeded:
            raise IntegrationFailure(self.detail)
        return self


class InviteUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    role_ids: list[str] | None = Field(default=None, serialization_alias="roleIds")


class BulkInviteRequest(BaseModel):
    users: list[InviteUser]

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TenantCreateRequest(BaseModel):
    tenant_id: str = Field(serialization_alias="tenantId")
    name: str

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
