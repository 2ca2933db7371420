"""Pydantic schemas for the deal-won webhook responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DealWonResponse(BaseModel):
    """200 body confirming the tenant and admin invite are in place."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    tenant_id: str = Field(serialization_alias="tenantId")
    invited: str
    company_name: str = Field(serialization_alias="companyName")
    company_domain: str = Field(serialization_alias="companyDomain")


class ErrorResponse(BaseModel):
    """Body for 400/401/422 responses."""

    error: str


class InternalErrorResponse(BaseModel):
    """Body for 500 responses; ``detail`` carries the causing message."""

    error: str = "internal_error"
    detail: str
