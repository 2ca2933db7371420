"""Pydantic models for the HubSpot CRM responses consumed by the webhook.

Only the fields the provisioning flow reads are modelled; everything else
in the HubSpot payloads is ignored.
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class AssociationKind(str, Enum):
    """Object type related to a deal, with the HubSpot path segments for it."""

    company = "company"
    contact = "contact"

    @property
    def label_pair(self) -> str:
        """Association category used by the labels endpoint (``deal/company``)."""
        return f"deal/{self.value}"

    @property
    def plural(self) -> str:
        """Object type segment of the associations endpoint (``companies``)."""
        return "companies" if self is AssociationKind.company else "contacts"


class AssociationLabel(BaseModel):
    """Entry of ``GET /crm/v4/associations/{from}/{to}/labels``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    category: str = ""
    type_id: int = Field(validation_alias=AliasChoices("typeId", "type_id"))
    label: str | None = None


class AssociationType(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type_id: int = Field(
        validation_alias=AliasChoices("typeId", "associationTypeId", "type_id"),
    )
    category: str | None = None
    label: str | None = None


class AssociationRecord(BaseModel):
    """Entry of ``GET /crm/v4/objects/deals/{id}/associations/{toObjectType}``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    to_object_id: str = Field(validation_alias=AliasChoices("toObjectId", "to_object_id"))
    association_types: list[AssociationType] = Field(
        default_factory=list,
        validation_alias=AliasChoices("associationTypes", "types", "association_types"),
    )

    @field_validator("to_object_id", mode="before")
    @classmethod
    def _coerce_object_id(cls, value: object) -> object:
        # HubSpot v4 returns numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def type_ids(self) -> list[int]:
        return [t.type_id for t in self.association_types]


class Company(BaseModel):
    id: str
    name: str
    domain: str = ""


class Contact(BaseModel):
    id: str
    email: str | None = None
