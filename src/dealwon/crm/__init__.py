"""HubSpot CRM integration -- read-only lookups for the deal-won webhook.

- HubSpotClient: association catalogs, deal associations, company/contact properties
- find_primary_type_id / select_primary_object_id: pure primary-association resolution
"""

from src.dealwon.crm.associations import find_primary_type_id, select_primary_object_id
from src.dealwon.crm.hubspot import HubSpotClient
from src.dealwon.crm.schemas import (
    AssociationKind,
    AssociationLabel,
    AssociationRecord,
    AssociationType,
    Company,
    Contact,
)

__all__ = [
    "HubSpotClient",
    "find_primary_type_id",
    "select_primary_object_id",
    "AssociationKind",
    "AssociationLabel",
    "AssociationRecord",
    "AssociationType",
    "Company",
    "Contact",
]
