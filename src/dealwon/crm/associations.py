"""Primary-association resolution over HubSpot association data.

HubSpot marks the primary company/contact of a deal with a
``HUBSPOT_DEFINED`` association type labelled "Primary". These helpers are
pure: the caller fetches the label catalog and the association list, and
gets back the chosen object id.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from src.dealwon.crm.schemas import AssociationLabel, AssociationRecord

HUBSPOT_DEFINED = "HUBSPOT_DEFINED"
PRIMARY_LABEL_PATTERN = re.compile(r"primary", re.IGNORECASE)


def find_primary_type_id(labels: Iterable[AssociationLabel]) -> int | None:
    """Return the type id of the HubSpot-defined "Primary" label, if any."""
    for entry in labels:
        if entry.category == HUBSPOT_DEFINED and PRIMARY_LABEL_PATTERN.search(entry.label or ""):
            return entry.type_id
    return None


def select_primary_object_id(
    records: Sequence[AssociationRecord],
    primary_type_id: int | None,
) -> str | None:
    """Pick the associated object id for a deal.

    The first record carrying ``primary_type_id`` wins. Otherwise the first
    record in the order HubSpot returned them is used. Returns None when
    there are no records at all.
    """
    if primary_type_id is not None:
        for record in records:
            if primary_type_id in record.type_ids:
                return record.to_object_id
    if records:
        return records[0].to_object_id or None
    return None
