"""Frontegg identity platform integration -- tenant creation and admin invites."""

from src.dealwon.identity.frontegg import FronteggClient
from src.dealwon.identity.schemas import ProvisionOutcome, ProvisionResult

__all__ = ["FronteggClient", "ProvisionOutcome", "ProvisionResult"]
