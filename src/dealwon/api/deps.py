"""FastAPI dependency injection for settings and the provisioning pipeline."""

from __future__ import annotations

from fastapi import Depends, Request

from src.dealwon.config import Settings, get_settings
from src.dealwon.services.deal_won import DealWonProvisioner


async def get_app_settings() -> Settings:
    """Settings built once at startup (cached)."""
    return get_settings()


async def get_provisioner(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> DealWonProvisioner:
    """Build the provisioner for this request.

    ``app.state.http_transport`` lets tests route outbound HubSpot/Frontegg
    calls through an httpx.MockTransport.
    """
    transport = getattr(request.app.state, "http_transport", None)
    return DealWonProvisioner.from_settings(settings, transport=transport)
