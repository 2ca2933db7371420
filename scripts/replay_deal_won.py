#!/usr/bin/env python3
"""CLI script to re-drive deal-won provisioning for a HubSpot deal.

Usage:
    uv run python scripts/replay_deal_won.py --deal-id 555

Runs the same pipeline as POST /api/deal-won without going through HTTP.
Use it after a partial failure (e.g. the tenant was created but the admin
invite failed): tenant creation and the invite are idempotent, so a replay
converges.

Reads settings from environment or .env file.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys

# Ensure project root is on sys.path so we can import src.dealwon
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from dotenv import load_dotenv  # noqa: E402

# Load .env from project root
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))


async def replay(deal_id: str) -> int:
    """Provision the deal and print the outcome. Returns the exit code."""
    from src.dealwon.api.middleware.logging import configure_structlog
    from src.dealwon.config import get_settings
    from src.dealwon.core.errors import DealWonError, IntegrationFailure
    from src.dealwon.services.deal_won import DealWonProvisioner

    settings = get_settings()
    configure_structlog(settings)
    provisioner = DealWonProvisioner.from_settings(settings)

    print(f"Replaying deal-won provisioning: deal_id={deal_id}")
    try:
        result = await provisioner.provision(deal_id)
    except DealWonError as exc:
        print(f"Provisioning failed ({exc.status_code}): {exc.message}")
        return 1
    except Exception as exc:
        failure = IntegrationFailure(str(exc))
        print(f"Provisioning failed ({failure.status_code}): {failure.message}")
        return 1

    print("Provisioned successfully:")
    print(f"  Tenant:  {result.tenant_id} ({result.tenant.outcome.value})")
    print(f"  Invited: {result.invited} ({result.invite.outcome.value})")
    print(f"  Company: {result.company.name} <{result.company.domain}>")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Re-drive deal-won provisioning for a deal")
    parser.add_argument("--deal-id", required=True, help="HubSpot deal id (e.g., 555)")
    args = parser.parse_args()

    deal_id = args.deal_id.strip()
    if not deal_id:
        parser.error("--deal-id must not be empty")

    sys.exit(asyncio.run(replay(deal_id)))


if __name__ == "__main__":
    main()
