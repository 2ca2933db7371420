"""Webhook request authentication.

HubSpot workflow webhooks are configured to send a static
``Authorization: Bearer <secret>`` header. The shared secret comes from
``WEBHOOK_SECRET``; the header must match it exactly.
"""

from __future__ import annotations

from src.dealwon.core.errors import AuthFailure


def expected_authorization(secret: str) -> str:
    return f"Bearer {secret}"


def verify_webhook_authorization(authorization: str | None, secret: str) -> None:
    """Accept only ``Bearer <secret>``.

    Raises:
        AuthFailure: If the secret is not configured server-side, or the
            header is missing or does not match.
    """
    if not secret:
        raise AuthFailure("WEBHOOK_SECRET not set")
    if (authorization or "") != expected_authorization(secret):
        raise AuthFailure()
