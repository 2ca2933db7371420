"""Application configuration via Pydantic BaseSettings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    development = "development"
    staging = "staging"
    production = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Credentials default to empty strings so the service can boot without
    them; the request path reports which one is missing.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Environment
    ENVIRONMENT: Environment = Environment.development

    # Logging
    LOG_LEVEL: str = "INFO"

    # Inbound webhook (HubSpot Workflow -> Send a webhook)
    WEBHOOK_SECRET: str = ""

    # HubSpot CRM
    HUBSPOT_TOKEN: str = ""
    HUBSPOT_BASE_URL: str = "https://api.hubapi.com"

    # Frontegg identity platform
    FRONTEGG_BASE_URL: str = "https://api.frontegg.com"
    FRONTEGG_IDENTITY_BASE: str = ""  # Derived from FRONTEGG_BASE_URL when empty
    FRONTEGG_CLIENT_ID: str = ""
    FRONTEGG_API_KEY: str = ""
    ADMIN_ROLE_ID: str = ""  # Optional role attached to the admin invite

    # Provisioning
    TENANT_ID_PREFIX: str = "hsco-"
    DEFAULT_COMPANY_NAME: str = "New Account"

    # Outbound HTTP
    HTTP_TIMEOUT: float = 30.0

    # Monitoring
    SENTRY_DSN: str = ""

    @property
    def frontegg_identity_base(self) -> str:
        """Identity service base URL, falling back to ``{FRONTEGG_BASE_URL}/identity``."""
        if self.FRONTEGG_IDENTITY_BASE:
            return self.FRONTEGG_IDENTITY_BASE.rstrip("/")
        return f"{self.FRONTEGG_BASE_URL.rstrip('/')}/identity"

    def tenant_id_for(self, company_id: str) -> str:
        """Deterministic tenant id for a CRM company."""
        return f"{self.TENANT_ID_PREFIX}{company_id}"


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
