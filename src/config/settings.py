"""
Runtime configuration for the ticket relay.

Loaded once per Lambda execution environment and treated as read-only
afterwards. Credentials may come from plain environment variables (local
runs, tests) or from a JSON Secrets Manager secret named by APP_SECRET_ARN.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

import boto3

from utils.logging_config import get_logger
from utils.validators import ensure_choice, ensure_present

logger = get_logger(__name__)

DISPATCH_MODES = ("sync", "async")
CHANNELS = ("form", "voicemail")

# Keys a secret is allowed to override.
SECRET_KEYS = ("desk_org_id", "token_service_url", "commerce_api_token")

_settings: Optional["Settings"] = None


@dataclass(frozen=True)
class Settings:
    """Process-wide relay settings."""

    desk_org_id: str
    token_service_url: str
    desk_domain: str = "desk.zoho.com"
    commerce_api_url: str = ""
    commerce_api_token: str = ""
    allowed_origins: Tuple[str, ...] = ("http://localhost:3000",)
    cors_enabled: bool = True
    dispatch_mode: str = "sync"
    default_channel: str = "form"
    environment: str = "dev"

    @property
    def ticket_api_url(self) -> str:
        return f"https://{self.desk_domain}/api/v1/tickets"

    @property
    def enrichment_enabled(self) -> bool:
        return bool(self.commerce_api_url)

    def validate(self) -> "Settings":
        ensure_present(self.desk_org_id, "DESK_ORG_ID")
        ensure_present(self.token_service_url, "TOKEN_SERVICE_URL")
        ensure_present(self.desk_domain, "DESK_DOMAIN")
        if self.cors_enabled:
            ensure_present(list(self.allowed_origins), "ALLOWED_ORIGINS")
        if self.enrichment_enabled:
            ensure_present(self.commerce_api_token, "COMMERCE_API_TOKEN")
        return self

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables (and the optional secret)."""
        origins = tuple(
            o.strip()
            for o in os.environ.get("ALLOWED_ORIGINS", "").split(",")
            if o.strip()
        )
        settings = cls(
            desk_org_id=os.environ.get("DESK_ORG_ID", ""),
            token_service_url=os.environ.get("TOKEN_SERVICE_URL", "").rstrip("/"),
            desk_domain=os.environ.get("DESK_DOMAIN", "desk.zoho.com"),
            commerce_api_url=os.environ.get("COMMERCE_API_URL", "").rstrip("/"),
            commerce_api_token=os.environ.get("COMMERCE_API_TOKEN", ""),
            allowed_origins=origins or cls.allowed_origins,
            cors_enabled=os.environ.get("CORS_ENABLED", "true").lower() == "true",
            dispatch_mode=ensure_choice(
                os.environ.get("DISPATCH_MODE", "sync"), "DISPATCH_MODE", DISPATCH_MODES
            ),
            default_channel=ensure_choice(
                os.environ.get("TICKET_CHANNEL", "form"), "TICKET_CHANNEL", CHANNELS
            ),
            environment=os.environ.get("ENVIRONMENT", "dev"),
        )

        secret_arn = os.environ.get("APP_SECRET_ARN")
        if secret_arn:
            overrides = _load_secret(secret_arn)
            if overrides:
                settings = replace(settings, **overrides)

        return settings.validate()


def _load_secret(secret_arn: str) -> Dict[str, str]:
    """Read credential overrides from a JSON Secrets Manager secret."""
    try:
        sm = boto3.client("secretsmanager")
        secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    except Exception as exc:
        logger.warning("Failed to load app secret", extra={"error": str(exc)})
        return {}

    overrides = {key: str(secret[key]) for key in SECRET_KEYS if secret.get(key)}
    if "token_service_url" in overrides:
        overrides["token_service_url"] = overrides["token_service_url"].rstrip("/")
    return overrides


def get_settings() -> Settings:
    """Lazy-load settings once per execution environment."""
    global _settings
    if _settings is None:
        _settings = Settings.from_environment()
        logger.info(
            "Settings loaded",
            extra={
                "environment": _settings.environment,
                "dispatch_mode": _settings.dispatch_mode,
                "default_channel": _settings.default_channel,
                "enrichment_enabled": _settings.enrichment_enabled,
            },
        )
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
