"""
Environment-specific deployment settings.

Cost-optimized defaults for development/testing.
"""

from dataclasses import dataclass, field
from typing import List
import os


@dataclass
class Settings:
    """Deployment settings with cost-optimized defaults."""

    # Environment
    environment: str = "dev"
    aws_region: str = "eu-west-2"  # Default AWS region

    # Relay behaviour passed to the Lambda
    desk_domain: str = "desk.zoho.com"
    dispatch_mode: str = "sync"
    ticket_channel: str = "form"
    allowed_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    token_service_url: str = ""
    commerce_api_url: str = ""

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 15
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        origins = [
            o.strip() for o in os.environ.get("ALLOWED_ORIGINS", "").split(",") if o.strip()
        ]
        common = dict(
            environment=env,
            aws_region=os.environ.get("AWS_REGION", "eu-west-2"),
            desk_domain=os.environ.get("DESK_DOMAIN", "desk.zoho.com"),
            dispatch_mode=os.environ.get("DISPATCH_MODE", "sync"),
            ticket_channel=os.environ.get("TICKET_CHANNEL", "form"),
            token_service_url=os.environ.get("TOKEN_SERVICE_URL", ""),
            commerce_api_url=os.environ.get("COMMERCE_API_URL", ""),
        )
        if origins:
            common["allowed_origins"] = origins

        # Production overrides
        if env == "prod":
            return cls(**common, lambda_memory_mb=512, lambda_timeout_seconds=30)

        return cls(**common)
