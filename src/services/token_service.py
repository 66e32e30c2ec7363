"""
Access token client.

The helpdesk OAuth refresh flow lives in a separate token service; this side
only asks it for a current bearer token. Tokens are used once and never
cached here.
"""

from __future__ import annotations

from typing import Optional

import httpx

from utils.error_handling import TokenError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class AccessTokenProvider:
    """Fetch helpdesk access tokens from the token service."""

    def __init__(self, base_url: str, client: Optional[httpx.Client] = None):
        self.token_url = f"{base_url.rstrip('/')}/token"
        self.http = client or httpx.Client()

    def get_access_token(self) -> str:
        try:
            resp = self.http.get(self.token_url)
        except httpx.HTTPError as exc:
            raise TokenError(f"Token service unreachable: {exc}") from exc

        if not resp.is_success:
            logger.warning(
                "Token service returned an error",
                extra={"status": resp.status_code},
            )
            raise TokenError(f"Token service returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise TokenError("Token service returned invalid JSON") from exc

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise TokenError("Token service response is missing access_token")
        return token
