"""
CORS handling for the relay Lambda.

API Gateway's built-in preflight is disabled for this API so that the allow
list lives next to the code. Unknown origins are answered with the first
allowed origin rather than rejected; browsers then block the response on
their side.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from utils.responses import empty_response

PREFLIGHT_MAX_AGE_SECONDS = 86400
ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"


@dataclass(frozen=True)
class CorsPolicy:
    """Fixed allow-list of browser origins."""

    allowed_origins: Tuple[str, ...]

    @classmethod
    def from_origins(cls, origins: Sequence[str]) -> "CorsPolicy":
        cleaned = tuple(o.strip() for o in origins if o and o.strip())
        if not cleaned:
            raise ValueError("at least one allowed origin is required")
        return cls(allowed_origins=cleaned)

    def resolve_origin(self, request_origin: Optional[str]) -> str:
        """Echo an allowed origin, otherwise fall back to the first entry."""
        if request_origin and request_origin in self.allowed_origins:
            return request_origin
        return self.allowed_origins[0]

    def headers(self, request_origin: Optional[str]) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.resolve_origin(request_origin),
            "Vary": "Origin",
        }

    def apply(self, response: Dict, request_origin: Optional[str]) -> Dict:
        """Return a copy of ``response`` with CORS headers added."""
        decorated = dict(response)
        headers = dict(response.get("headers") or {})
        headers.update(self.headers(request_origin))
        decorated["headers"] = headers
        return decorated

    def preflight(self, request_origin: Optional[str]) -> Dict:
        headers = self.headers(request_origin)
        headers.update(
            {
                "Access-Control-Allow-Methods": ALLOWED_METHODS,
                "Access-Control-Allow-Headers": ALLOWED_HEADERS,
                "Access-Control-Max-Age": str(PREFLIGHT_MAX_AGE_SECONDS),
            }
        )
        return empty_response(204, headers)
