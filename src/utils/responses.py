"""Helpers for reading API Gateway HTTP API events and shaping proxy responses."""

import base64
import json
from typing import Any, Dict, Optional


def json_response(status: int, body: Any, headers: Optional[Dict[str, str]] = None) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    merged = {"Content-Type": "application/json"}
    merged.update(headers or {})
    return {
        "statusCode": status,
        "headers": merged,
        "body": json.dumps(body),
    }


def empty_response(status: int, headers: Optional[Dict[str, str]] = None) -> Dict:
    """Response without a body (used for preflight)."""
    return {"statusCode": status, "headers": dict(headers or {}), "body": ""}


def request_method(event: Dict) -> str:
    http = event.get("requestContext", {}).get("http", {})
    return (http.get("method") or event.get("httpMethod") or "").upper()


def request_path(event: Dict) -> str:
    http = event.get("requestContext", {}).get("http", {})
    return http.get("path") or event.get("rawPath") or event.get("path") or ""


def get_header(event: Dict, name: str) -> Optional[str]:
    """Case-insensitive header lookup (HTTP API lowercases, REST API does not)."""
    wanted = name.lower()
    for key, value in (event.get("headers") or {}).items():
        if key.lower() == wanted:
            return value
    return None


def request_body(event: Dict) -> str:
    """Return the raw request body, decoding base64 payloads."""
    body = event.get("body") or ""
    if event.get("isBase64Encoded") and body:
        return base64.b64decode(body).decode("utf-8")
    return body
