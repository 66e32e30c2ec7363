"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when no route matches the request path."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404)


class MethodNotAllowedError(AppError):
    """Raised when a route is called with an unsupported HTTP method."""

    def __init__(self, method: str, message: str = "Method not allowed"):
        super().__init__(message, status_code=405)
        self.method = method


class SubmissionError(AppError):
    """Raised when the inbound body is not valid JSON or misses required fields.

    Reported as a 500 like every other failure on the ticket route.
    """


class TokenError(AppError):
    """Raised when the token service does not hand out an access token."""


class EnrichmentError(AppError):
    """Raised when the commerce backend lookup fails."""


class TicketApiError(AppError):
    """Raised when the helpdesk rejects the ticket."""

    def __init__(
        self,
        message: str,
        upstream_status: int,
        upstream_body: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body or {}


def error_body(message: str) -> str:
    """Serialise the public error shape."""
    return json.dumps({"error": message})


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": error_body(str(error)),
    }
