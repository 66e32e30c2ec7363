"""
Single entrypoint Lambda that routes HTTP API requests to handler modules.

Async-mode background events are handed straight to the ticket handler.
Every HTTP response leaves through the CORS policy, and nothing raised below this
point escapes unconverted: unexpected errors become a 500 with an ``error``
message.
"""

from typing import Callable, Dict, Optional, Tuple
import logging

from config.settings import get_settings
from services.dispatcher import is_background_event
from utils.cors import CorsPolicy
from utils.error_handling import NotFoundError, to_response
from utils.logging_config import get_logger, log_event
from utils.responses import (
    empty_response,
    get_header,
    json_response,
    request_method,
    request_path,
)

from . import ticket_submission

logger = get_logger(__name__)

ROUTES: Tuple[Tuple[str, Callable], ...] = (
    ("/tickets", ticket_submission.lambda_handler),
)


def _cors_policy() -> Optional[CorsPolicy]:
    settings = get_settings()
    if not settings.cors_enabled:
        return None
    return CorsPolicy.from_origins(settings.allowed_origins)


def _dispatch(event, context) -> Dict:
    path = request_path(event).rstrip("/") or "/"
    for route, handler in ROUTES:
        if path == route:
            return handler(event, context)
    return to_response(NotFoundError())


def lambda_handler(event, context):
    """Entry point invoked by API Gateway HTTP API and by async self-invocations."""
    if is_background_event(event):
        return ticket_submission.background_handler(event, context)

    origin = get_header(event, "origin")
    cors: Optional[CorsPolicy] = None
    try:
        cors = _cors_policy()
        if request_method(event) == "OPTIONS":
            return cors.preflight(origin) if cors else empty_response(204)

        response = _dispatch(event, context)
    except Exception as exc:
        log_event(
            logger,
            "request.failed",
            "Unhandled exception in request handler",
            level=logging.ERROR,
            error=str(exc),
            path=request_path(event),
        )
        response = json_response(500, {"error": str(exc) or "Unknown error"})

    return cors.apply(response, origin) if cors else response
