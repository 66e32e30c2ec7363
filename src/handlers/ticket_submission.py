"""
Ticket submission handler for /tickets.

In ``sync`` dispatch mode the helpdesk response is relayed to the caller. In
``async`` mode the caller gets a 202 straight away and the function invokes
itself asynchronously; ``background_handler`` then creates the ticket and
failures only show up in logs.
"""

from __future__ import annotations

import logging
import os
import uuid
from typing import Dict, Optional

from config.settings import get_settings
from models.response import Acknowledgement
from utils.error_handling import AppError, MethodNotAllowedError, to_response
from utils.logging_config import get_logger, log_event
from utils.responses import json_response, request_body, request_method

logger = get_logger(__name__)

# Lazy-loaded so HTTP clients are created once per warm execution environment.
_ticket_service: Optional["TicketService"] = None


def _get_ticket_service():
    """Lazy-load TicketService."""
    global _ticket_service
    if _ticket_service is None:
        from services.ticket_service import TicketService
        _ticket_service = TicketService(get_settings())
    return _ticket_service


def _get_dispatcher():
    from services.dispatcher import get_dispatcher
    return get_dispatcher()


def _function_name(context) -> str:
    name = getattr(context, "invoked_function_arn", None) or os.environ.get(
        "AWS_LAMBDA_FUNCTION_NAME"
    )
    if not name:
        raise AppError("Cannot schedule ticket creation: Lambda function name unknown")
    return name


def _submit(body: str, correlation_id: str) -> Dict:
    """Run the ticket sequence and turn any failure into a 500 response."""
    try:
        result = _get_ticket_service().submit(body, correlation_id)
    except Exception as exc:  # every failure on this route is reported as 500
        log_event(
            logger,
            "ticket.failed",
            "Error during ticket creation",
            level=logging.ERROR,
            correlation_id=correlation_id,
            status=getattr(exc, "status_code", 500),
            error=str(exc),
        )
        if isinstance(exc, AppError):
            return to_response(exc)
        return json_response(500, {"error": str(exc) or "Unknown error"})

    return json_response(result.status_code, result.body)


def lambda_handler(event, context) -> Dict:
    """Handle POST /tickets."""
    correlation_id = str(uuid.uuid4())
    method = request_method(event)
    if method != "POST":
        log_event(logger, "request.rejected", f"Invalid request method: {method}",
                  level=logging.WARNING, correlation_id=correlation_id)
        return to_response(MethodNotAllowedError(method))

    settings = get_settings()
    log_event(
        logger,
        "request.received",
        "Ticket request received",
        correlation_id=correlation_id,
        dispatch_mode=settings.dispatch_mode,
    )
    body = request_body(event)

    if settings.dispatch_mode == "async":
        _get_dispatcher().dispatch(_function_name(context), body, correlation_id)
        return json_response(202, Acknowledgement().model_dump())

    return _submit(body, correlation_id)


def background_handler(event, context) -> Dict:
    """Create the ticket queued by an async-mode request.

    Never raises, so Lambda does not treat the event as failed and retry it.
    """
    correlation_id = event.get("correlation_id") or str(uuid.uuid4())
    response = _submit(event.get("body") or "", correlation_id)
    if response["statusCode"] < 400:
        log_event(
            logger,
            "ticket.completed",
            "Background ticket creation finished",
            correlation_id=correlation_id,
            status=response["statusCode"],
        )
    return response
