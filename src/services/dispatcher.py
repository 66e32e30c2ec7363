"""
Fire-and-forget dispatcher.

Lambda freezes the execution environment as soon as the handler returns, so
work cannot continue on a thread after the response. Instead the relay hands
the ticket to itself as an asynchronous (``InvocationType="Event"``)
invocation: Lambda queues the event, answers 202 at once, and runs the
ticket sequence in a separate invocation. The outcome is only visible in the
logs of that invocation. Events are not retried (retry attempts are set to 0
on the function) and nothing is persisted, so a failed submission is lost.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import boto3

from utils.logging_config import get_logger, log_event

logger = get_logger(__name__)

BACKGROUND_SOURCE = "ticket-relay.background"


def is_background_event(event: Dict[str, Any]) -> bool:
    """True for events produced by BackgroundDispatcher.dispatch."""
    return isinstance(event, dict) and event.get("source") == BACKGROUND_SOURCE


class BackgroundDispatcher:
    """Schedule ticket creation without blocking the HTTP response."""

    def __init__(self, client=None):
        self.client = client or boto3.client("lambda")

    def dispatch(self, function_name: str, raw_body: str, correlation_id: str) -> int:
        """Queue ``raw_body`` for a background invocation of ``function_name``."""
        payload = {
            "source": BACKGROUND_SOURCE,
            "body": raw_body,
            "correlation_id": correlation_id,
        }
        resp = self.client.invoke(
            FunctionName=function_name,
            InvocationType="Event",
            Payload=json.dumps(payload).encode("utf-8"),
        )
        status = resp.get("StatusCode")
        log_event(
            logger,
            "ticket.dispatched",
            "Background invocation queued",
            correlation_id=correlation_id,
            status=status,
        )
        return status


_dispatcher: Optional[BackgroundDispatcher] = None


def get_dispatcher() -> BackgroundDispatcher:
    """Lazy-load the dispatcher (and its Lambda client) once per environment."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = BackgroundDispatcher()
    return _dispatcher
