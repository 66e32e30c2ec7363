"""
Ticket submission service.

Runs the whole create-ticket sequence for one request: parse the body, get a
token, optionally enrich from the commerce backend, build the description and
POST the payload to the helpdesk. Any failure raises an AppError; nothing is
retried.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from config.settings import Settings
from models.customer import CustomerProfile, OrderRecord
from models.ticket import parse_submission
from services.commerce_service import CommerceClient
from services.description_builder import build_description
from services.token_service import AccessTokenProvider
from utils.error_handling import SubmissionError, TicketApiError
from utils.logging_config import get_logger, log_event

logger = get_logger(__name__)

GENERIC_TICKET_ERROR = "Failed to create ticket"


@dataclass
class TicketResult:
    """Helpdesk status and body, relayed verbatim to the caller."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


class TicketService:
    """Encapsulates ticket creation against the helpdesk API."""

    def __init__(
        self,
        settings: Settings,
        token_provider: Optional[AccessTokenProvider] = None,
        commerce_client: Optional[CommerceClient] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.settings = settings
        self.http = client or httpx.Client()
        self.token_provider = token_provider or AccessTokenProvider(
            settings.token_service_url, client=self.http
        )
        if commerce_client is None and settings.enrichment_enabled:
            commerce_client = CommerceClient(
                settings.commerce_api_url, settings.commerce_api_token, client=self.http
            )
        self.commerce_client = commerce_client

    def submit(self, raw_body: str, correlation_id: str) -> TicketResult:
        submission = self._parse(raw_body)

        access_token = self.token_provider.get_access_token()
        log_event(logger, "token.obtained", "Retrieved helpdesk access token",
                  correlation_id=correlation_id)

        profile: Optional[CustomerProfile] = None
        orders: List[OrderRecord] = []
        if submission.email and self.commerce_client is not None:
            profile = self.commerce_client.get_customer_details(submission.email)
            orders = self.commerce_client.get_order_history(submission.email)
            log_event(
                logger,
                "enrichment.completed",
                "Customer context fetched",
                correlation_id=correlation_id,
                customer_found=profile is not None,
                order_count=len(orders),
            )

        description = build_description(submission, profile, orders)
        payload = submission.build_payload(description).to_api()
        return self._create_ticket(payload, access_token, correlation_id)

    def _parse(self, raw_body: str):
        try:
            data = json.loads(raw_body or "")
        except json.JSONDecodeError as exc:
            raise SubmissionError(f"Invalid JSON body: {exc.msg}") from exc
        try:
            return parse_submission(data, self.settings.default_channel)
        except (ValidationError, ValueError) as exc:
            raise SubmissionError(str(exc)) from exc

    def _create_ticket(
        self, payload: Dict[str, Any], access_token: str, correlation_id: str
    ) -> TicketResult:
        headers = {
            "orgId": self.settings.desk_org_id,
            "Authorization": f"Zoho-oauthtoken {access_token}",
            "Content-Type": "application/json",
        }
        try:
            resp = self.http.post(self.settings.ticket_api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise TicketApiError(f"Helpdesk API unreachable: {exc}", upstream_status=0) from exc

        try:
            body = resp.json()
        except ValueError:
            body = {"raw": resp.text}
        if not isinstance(body, dict):
            body = {"data": body}

        log_event(
            logger,
            "ticket.submitted",
            "Ticket submitted to helpdesk",
            level=logging.INFO if resp.is_success else logging.WARNING,
            correlation_id=correlation_id,
            status=resp.status_code,
            ticket_number=body.get("ticketNumber"),
        )

        if not resp.is_success:
            message = body.get("message") or GENERIC_TICKET_ERROR
            raise TicketApiError(message, upstream_status=resp.status_code, upstream_body=body)

        return TicketResult(status_code=resp.status_code, body=body)
