"""Pydantic models for ticket submissions, enrichment data and responses."""

from models.customer import CustomerProfile, OrderRecord  # noqa: F401
from models.response import Acknowledgement  # noqa: F401
from models.ticket import (  # noqa: F401
    ContactInfo,
    FormSubmission,
    TicketPayload,
    TicketSubmission,
    VoicemailSubmission,
    parse_submission,
)
