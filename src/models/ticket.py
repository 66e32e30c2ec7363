"""Ticket models: inbound submissions per channel and the outbound helpdesk payload."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

# Per-channel optional fields; ``channel`` stays out of every before-validator
# because the submission union is discriminated on it.
_OPTIONAL_FIELDS = (
    "contact_id",
    "email",
    "name",
    "store",
    "order_number",
    "phone",
    "recording_url",
    "transcription",
)


class _CamelModel(BaseModel):
    """Accept and emit the camelCase keys used by the web form and the helpdesk."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


class _Submission(_CamelModel):
    subject: str
    department_id: str
    details: str = ""
    contact_id: Optional[str] = None
    email: Optional[str] = None

    @field_validator("subject", "department_id")
    @classmethod
    def validate_required(cls, value: str) -> str:
        """The helpdesk refuses tickets without a subject or department."""
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("subject and departmentId must be provided")
        return cleaned

    @field_validator("subject", "department_id", "details", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator(*_OPTIONAL_FIELDS, mode="before", check_fields=False)
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        """Optional fields sent as empty strings by the form count as absent."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("details")
    @classmethod
    def strip_details(cls, value: str) -> str:
        return value.strip()


class FormSubmission(_Submission):
    """Web form ticket: who is writing, for which store and order."""

    channel: Literal["form"] = "form"
    name: Optional[str] = None
    store: Optional[str] = None
    order_number: Optional[str] = None

    def ticket_subject(self) -> str:
        parts = (self.store, self.subject, self.name)
        return " | ".join(p for p in parts if p)

    def build_payload(self, description: str) -> "TicketPayload":
        contact = None
        if not self.contact_id and (self.name or self.email):
            contact = ContactInfo.from_name(self.name or self.email, self.email)
        return TicketPayload(
            subject=self.ticket_subject(),
            department_id=self.department_id,
            description=description,
            email=self.email,
            contact_id=self.contact_id,
            contact=contact,
        )


class VoicemailSubmission(_Submission):
    """Phone voicemail ticket produced by the telephony integration."""

    channel: Literal["voicemail"] = "voicemail"
    phone: Optional[str] = None
    recording_url: Optional[str] = None
    transcription: Optional[str] = None
    order_number: Optional[str] = None

    def ticket_subject(self) -> str:
        return self.subject

    def build_payload(self, description: str) -> "TicketPayload":
        return TicketPayload(
            subject=self.ticket_subject(),
            department_id=self.department_id,
            description=description,
            phone=self.phone,
            contact_id=self.contact_id,
        )


TicketSubmission = Annotated[
    Union[FormSubmission, VoicemailSubmission], Field(discriminator="channel")
]

_submission_adapter: TypeAdapter = TypeAdapter(TicketSubmission)


def parse_submission(payload: Any, default_channel: str = "form"):
    """Validate a decoded JSON body into the matching channel model."""
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    data = dict(payload)
    channel = str(data.get("channel") or "").strip().lower()
    data["channel"] = channel or default_channel
    return _submission_adapter.validate_python(data)


class ContactInfo(_CamelModel):
    """Contact block the helpdesk uses to find or create the requester."""

    first_name: str
    last_name: str
    email: Optional[str] = None

    @classmethod
    def from_name(cls, name: str, email: Optional[str]) -> "ContactInfo":
        first, _, last = name.strip().partition(" ")
        return cls(first_name=first, last_name=last.strip() or first, email=email)


class TicketPayload(_CamelModel):
    """Body POSTed to the helpdesk create-ticket endpoint."""

    subject: str
    department_id: str
    description: str
    email: Optional[str] = None
    phone: Optional[str] = None
    contact_id: Optional[str] = None
    contact: Optional[ContactInfo] = None

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
