"""
Ticket description builder.

Pure function: turns a submission plus optional commerce data into the HTML
fragment agents read in the helpdesk. No I/O happens here.
"""

from __future__ import annotations

from html import escape
from typing import List, Optional, Sequence

from models.customer import CustomerProfile, OrderRecord
from models.ticket import VoicemailSubmission

LINE_SEPARATOR = "<br>"

MATCH_DISCLAIMER = (
    "Customer details below were matched automatically and may be inaccurate."
)


def _field(label: str, value: str) -> str:
    return f"<div><strong>{label}:</strong> {escape(value, quote=False)}</div>"


def build_description(
    submission,
    profile: Optional[CustomerProfile] = None,
    orders: Sequence[OrderRecord] = (),
) -> str:
    """Assemble description lines in display order and join them."""
    lines: List[str] = []

    if submission.order_number:
        lines.append(_field("Order Number", submission.order_number))

    lines.append(_field("Detail", submission.details))

    if isinstance(submission, VoicemailSubmission):
        if submission.recording_url:
            href = escape(submission.recording_url, quote=True)
            lines.append(
                f'<div><strong>Recording:</strong> <a href="{href}">{href}</a></div>'
            )
        if submission.transcription:
            lines.append(_field("Transcription", submission.transcription))

    if profile is not None:
        lines.append(f"<div><em>{MATCH_DISCLAIMER}</em></div>")
        lines.append(_field("Customer Name", profile.full_name))
        lines.append(_field("Customer Email", profile.email))

    if orders:
        lines.append("<div><strong>Recent Orders:</strong></div>")
        for order in orders:
            lines.append(
                "<div>{} | {} | {}</div>".format(
                    escape(f"#{order.increment_id}", quote=False),
                    escape(order.formatted_total(), quote=False),
                    escape(order.status, quote=False),
                )
            )

    return LINE_SEPARATOR.join(lines)
