"""Shared fixtures for pstkit-export tests."""

from __future__ import annotations

import email
import email.policy
from datetime import datetime, timezone

import pytest

from pstkit_export.config import ConversionOptions
from pstkit_export.models import (
    AttachmentRecord,
    ContactRecord,
    MessageRecord,
    Recipient,
    RecipientType,
)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

PLAIN_BODY = "Hello, this is a test email body."
HTML_BODY = "<html><body><p>Hello, this is <b>HTML</b> body.</p></body></html>"
DELIVERED = datetime(2026, 2, 17, 12, 0, 0, tzinfo=timezone.utc)


def build_message(
    *,
    plain: str | None = PLAIN_BODY,
    html: str | None = None,
    attachments: list[AttachmentRecord] | None = None,
    recipients: list[Recipient] | None = None,
    subject: str = "Test Subject",
) -> MessageRecord:
    """Build a small message record."""
    if recipients is None:
        recipients = [
            Recipient(name="Bob", email="bob@example.com", recipient_type=RecipientType.TO)
        ]
    return MessageRecord(
        sender_name="Alice",
        sender_email="alice@example.com",
        recipients=recipients,
        subject=subject,
        body=plain,
        body_html=html,
        message_delivery_time=DELIVERED,
        attachments=attachments or [],
    )


@pytest.fixture
def fixed_options() -> ConversionOptions:
    """Options with fixed boundaries for reproducible output."""
    return ConversionOptions(base_boundary="B1", alt_boundary="B2")


@pytest.fixture
def plain_message() -> MessageRecord:
    """Plain body only, one recipient, no attachments."""
    return build_message()


@pytest.fixture
def message_with_attachment() -> MessageRecord:
    """Plain body plus one binary attachment named a.txt."""
    return build_message(
        attachments=[AttachmentRecord(long_filename="a.txt", content=b"abc")]
    )


@pytest.fixture
def inner_message() -> MessageRecord:
    """A message suitable for embedding."""
    return MessageRecord(
        sender_name="Carol",
        sender_email="carol@example.com",
        recipients=[Recipient(name="Dan", email="dan@example.com")],
        subject="Inner",
        body="Inner body",
        message_delivery_time=datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_contact() -> ContactRecord:
    """Contact with most vCard properties populated."""
    return ContactRecord(
        surname="Smith",
        given_name="Alice",
        display_name="Alice Smith",
        company_name="Acme",
        department_name="R&D",
        title="Engineer",
        business_telephone_number="+1 555 0100",
        mobile_telephone_number="+1 555 0199",
        work_address_street="1 Main St",
        work_address_city="Springfield",
        work_address_country="USA",
        work_address="1 Main St\r\nSpringfield",
        business_home_page="https://acme.example.com",
        email_address="alice@acme.example.com",
    )


# ---------------------------------------------------------------------------
# Parsing helper
# ---------------------------------------------------------------------------


@pytest.fixture
def parse_eml():
    """Parse composed EML text with the stdlib parser."""

    def _parse(text: str):
        return email.message_from_bytes(text.encode("utf-8"), policy=email.policy.default)

    return _parse
