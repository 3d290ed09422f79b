"""Pydantic models and enumerations for the pstkit-export package.

Input records (``MessageRecord``, ``AttachmentRecord``, ``ContactRecord``)
are read-only snapshots supplied by an external mail-store reader.
``ExportResult`` is the output of :class:`~pstkit_export.router.ExportRouter`.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field

from pstkit_export.errors import ConvertError

__all__ = [
    "RecipientType",
    "ExportKind",
    "Address",
    "Recipient",
    "AttachmentRecord",
    "MessageRecord",
    "ContactRecord",
    "ExportResult",
    "UNNAMED_ATTACHMENT",
]

UNNAMED_ATTACHMENT = "unnamed"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class RecipientType(IntEnum):
    """MAPI recipient role."""

    TO = 1
    CC = 2
    BCC = 3


class ExportKind(str, Enum):
    """Which text format an item was exported to."""

    EML = "eml"
    VCARD = "vcard"


# ---------------------------------------------------------------------------
# Message records
# ---------------------------------------------------------------------------


class Address(BaseModel):
    """A person as it appears in an address header."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: str | None = None


class Recipient(Address):
    """An address tagged with its To/Cc/Bcc role."""

    recipient_type: RecipientType = RecipientType.TO


class AttachmentRecord(BaseModel):
    """One attachment: raw bytes, a lazy loader, or an embedded message."""

    model_config = ConfigDict(frozen=True)

    long_filename: str | None = None
    short_filename: str | None = None
    display_name: str | None = None
    content_id: str | None = None
    content: bytes | None = None
    loader: Callable[[], bytes] | None = Field(default=None, exclude=True, repr=False)
    embedded_message: MessageRecord | None = None

    @property
    def filename(self) -> str:
        """Long filename, then short filename, then display name."""
        return (
            self.long_filename
            or self.short_filename
            or self.display_name
            or UNNAMED_ATTACHMENT
        )

    @property
    def is_unnamed(self) -> bool:
        return not (self.long_filename or self.short_filename or self.display_name)

    def read_content(self) -> bytes:
        """Return the attachment bytes, calling the loader if one was given.

        Absent content yields an empty buffer.
        """
        if self.content is not None:
            return bytes(self.content)
        if self.loader is not None:
            return bytes(self.loader() or b"")
        return b""


class MessageRecord(BaseModel):
    """Business fields of one mail item."""

    model_config = ConfigDict(frozen=True)

    message_class: str = "IPM.Note"
    sender_name: str | None = None
    sender_email: str | None = None
    recipients: list[Recipient] = []
    subject: str | None = None
    body: str | None = None
    body_html: str | None = None
    message_delivery_time: datetime | None = None
    client_submit_time: datetime | None = None
    modification_time: datetime | None = None
    creation_time: datetime | None = None
    attachments: list[AttachmentRecord] = []
    message_id: str | None = None

    @property
    def sender(self) -> Address:
        return Address(name=self.sender_name, email=self.sender_email)

    def recipients_of(self, recipient_type: RecipientType) -> list[Address]:
        """Recipients with the given role, in record order."""
        return [
            Address(name=r.name, email=r.email)
            for r in self.recipients
            if r.recipient_type == recipient_type
        ]

    def timestamp(self) -> datetime | None:
        """First present of delivery, submission, modification, creation time."""
        return (
            self.message_delivery_time
            or self.client_submit_time
            or self.modification_time
            or self.creation_time
        )


AttachmentRecord.model_rebuild()
MessageRecord.model_rebuild()


# ---------------------------------------------------------------------------
# Contact records
# ---------------------------------------------------------------------------


class ContactRecord(BaseModel):
    """Business fields of one contact item."""

    model_config = ConfigDict(frozen=True)

    message_class: str = "IPM.Contact"

    # Name
    surname: str | None = None
    given_name: str | None = None
    middle_name: str | None = None
    display_name_prefix: str | None = None
    generation: str | None = None
    display_name: str | None = None
    yomi_last_name: str | None = None
    yomi_first_name: str | None = None

    # Organization
    company_name: str | None = None
    department_name: str | None = None
    yomi_company_name: str | None = None
    title: str | None = None

    # Phones
    business_telephone_number: str | None = None
    home_telephone_number: str | None = None
    mobile_telephone_number: str | None = None
    business_fax_number: str | None = None

    # Work address
    work_address_street: str | None = None
    work_address_city: str | None = None
    work_address_state: str | None = None
    work_address_postal_code: str | None = None
    work_address_country: str | None = None
    work_address: str | None = None

    # Internet
    business_home_page: str | None = None
    email_address: str | None = None


# ---------------------------------------------------------------------------
# Export Result
# ---------------------------------------------------------------------------


class ExportResult(BaseModel):
    """Final result of exporting one record through the router."""

    source_id: str
    kind: ExportKind | None = None
    suffix: str = ""
    text: str = ""
    content_hash: str = ""
    output_path: str | None = None
    converter_version: str = ""
    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[ConvertError] = []
    processing_time_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors
