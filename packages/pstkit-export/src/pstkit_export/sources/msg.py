"""Record adapter for Outlook ``.msg`` files via the optional ``extract-msg``.

Maps ``extract_msg`` message, attachment, and contact objects into the
read-only records the composers consume.  Requires ``extract-msg>=0.48.0``
only when :class:`MSGSource` opens files; the mapping functions
accept any object with the same attributes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from email.utils import parseaddr
from typing import Any

from pstkit_export.errors import SourceReadError
from pstkit_export.models import (
    AttachmentRecord,
    ContactRecord,
    MessageRecord,
    Recipient,
    RecipientType,
)

logger = logging.getLogger("pstkit_export")

_CONTACT_FIELDS: dict[str, tuple[str, ...]] = {
    "surname": ("lastName", "surname"),
    "given_name": ("firstName", "givenName"),
    "middle_name": ("middleName", "middleNames"),
    "display_name_prefix": ("displayNamePrefix", "namePrefix"),
    "generation": ("generation", "nameSuffix"),
    "display_name": ("displayName", "fileAs"),
    "yomi_last_name": ("yomiLastName", "yomiFamilyName"),
    "yomi_first_name": ("yomiFirstName", "yomiGivenName"),
    "company_name": ("companyName",),
    "department_name": ("departmentName",),
    "yomi_company_name": ("yomiCompanyName",),
    "title": ("jobTitle", "title"),
    "business_telephone_number": ("businessTelephoneNumber", "businessPhone"),
    "home_telephone_number": ("homeTelephoneNumber", "homePhone"),
    "mobile_telephone_number": ("mobileTelephoneNumber", "mobilePhone"),
    "business_fax_number": ("businessFaxNumber", "businessFax"),
    "work_address_street": ("workAddressStreet", "businessAddressStreet"),
    "work_address_city": ("workAddressCity", "businessAddressCity"),
    "work_address_state": ("workAddressState", "businessAddressStateOrProvince"),
    "work_address_postal_code": ("workAddressPostalCode", "businessAddressPostalCode"),
    "work_address_country": ("workAddressCountry", "businessAddressCountry"),
    "work_address": ("workAddress", "businessAddress"),
    "business_home_page": ("businessHomePage", "businessUrl"),
    "email_address": ("email1EmailAddress", "email1"),
}


def _first_str(obj: Any, *names: str) -> str | None:
    """First attribute among *names* holding a non-empty string."""
    for name in names:
        value = getattr(obj, name, None)
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        if isinstance(value, str) and value:
            return value
    return None


def _opt_datetime(obj: Any, name: str) -> datetime | None:
    value = getattr(obj, name, None)
    return value if isinstance(value, datetime) else None


def _recipient_type(value: Any) -> RecipientType | None:
    try:
        return RecipientType(int(value))
    except (TypeError, ValueError):
        return None


def recipients_from_msg(msg: Any) -> list[Recipient]:
    """Map ``msg.recipients``; entries with an unknown role are dropped."""
    recipients: list[Recipient] = []
    for entry in getattr(msg, "recipients", None) or []:
        role = _recipient_type(getattr(entry, "type", None))
        if role is None:
            continue
        recipients.append(
            Recipient(
                name=_first_str(entry, "name"),
                email=_first_str(entry, "email"),
                recipient_type=role,
            )
        )
    return recipients


def attachment_from_msg(att: Any) -> AttachmentRecord:
    """Map one ``extract_msg`` attachment.

    An attachment whose ``data`` is neither bytes, text, nor ``None`` is an
    embedded message and is mapped recursively.
    """
    long_filename = _first_str(att, "longFilename")
    short_filename = _first_str(att, "shortFilename")
    display_name = _first_str(att, "displayName", "name")
    content_id = _first_str(att, "contentId", "cid")

    name = long_filename or short_filename or display_name or "unnamed"
    try:
        data = getattr(att, "data", None)
    except Exception as exc:
        raise SourceReadError(
            f"Cannot read attachment '{name}': {exc}", field="data"
        ) from exc

    if data is not None and not isinstance(data, (bytes, bytearray, str)):
        return AttachmentRecord(
            long_filename=long_filename,
            short_filename=short_filename,
            display_name=display_name,
            content_id=content_id,
            embedded_message=message_record_from_msg(data),
        )

    if isinstance(data, str):
        data = data.encode("utf-8")
    return AttachmentRecord(
        long_filename=long_filename,
        short_filename=short_filename,
        display_name=display_name,
        content_id=content_id,
        content=bytes(data or b""),
    )


def message_record_from_msg(msg: Any) -> MessageRecord:
    """Map an ``extract_msg.Message`` (or look-alike) to a :class:`MessageRecord`."""
    sender_name, sender_email = parseaddr(_first_str(msg, "sender") or "")
    html = getattr(msg, "htmlBody", None)
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")

    return MessageRecord(
        message_class=_first_str(msg, "classType", "messageClass") or "IPM.Note",
        sender_name=_first_str(msg, "senderName") or sender_name or None,
        sender_email=_first_str(msg, "senderEmail") or sender_email or None,
        recipients=recipients_from_msg(msg),
        subject=_first_str(msg, "subject"),
        body=_first_str(msg, "body"),
        body_html=html if isinstance(html, str) and html else None,
        message_delivery_time=_opt_datetime(msg, "receivedTime"),
        client_submit_time=_opt_datetime(msg, "date"),
        modification_time=_opt_datetime(msg, "lastModificationTime"),
        creation_time=_opt_datetime(msg, "creationTime"),
        attachments=[
            attachment_from_msg(att) for att in getattr(msg, "attachments", None) or []
        ],
    )


def contact_record_from_msg(contact: Any) -> ContactRecord:
    """Map an ``extract_msg.Contact`` (or look-alike) to a :class:`ContactRecord`."""
    fields = {
        field: _first_str(contact, *names) for field, names in _CONTACT_FIELDS.items()
    }
    return ContactRecord(
        message_class=_first_str(contact, "classType", "messageClass") or "IPM.Contact",
        **fields,
    )


class MSGSource:
    """Open ``.msg`` files and produce records.

    Attachment bytes are read while the file is open, so records returned
    here are complete snapshots.
    """

    def open_message(self, file_path: str) -> MessageRecord:
        """Read a mail item from *file_path*.

        Raises
        ------
        ImportError
            If ``extract-msg`` is not installed.
        SourceReadError
            If the file cannot be read.
        """
        msg = self._open(file_path)
        try:
            return message_record_from_msg(msg)
        finally:
            msg.close()

    def open_contact(self, file_path: str) -> ContactRecord:
        """Read a contact item from *file_path*."""
        msg = self._open(file_path)
        try:
            return contact_record_from_msg(msg)
        finally:
            msg.close()

    def open(self, file_path: str) -> MessageRecord | ContactRecord:
        """Read *file_path* as a contact or a mail item, by its message class."""
        msg = self._open(file_path)
        try:
            message_class = _first_str(msg, "classType", "messageClass") or ""
            if message_class.startswith("IPM.Contact"):
                return contact_record_from_msg(msg)
            return message_record_from_msg(msg)
        finally:
            msg.close()

    @staticmethod
    def _open(file_path: str) -> Any:
        try:
            import extract_msg  # type: ignore[import-untyped]
        except ImportError:
            raise ImportError(
                "extract-msg is required to process .msg files. "
                "Install it with: pip install extract-msg"
            )

        try:
            return extract_msg.openMsg(file_path)
        except Exception as exc:
            logger.error(
                "pstkit_export | file=%s | code=E_SOURCE_READ_FAILED | detail=%s",
                file_path,
                str(exc),
            )
            raise SourceReadError(f"Cannot open {file_path}: {exc}") from exc
