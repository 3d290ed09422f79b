"""Pre-flight scanner for records about to be exported.

Checks embedded-message depth, control characters in header-bound text,
missing To recipients, missing bodies, and unnamed attachments before any
composition begins.
"""

from __future__ import annotations

import logging

from pstkit_export.config import ConversionOptions
from pstkit_export.errors import ConvertError, ErrorCode
from pstkit_export.headers import has_control_chars
from pstkit_export.models import ContactRecord, MessageRecord, RecipientType

logger = logging.getLogger("pstkit_export")


class RecordScanner:
    """Run pre-flight checks on a message or contact record.

    Returns a list of errors/warnings.  Fatal errors (``E_*`` codes)
    mean the record should not be composed.
    """

    def __init__(self, options: ConversionOptions) -> None:
        self.options = options

    def scan(self, record: MessageRecord | ContactRecord) -> list[ConvertError]:
        """Run all pre-flight checks.

        Returns
        -------
        list[ConvertError]
            A list of errors/warnings.  Fatal errors have codes starting
            with ``E_``.
        """
        if isinstance(record, ContactRecord):
            return []

        errors: list[ConvertError] = []
        limit = self.options.max_nesting_depth

        # Walk the embedded-message tree with an explicit stack.
        stack: list[tuple[MessageRecord, int, str]] = [(record, 0, "message")]
        while stack:
            message, depth, path = stack.pop()

            # 1. Depth limit
            if depth > limit:
                errors.append(
                    ConvertError(
                        code=ErrorCode.E_EML_NESTING_TOO_DEEP,
                        message=f"Embedded message at {path} exceeds depth limit of {limit}",
                        stage="scan",
                    )
                )
                return errors

            # 2. Header-bound text
            for field in _control_char_fields(message):
                errors.append(
                    ConvertError(
                        code=ErrorCode.W_HEADER_CONTROL_CHARS,
                        message=f"Control characters in {path}.{field}",
                        stage="scan",
                        recoverable=True,
                    )
                )

            # 3. To fallback
            if not message.recipients_of(RecipientType.TO):
                errors.append(
                    ConvertError(
                        code=ErrorCode.W_EML_NO_TO_RECIPIENTS,
                        message=(
                            f"No To recipients in {path}; using "
                            f"'{self.options.fallback_recipient}'"
                        ),
                        stage="scan",
                        recoverable=True,
                    )
                )

            # 4. Bodies
            if not (message.body or message.body_html):
                errors.append(
                    ConvertError(
                        code=ErrorCode.W_EML_NO_BODY,
                        message=f"No plain or HTML body in {path}",
                        stage="scan",
                        recoverable=True,
                    )
                )

            # 5. Attachments
            for index, attachment in enumerate(message.attachments):
                if attachment.is_unnamed:
                    errors.append(
                        ConvertError(
                            code=ErrorCode.W_ATTACHMENT_UNNAMED,
                            message=f"Attachment {path}.attachments[{index}] has no filename",
                            stage="scan",
                            recoverable=True,
                        )
                    )
                if attachment.embedded_message is not None:
                    stack.append(
                        (
                            attachment.embedded_message,
                            depth + 1,
                            f"{path}.attachments[{index}]",
                        )
                    )

        return errors


def _control_char_fields(message: MessageRecord) -> list[str]:
    fields: list[str] = []
    for name in ("sender_name", "sender_email", "subject", "message_id"):
        if has_control_chars(getattr(message, name)):
            fields.append(name)
    for index, recipient in enumerate(message.recipients):
        if has_control_chars(recipient.name) or has_control_chars(recipient.email):
            fields.append(f"recipients[{index}]")
    for index, attachment in enumerate(message.attachments):
        if has_control_chars(attachment.content_id):
            fields.append(f"attachments[{index}].content_id")
    return fields
