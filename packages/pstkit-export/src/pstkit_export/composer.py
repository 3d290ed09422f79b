"""EML composition -- serialises a :class:`MessageRecord` as RFC 822 / MIME.

Document layout::

    headers (From, To, Cc, Bcc, Subject, Date, Message-ID, Content-Type, MIME-Version)
    --base
        multipart/alternative (text/html, then text/plain; base64)
    --base
        attachment (application/octet-stream; base64) or message/rfc822
    ...
    --base--

Embedded messages are composed depth-first into a self-contained document
before their parent resumes.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone

from pstkit_core.protocols import BoundaryFactory, Clock

from pstkit_export.boundaries import ALTERNATIVE, MIXED, boundary_factory_for
from pstkit_export.config import ConversionOptions
from pstkit_export.errors import ConvertException, ErrorCode, SourceReadError
from pstkit_export.headers import encode_if_needed, encode_param_value
from pstkit_export.models import Address, AttachmentRecord, MessageRecord, RecipientType
from pstkit_export.transfer import CRLF, Base64TransferEncoding
from pstkit_export.writer import EmlWriter

logger = logging.getLogger("pstkit_export")

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class UtcClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class RefinedAttachment:
    """An attachment after filename resolution and nested composition.

    Exactly one of ``content`` and ``nested_text`` is set.
    """

    filename: str
    content_id: str | None = None
    content: bytes | None = None
    nested_text: str | None = None


def change_file_extension(filename: str, new_ext: str) -> str:
    """Replace the extension of *filename* (directory part kept)."""
    root, _ = os.path.splitext(filename)
    return root + new_ext


class EmlComposer:
    """Compose one message, and its embedded messages, into EML text.

    Parameters
    ----------
    options:
        Conversion options. Uses defaults when *None*.
    boundaries:
        Boundary source; derived from *options* when *None*.
    clock:
        Fallback ``Date`` source for records without any timestamp.
    """

    def __init__(
        self,
        options: ConversionOptions | None = None,
        boundaries: BoundaryFactory | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._options = options or ConversionOptions()
        self._boundaries = boundaries or boundary_factory_for(self._options)
        self._clock = clock or UtcClock()
        self._base64 = Base64TransferEncoding(self._options.base64_line_bytes)

    @property
    def options(self) -> ConversionOptions:
        return self._options

    def compose_text(self, message: MessageRecord) -> str:
        """Return the complete EML document as text.

        Raises
        ------
        ConvertException
            ``E_EML_COMPOSE_FAILED`` wrapping whatever internal step failed,
            or ``E_EML_NESTING_TOO_DEEP``.
        SourceReadError
            Unchanged, when the record source could not supply a field.
        """
        try:
            return self._compose(message, 0)
        except (ConvertException, SourceReadError):
            raise
        except RecursionError as exc:
            raise ConvertException(
                code=ErrorCode.E_EML_NESTING_TOO_DEEP,
                message="Embedded messages nest deeper than the interpreter stack allows",
                stage="compose",
            ) from exc
        except Exception as exc:
            raise ConvertException(
                code=ErrorCode.E_EML_COMPOSE_FAILED,
                message=f"EML composition failed: {exc}",
                stage="compose",
            ) from exc

    def compose_bytes(self, message: MessageRecord) -> bytes:
        """Return the complete EML document as UTF-8 bytes."""
        return self.compose_text(message).encode("utf-8")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _compose(self, message: MessageRecord, depth: int) -> str:
        options = self._options
        if depth > options.max_nesting_depth:
            raise ConvertException(
                code=ErrorCode.E_EML_NESTING_TOO_DEEP,
                message=(
                    f"Embedded message depth {depth} exceeds limit of "
                    f"{options.max_nesting_depth}"
                ),
                stage="compose",
            )

        # 1. Recipients, partitioned by role
        to = message.recipients_of(RecipientType.TO) or [
            Address(name=options.fallback_recipient)
        ]
        cc = message.recipients_of(RecipientType.CC)
        bcc = message.recipients_of(RecipientType.BCC)

        # 2. Attachments (embedded messages are composed here, depth-first)
        attachments = [self._refine(att, depth) for att in message.attachments]

        # 3. Boundaries
        base_boundary = self._boundaries.make_boundary(MIXED, depth)
        alt_boundary = self._boundaries.make_boundary(ALTERNATIVE, depth)

        chunks: list[str] = []
        writer = EmlWriter(chunks.append, encode_if_needed, options.sanitize_headers)

        # 4. Headers
        (
            writer.from_(message.sender)
            .to(to)
            .cc(cc)
            .bcc(bcc)
            .subject(message.subject or "")
            .date(message.timestamp() or self._clock.now())
            .message_id(message.message_id or options.message_id)
            .content_type_multipart_mixed(base_boundary)
            .mime_version_1()
            .new_line()
        )

        # 5. Bodies
        if message.body_html or message.body:
            writer.begin_boundary(base_boundary)
            writer.content_type(
                f'multipart/alternative; boundary="{alt_boundary}"'
            ).new_line()
            if message.body_html:
                self._write_text_part(writer, alt_boundary, "html", message.body_html)
            if message.body:
                self._write_text_part(writer, alt_boundary, "plain", message.body)
            writer.end_boundary(alt_boundary)

        # 6. Attachment parts
        for attachment in attachments:
            writer.begin_boundary(base_boundary)
            if attachment.nested_text is not None:
                writer.content_type("message/rfc822")
                writer.content_transfer_encoding("7bit")
                if attachment.content_id:
                    writer.content_id(attachment.content_id)
                writer.new_line()
                writer.write_content(_crlf_lines(attachment.nested_text))
            else:
                name = encode_param_value(attachment.filename)
                writer.content_type(f'application/octet-stream; name="{name}"')
                writer.write_header(
                    "Content-Disposition", f'attachment; filename="{name}"'
                )
                writer.content_transfer_encoding(self._base64.name)
                if attachment.content_id:
                    writer.content_id(attachment.content_id)
                writer.new_line()
                writer.write_content(self._base64.apply_bytes(attachment.content or b""))

        # 7. Close
        writer.end_boundary(base_boundary)

        logger.debug(
            "pstkit_export | kind=eml | depth=%d | attachments=%d | boundary=%s",
            depth,
            len(attachments),
            base_boundary,
        )
        return "".join(chunks)

    def _refine(self, attachment: AttachmentRecord, depth: int) -> RefinedAttachment:
        embedded = attachment.embedded_message
        if embedded is None:
            return RefinedAttachment(
                filename=attachment.filename,
                content_id=attachment.content_id,
                content=attachment.read_content(),
            )
        if self._options.allow_nested_eml:
            return RefinedAttachment(
                filename=attachment.filename,
                content_id=attachment.content_id,
                nested_text=self._compose(embedded, depth + 1),
            )
        return RefinedAttachment(
            filename=change_file_extension(attachment.filename, ".eml"),
            content_id=attachment.content_id,
            content=self._compose(embedded, depth + 1).encode("utf-8"),
        )

    def _write_text_part(
        self, writer: EmlWriter, boundary: str, subtype: str, text: str
    ) -> None:
        writer.begin_boundary(boundary)
        writer.content_type(f"text/{subtype}; charset=utf-8")
        writer.content_transfer_encoding(self._base64.name)
        writer.new_line()
        writer.write_content(self._base64.apply_text(text))


def _crlf_lines(text: str) -> Iterator[str]:
    """Yield each line of *text* terminated by CRLF."""
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line + CRLF


def compose_eml_text(
    message: MessageRecord, options: ConversionOptions | None = None
) -> str:
    """Compose *message* with a fresh :class:`EmlComposer`."""
    return EmlComposer(options).compose_text(message)


def compose_eml_bytes(
    message: MessageRecord, options: ConversionOptions | None = None
) -> bytes:
    """Compose *message* with a fresh :class:`EmlComposer`, as bytes."""
    return EmlComposer(options).compose_bytes(message)
