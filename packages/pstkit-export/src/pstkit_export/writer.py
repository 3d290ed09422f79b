"""Append-only RFC 822 / MIME text emitter.

:class:`EmlWriter` knows *how* to format headers, boundaries, and body
chunks; which parts to emit is decided by
:class:`~pstkit_export.composer.EmlComposer`.  Every line it writes ends in
CRLF.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from email.utils import format_datetime

from pstkit_export.headers import (
    encode_if_needed,
    escape_quoted,
    is_safe,
    sanitize_header_value,
)
from pstkit_export.models import Address
from pstkit_export.transfer import CRLF


class EmlWriter:
    """Stateful emitter bound to an output sink.

    Parameters
    ----------
    emit:
        Called once per emitted chunk, in order.
    encode_word:
        Header-value encoder applied to free text.
    sanitize:
        Collapse control characters in every header value before writing.
    """

    def __init__(
        self,
        emit: Callable[[str], None],
        encode_word: Callable[[str], str] = encode_if_needed,
        sanitize: bool = True,
    ) -> None:
        self._emit = emit
        self._encode_word = encode_word
        self._sanitize = sanitize

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    def write_header(self, name: str, value: str) -> EmlWriter:
        if self._sanitize:
            value = sanitize_header_value(value)
        self._emit(f"{name}: {value}{CRLF}")
        return self

    def from_(self, address: Address) -> EmlWriter:
        return self.write_header("From", self.format_person(address))

    def to(self, addresses: list[Address]) -> EmlWriter:
        return self._write_persons("To", addresses)

    def cc(self, addresses: list[Address]) -> EmlWriter:
        return self._write_persons("Cc", addresses)

    def bcc(self, addresses: list[Address]) -> EmlWriter:
        return self._write_persons("Bcc", addresses)

    def subject(self, subject: str) -> EmlWriter:
        return self.write_header("Subject", self._encode_word(subject))

    def date(self, value: datetime) -> EmlWriter:
        """Write an RFC 5322 date; naive datetimes are taken as UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return self.write_header("Date", format_datetime(value))

    def message_id(self, message_id: str | None) -> EmlWriter:
        if not message_id:
            return self
        return self.write_header("Message-ID", _angle(message_id))

    def mime_version_1(self) -> EmlWriter:
        return self.write_header("MIME-Version", "1.0")

    def content_type(self, value: str) -> EmlWriter:
        return self.write_header("Content-Type", value)

    def content_type_multipart_mixed(self, boundary: str) -> EmlWriter:
        return self.content_type(f'multipart/mixed; boundary="{boundary}"')

    def content_transfer_encoding(self, name: str) -> EmlWriter:
        return self.write_header("Content-Transfer-Encoding", name)

    def content_id(self, cid: str) -> EmlWriter:
        return self.write_header("Content-ID", _angle(cid))

    # ------------------------------------------------------------------
    # Structure and bodies
    # ------------------------------------------------------------------

    def begin_boundary(self, boundary: str) -> EmlWriter:
        self._emit(f"--{boundary}{CRLF}")
        return self

    def end_boundary(self, boundary: str) -> EmlWriter:
        self._emit(f"--{boundary}--{CRLF}")
        return self

    def new_line(self) -> EmlWriter:
        self._emit(CRLF)
        return self

    def write_content(self, chunks: Iterable[str]) -> None:
        for chunk in chunks:
            self._emit(chunk)

    def write_chunk(self, chunk: str) -> None:
        self._emit(chunk)

    def write_chunks(self, chunks: list[str]) -> None:
        for chunk in chunks:
            self._emit(chunk)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def format_person(self, person: Address) -> str:
        """Render one address as header text.

        ``"Name" <email>`` for safe names, ``=?utf-8?B?...?= <email>`` when
        the name needs encoding, ``<email>`` or the encoded name when only
        one half is present.
        """
        name, email = person.name, person.email
        if name and email:
            if is_safe(name):
                return f'"{escape_quoted(name)}" <{email}>'
            return f"{self._encode_word(name)} <{email}>"
        if name:
            return self._encode_word(name)
        if email:
            return f"<{email}>"
        return ""

    def _write_persons(self, name: str, persons: list[Address]) -> EmlWriter:
        if not persons:
            return self
        return self.write_header(name, ", ".join(self.format_person(p) for p in persons))


def _angle(value: str) -> str:
    return f"<{value.strip().removeprefix('<').removesuffix('>')}>"