"""Base64 content-transfer-encoding with RFC 2045 line wrapping.

:func:`base64_lines` lazily yields one output line per chunk.  With the
default of 54 source bytes per line every full line is 72 base64 characters
followed by CRLF.  A ``line_bytes`` of ``0`` switches to no-wrap mode: the
whole input becomes one chunk without a line break, which is what encoded
header words need.
"""

from __future__ import annotations

import base64
from collections.abc import Iterator

CRLF = "\r\n"
DEFAULT_LINE_BYTES = 54


def base64_lines(data: bytes, line_bytes: int = DEFAULT_LINE_BYTES) -> Iterator[str]:
    """Yield *data* as base64 text, one CRLF-terminated line at a time.

    Empty input yields nothing.  ``line_bytes`` should be a multiple of 3 so
    that padding only ever appears on the final line.
    """
    if line_bytes < 0:
        raise ValueError(f"line_bytes must be >= 0, got {line_bytes}")
    if not data:
        return
    if line_bytes == 0:
        yield base64.b64encode(data).decode("ascii")
        return
    view = memoryview(data)
    for start in range(0, len(view), line_bytes):
        chunk = view[start:start + line_bytes]
        yield base64.b64encode(chunk).decode("ascii") + CRLF


class Base64TransferEncoding:
    """The ``base64`` Content-Transfer-Encoding."""

    name = "base64"

    def __init__(self, line_bytes: int = DEFAULT_LINE_BYTES) -> None:
        self.line_bytes = line_bytes

    def apply_bytes(self, data: bytes) -> Iterator[str]:
        return base64_lines(data, self.line_bytes)

    def apply_text(self, text: str) -> Iterator[str]:
        """Encode *text* as UTF-8 first."""
        return base64_lines(text.encode("utf-8"), self.line_bytes)
