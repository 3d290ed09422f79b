"""RFC 2047 encoded-word escaping for header values.

A value built only from letters, digits, and the punctuation
`` !#$%&@:-/\\_`` is written as-is.  Anything else becomes a single
``=?utf-8?B?...?=`` word.  Long values are not split across several encoded
words; RFC 2047 discourages but allows over-long words.
"""

from __future__ import annotations

import re

from pstkit_export.transfer import base64_lines

_SAFE_VALUE = re.compile(r"[ !#$%&@:\-/\\_A-Za-z0-9]*")
_CONTROL_RUN = re.compile(r"[\x00-\x1f\x7f]+")
_PRINTABLE_ASCII = re.compile(r"[\x20-\x7e]*")


def encode_word(value: str) -> str:
    """Wrap *value* as one base64 encoded word, unconditionally."""
    encoded = "".join(base64_lines(value.encode("utf-8"), 0))
    return f"=?utf-8?B?{encoded}?="


def is_safe(value: str) -> bool:
    return _SAFE_VALUE.fullmatch(value) is not None


def encode_if_needed(value: str) -> str:
    """Return *value* unchanged when it is safe 7-bit text, else encode it."""
    if is_safe(value):
        return value
    return encode_word(value)


def has_control_chars(value: str | None) -> bool:
    return bool(value) and _CONTROL_RUN.search(value) is not None


def sanitize_header_value(value: str) -> str:
    """Collapse each run of control characters (CR and LF included) to a space.

    Header lines written after this can never be split or terminated early by
    text that came from a record.
    """
    return _CONTROL_RUN.sub(" ", value)


def escape_quoted(value: str) -> str:
    """Escape backslash and double quote for use inside a quoted-string."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def encode_param_value(value: str) -> str:
    """Prepare *value* for a quoted MIME parameter such as ``filename``.

    Printable ASCII is kept readable (quoted-string escaped); anything else
    becomes an encoded word.
    """
    if _PRINTABLE_ASCII.fullmatch(value):
        return escape_quoted(value)
    return encode_word(value)
