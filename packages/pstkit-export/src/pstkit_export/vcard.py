"""vCard 2.1 composition for contact records.

:func:`convert_vlines` turns ``(tag, value)`` pairs into ``TAG:VALUE``
lines joined by a bare ``\\n``.  Values containing TAB, CR, or LF are
quoted-printable escaped and the tag gains ``;ENCODING=QUOTED-PRINTABLE``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import Union

from pstkit_export.errors import ConvertException, ErrorCode
from pstkit_export.models import ContactRecord

logger = logging.getLogger("pstkit_export")

VCell = Union[str, Sequence[Union[str, None]], None]
VLine = tuple[Union[str, Sequence[str]], VCell]

_NEEDS_QP = re.compile(r"[\t\r\n]")
_QP_ESCAPES = {"\t": "=09", "\r": "=0D", "\n": "=0A"}


def _to_text(cell: str | Sequence[str | None]) -> str:
    if isinstance(cell, str):
        return cell
    return ";".join(part or "" for part in cell)


def _is_absent(cell: VCell) -> bool:
    if cell is None:
        return True
    if isinstance(cell, str):
        return cell == ""
    return not any(cell)


def _escape(text: str) -> tuple[str, str]:
    """Return ``(extra_tag_params, escaped_text)``."""
    if not _NEEDS_QP.search(text):
        return "", text
    escaped = _NEEDS_QP.sub(lambda m: _QP_ESCAPES[m.group(0)], text)
    return ";ENCODING=QUOTED-PRINTABLE", escaped


def convert_vlines(vlines: Sequence[VLine]) -> str:
    """Render *vlines*, skipping pairs whose value is absent."""
    lines: list[str] = []
    for tag, value in vlines:
        if _is_absent(value):
            continue
        more, text = _escape(_to_text(value))
        lines.append(f"{_to_text(tag)}{more}:{text}")
    return "\n".join(lines)


# (tag, accessor) in emission order, between BEGIN/VERSION and END.
VCARD_PROPERTIES: list[tuple[tuple[str, ...], Callable[[ContactRecord], VCell]]] = [
    (
        ("N",),
        lambda c: [
            c.surname,
            c.given_name,
            c.middle_name,
            c.display_name_prefix,
            c.generation,
        ],
    ),
    (("FN",), lambda c: c.display_name),
    (("X-MS-N-YOMI",), lambda c: [c.yomi_last_name, c.yomi_first_name]),
    (("ORG",), lambda c: [c.company_name, c.department_name]),
    (("X-MS-ORG-YOMI",), lambda c: c.yomi_company_name),
    (("TITLE",), lambda c: c.title),
    (("TEL", "WORK", "VOICE"), lambda c: c.business_telephone_number),
    (("TEL", "HOME", "VOICE"), lambda c: c.home_telephone_number),
    (("TEL", "CELL", "VOICE"), lambda c: c.mobile_telephone_number),
    (("TEL", "WORK", "FAX"), lambda c: c.business_fax_number),
    (
        ("ADR", "WORK", "PREF"),
        lambda c: [
            c.work_address_street,
            c.work_address_city,
            c.work_address_state,
            c.work_address_postal_code,
            c.work_address_country,
        ],
    ),
    (("LABEL", "WORK", "PREF"), lambda c: c.work_address),
    (("URL", "WORK"), lambda c: c.business_home_page),
    (("EMAIL", "PREF", "INTERNET"), lambda c: c.email_address),
]


class VCardComposer:
    """Serialise a :class:`ContactRecord` as a vCard 2.1 document."""

    def compose(self, contact: ContactRecord) -> str:
        """Return the vCard text.

        Raises
        ------
        ConvertException
            ``E_VCARD_COMPOSE_FAILED`` wrapping the failing step.
        """
        try:
            vlines: list[VLine] = [(("BEGIN",), "VCARD"), (("VERSION",), "2.1")]
            for tag, accessor in VCARD_PROPERTIES:
                vlines.append((tag, accessor(contact)))
            vlines.append((("END",), "VCARD"))
            text = convert_vlines(vlines)
        except Exception as exc:
            raise ConvertException(
                code=ErrorCode.E_VCARD_COMPOSE_FAILED,
                message=f"vCard composition failed: {exc}",
                stage="compose",
            ) from exc
        logger.debug("pstkit_export | kind=vcard | lines=%d", text.count("\n") + 1)
        return text


def compose_vcard(contact: ContactRecord) -> str:
    return VCardComposer().compose(contact)
