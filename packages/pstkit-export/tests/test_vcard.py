"""Tests for pstkit_export.vcard."""

from __future__ import annotations

import pytest

from pstkit_export.errors import ConvertException, ErrorCode
from pstkit_export.models import ContactRecord
from pstkit_export.vcard import VCardComposer, compose_vcard, convert_vlines


class TestConvertVlines:
    def test_plain_pairs(self):
        assert convert_vlines([("BEGIN", "VCARD"), ("FN", "Alice")]) == "BEGIN:VCARD\nFN:Alice"

    def test_tag_components_joined(self):
        assert convert_vlines([(("TEL", "WORK", "VOICE"), "123")]) == "TEL;WORK;VOICE:123"

    def test_value_components_joined(self):
        assert convert_vlines([("N", ["Smith", "Alice", None, "", None])]) == "N:Smith;Alice;;;"

    @pytest.mark.parametrize("value", [None, "", [], [None, None], ["", None]])
    def test_absent_values_skipped(self, value):
        assert convert_vlines([("A", "1"), ("X", value), ("B", "2")]) == "A:1\nB:2"

    def test_quoted_printable(self):
        line = convert_vlines([("LABEL", "a\tb\r\nc")])
        assert line == "LABEL;ENCODING=QUOTED-PRINTABLE:a=09b=0D=0Ac"

    def test_equals_sign_not_escaped(self):
        assert convert_vlines([("NOTE", "a=b")]) == "NOTE:a=b"

    def test_non_ascii_kept(self):
        assert convert_vlines([("FN", "山田 太郎")]) == "FN:山田 太郎"

    def test_empty_input(self):
        assert convert_vlines([]) == ""


class TestVCardComposer:
    def setup_method(self):
        self.composer = VCardComposer()

    def test_display_name_only(self):
        text = self.composer.compose(ContactRecord(display_name="Alice Smith"))
        assert text == "BEGIN:VCARD\nVERSION:2.1\nFN:Alice Smith\nEND:VCARD"

    def test_empty_contact(self):
        assert self.composer.compose(ContactRecord()) == "BEGIN:VCARD\nVERSION:2.1\nEND:VCARD"

    def test_full_contact(self, sample_contact):
        lines = self.composer.compose(sample_contact).split("\n")
        assert lines == [
            "BEGIN:VCARD",
            "VERSION:2.1",
            "N:Smith;Alice;;;",
            "FN:Alice Smith",
            "ORG:Acme;R&D",
            "TITLE:Engineer",
            "TEL;WORK;VOICE:+1 555 0100",
            "TEL;CELL;VOICE:+1 555 0199",
            "ADR;WORK;PREF:1 Main St;Springfield;;;USA",
            "LABEL;WORK;PREF;ENCODING=QUOTED-PRINTABLE:1 Main St=0D=0ASpringfield",
            "URL;WORK:https://acme.example.com",
            "EMAIL;PREF;INTERNET:alice@acme.example.com",
            "END:VCARD",
        ]

    def test_no_crlf(self, sample_contact):
        assert "\r" not in self.composer.compose(sample_contact)

    def test_yomi_and_fax(self):
        contact = ContactRecord(
            yomi_last_name="ヤマダ",
            yomi_company_name="アクメ",
            home_telephone_number="1",
            business_fax_number="2",
        )
        lines = self.composer.compose(contact).split("\n")
        assert lines[2:-1] == [
            "X-MS-N-YOMI:ヤマダ;",
            "X-MS-ORG-YOMI:アクメ",
            "TEL;HOME;VOICE:1",
            "TEL;WORK;FAX:2",
        ]

    def test_failure_wrapped(self):
        class Broken:
            def __getattr__(self, name):
                raise RuntimeError("store closed")

        with pytest.raises(ConvertException) as exc_info:
            self.composer.compose(Broken())  # type: ignore[arg-type]
        assert exc_info.value.code == ErrorCode.E_VCARD_COMPOSE_FAILED
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_module_function(self):
        assert compose_vcard(ContactRecord(title="CTO")) == (
            "BEGIN:VCARD\nVERSION:2.1\nTITLE:CTO\nEND:VCARD"
        )
