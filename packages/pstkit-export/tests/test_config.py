"""Tests for pstkit_export.config."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from pstkit_export.config import MAX_NESTING_DEPTH, ConversionOptions


class TestDefaults:
    def test_default_values(self):
        options = ConversionOptions()
        assert options.converter_version == "pstkit_export:1.0.0"
        assert options.base_boundary is None
        assert options.alt_boundary is None
        assert options.message_id is None
        assert options.allow_nested_eml is False
        assert options.max_nesting_depth == 64
        assert options.base64_line_bytes == 54
        assert options.fallback_recipient == "undisclosed-recipients"
        assert options.sanitize_headers is True
        assert options.log_sample_data is False

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            ConversionOptions(unknown_option=True)

    @pytest.mark.parametrize("value", [0, -3, 55])
    def test_line_bytes_validated(self, value):
        with pytest.raises(ValidationError):
            ConversionOptions(base64_line_bytes=value)

    def test_negative_depth_rejected(self):
        with pytest.raises(ValidationError):
            ConversionOptions(max_nesting_depth=-1)

    def test_depth_upper_bound(self):
        assert ConversionOptions(max_nesting_depth=MAX_NESTING_DEPTH).max_nesting_depth == MAX_NESTING_DEPTH
        with pytest.raises(ValidationError):
            ConversionOptions(max_nesting_depth=MAX_NESTING_DEPTH + 1)


class TestFromFile:
    def test_json(self, tmp_path):
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"allow_nested_eml": True, "base_boundary": "B1"}))
        options = ConversionOptions.from_file(str(path))
        assert options.allow_nested_eml is True
        assert options.base_boundary == "B1"
        assert options.max_nesting_depth == 64

    def test_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "options.yaml"
        path.write_text("max_nesting_depth: 8\nfallback_recipient: nobody\n")
        options = ConversionOptions.from_file(str(path))
        assert options.max_nesting_depth == 8
        assert options.fallback_recipient == "nobody"

    def test_empty_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        path = tmp_path / "options.yml"
        path.write_text("")
        assert ConversionOptions.from_file(str(path)) == ConversionOptions()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConversionOptions.from_file(str(tmp_path / "nope.json"))

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "options.toml"
        path.write_text("")
        with pytest.raises(ValueError, match="Unsupported config file extension"):
            ConversionOptions.from_file(str(path))

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"base64_line_bytes": 10}))
        with pytest.raises(ValidationError):
            ConversionOptions.from_file(str(path))
