"""Configuration model for pstkit-export conversions.

Provides ``ConversionOptions`` with all tunable parameters and sensible
defaults.  Supports loading overrides from YAML or JSON files via the
``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel, ConfigDict, Field

# Composition recurses about three frames per level, so the deepest allowed
# document stays inside the default interpreter recursion limit.
MAX_NESTING_DEPTH = 200


class ConversionOptions(BaseModel):
    """All tunable parameters with sensible defaults."""

    model_config = ConfigDict(extra="forbid")

    # --- Identity ---
    converter_version: str = "pstkit_export:1.0.0"

    # --- Reproducible output ---
    base_boundary: str | None = None
    alt_boundary: str | None = None
    message_id: str | None = None

    # --- Embedded messages ---
    allow_nested_eml: bool = False
    max_nesting_depth: int = Field(default=64, ge=0, le=MAX_NESTING_DEPTH)

    # --- Wire format ---
    base64_line_bytes: int = Field(default=54, ge=3, multiple_of=3)
    fallback_recipient: str = "undisclosed-recipients"
    sanitize_headers: bool = True

    # --- Logging / PII Safety ---
    log_sample_data: bool = False

    @classmethod
    def from_file(cls, path: str) -> ConversionOptions:
        """Load options from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Keys present in the file override the
        corresponding defaults; keys not present retain their defaults.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install pyyaml"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
