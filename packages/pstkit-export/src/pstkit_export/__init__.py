"""pstkit-export -- EML and vCard composition for mail-store records.

Re-exports all public types: router, options, models, errors, composers,
writer, encoders, scanner, and record sources.
"""

from pstkit_export.boundaries import FixedBoundaryFactory, RandomBoundaryFactory
from pstkit_export.composer import EmlComposer, compose_eml_bytes, compose_eml_text
from pstkit_export.config import ConversionOptions
from pstkit_export.errors import ConvertError, ConvertException, ErrorCode, SourceReadError
from pstkit_export.headers import encode_if_needed, encode_word
from pstkit_export.models import (
    Address,
    AttachmentRecord,
    ContactRecord,
    ExportKind,
    ExportResult,
    MessageRecord,
    Recipient,
    RecipientType,
)
from pstkit_export.router import ExportRouter, create_default_router
from pstkit_export.security import RecordScanner
from pstkit_export.sources import MSGSource
from pstkit_export.transfer import Base64TransferEncoding, base64_lines
from pstkit_export.vcard import VCardComposer, compose_vcard, convert_vlines
from pstkit_export.writer import EmlWriter

MIME_TYPES = {".eml": "message/rfc822", ".vcf": "text/x-vcard"}

__all__ = [
    # Router
    "ExportRouter",
    "create_default_router",
    # Config
    "ConversionOptions",
    # Errors
    "ErrorCode",
    "ConvertError",
    "ConvertException",
    "SourceReadError",
    # Models
    "Address",
    "Recipient",
    "RecipientType",
    "AttachmentRecord",
    "MessageRecord",
    "ContactRecord",
    "ExportKind",
    "ExportResult",
    # Composers
    "EmlComposer",
    "compose_eml_text",
    "compose_eml_bytes",
    "VCardComposer",
    "compose_vcard",
    # Writer / encoders
    "EmlWriter",
    "Base64TransferEncoding",
    "base64_lines",
    "encode_word",
    "encode_if_needed",
    "convert_vlines",
    "FixedBoundaryFactory",
    "RandomBoundaryFactory",
    # Security
    "RecordScanner",
    # Sources
    "MSGSource",
    # Constants
    "MIME_TYPES",
]
