"""Error codes, structured error model, and exceptions for pstkit-export.

``ErrorCode`` contains all export-specific error/warning codes plus the
shared source codes from the core taxonomy.  ``ConvertError`` extends
``BaseConvertError`` with the narrowed ``code`` type.  ``ConvertException``
is the raisable wrapper used in control flow; ``SourceReadError`` marks
failures of the external record source.
"""

from __future__ import annotations

from enum import Enum

from pstkit_core.errors import BaseConvertError


class ErrorCode(str, Enum):
    """Error codes for pstkit-export.

    Fatal codes use an ``E_`` prefix; warnings use ``W_``.
    Values equal their names for stable metric/alerting strings.
    """

    # Composition errors
    E_EML_COMPOSE_FAILED = "E_EML_COMPOSE_FAILED"
    E_EML_NESTING_TOO_DEEP = "E_EML_NESTING_TOO_DEEP"
    E_VCARD_COMPOSE_FAILED = "E_VCARD_COMPOSE_FAILED"
    E_ITEM_UNSUPPORTED = "E_ITEM_UNSUPPORTED"

    # Source / output errors (reused from core taxonomy)
    E_SOURCE_READ_FAILED = "E_SOURCE_READ_FAILED"
    E_SOURCE_UNAVAILABLE = "E_SOURCE_UNAVAILABLE"
    E_OUTPUT_WRITE_FAILED = "E_OUTPUT_WRITE_FAILED"

    # Warnings (non-fatal)
    W_EML_NO_TO_RECIPIENTS = "W_EML_NO_TO_RECIPIENTS"
    W_EML_NO_BODY = "W_EML_NO_BODY"
    W_HEADER_CONTROL_CHARS = "W_HEADER_CONTROL_CHARS"
    W_ATTACHMENT_UNNAMED = "W_ATTACHMENT_UNNAMED"


class ConvertError(BaseConvertError):
    """Structured error for the export pipeline.

    Narrows the ``code`` field to ``ErrorCode`` for type safety while
    remaining serialisation-compatible with the base class.
    """

    code: ErrorCode  # type: ignore[assignment]


class ConvertException(Exception):
    """Raisable exception wrapping a :class:`ConvertError` data model.

    Carries the structured error as the ``.error`` attribute.  Composition
    entry points raise exactly this type whatever internal step failed, with
    the original exception chained as ``__cause__``.
    """

    def __init__(self, **kwargs: object) -> None:
        self.error = ConvertError(**kwargs)  # type: ignore[arg-type]
        super().__init__(self.error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def stage(self) -> str | None:
        return self.error.stage

    @property
    def recoverable(self) -> bool:
        return self.error.recoverable


class SourceReadError(Exception):
    """The external record source could not supply a field.

    Propagates through composition unchanged.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
