"""Shared error codes and base error model for the pstkit framework.

``CoreErrorCode`` contains the codes common to every pstkit package.
``BaseConvertError`` is a Pydantic model that each package extends with its
own narrowed ``code`` type (e.g. ``pstkit_export.errors.ErrorCode``).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class CoreErrorCode(str, Enum):
    """Error codes shared across all pstkit packages.

    Each package maintains its own *complete* ``ErrorCode`` enum that includes
    both the shared codes here and package-specific codes.  Values equal their
    names so they are stable strings suitable for metrics and alerting.
    """

    # Source errors
    E_SOURCE_READ_FAILED = "E_SOURCE_READ_FAILED"
    E_SOURCE_UNAVAILABLE = "E_SOURCE_UNAVAILABLE"

    # Output errors
    E_OUTPUT_WRITE_FAILED = "E_OUTPUT_WRITE_FAILED"


class BaseConvertError(BaseModel):
    """Base structured error with code, message, and context.

    The ``code`` field is typed as ``str`` so it accepts any package-specific
    ``ErrorCode`` enum member.
    """

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False
