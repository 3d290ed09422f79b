"""pstkit-core -- Shared primitives for the pstkit framework.

Re-exports all public types: errors and protocols.
"""

from pstkit_core.errors import BaseConvertError, CoreErrorCode
from pstkit_core.protocols import BoundaryFactory, Clock

__all__ = [
    # Errors
    "CoreErrorCode",
    "BaseConvertError",
    # Protocols
    "BoundaryFactory",
    "Clock",
]
