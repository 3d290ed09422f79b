"""Runtime-checkable protocols for pstkit collaborators.

Implementations satisfy these structurally; no inheritance is required.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class BoundaryFactory(Protocol):
    """Supplies MIME boundary strings to a composition.

    ``part`` names the multipart being opened (``"mixed"`` or
    ``"alternative"``) and ``depth`` is the embedded-message nesting level,
    ``0`` for the top-level document.  A factory must never return the same
    string for two different depths of one document.
    """

    def make_boundary(self, part: str, depth: int) -> str: ...


@runtime_checkable
class Clock(Protocol):
    """Source of the fallback ``Date`` when a record carries no timestamp."""

    def now(self) -> datetime: ...
