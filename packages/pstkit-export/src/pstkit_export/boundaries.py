"""Boundary factories satisfying :class:`pstkit_core.protocols.BoundaryFactory`.

Composition asks the factory for a fresh boundary each time it opens a
multipart, passing the embedded-message depth, so nested documents never
reuse an ancestor's boundary.
"""

from __future__ import annotations

import uuid

from pstkit_core.protocols import BoundaryFactory

from pstkit_export.config import ConversionOptions

MIXED = "mixed"
ALTERNATIVE = "alternative"


class RandomBoundaryFactory:
    """A new ``uuid4`` string per request."""

    def make_boundary(self, part: str, depth: int) -> str:
        return str(uuid.uuid4())


class FixedBoundaryFactory:
    """Reproducible boundaries for tests and golden files.

    The top-level document uses the configured strings verbatim; a nested
    document at depth ``n`` uses ``"=<n>_<boundary>"``, so no delimiter is a
    prefix of another.  Parts without a configured boundary fall back to
    *fallback*.
    """

    def __init__(
        self,
        mixed: str | None = None,
        alternative: str | None = None,
        fallback: BoundaryFactory | None = None,
    ) -> None:
        self._fixed = {MIXED: mixed, ALTERNATIVE: alternative}
        self._fallback = fallback or RandomBoundaryFactory()

    def make_boundary(self, part: str, depth: int) -> str:
        fixed = self._fixed.get(part)
        if not fixed:
            return self._fallback.make_boundary(part, depth)
        if depth == 0:
            return fixed
        return f"={depth}_{fixed}"


def boundary_factory_for(options: ConversionOptions) -> BoundaryFactory:
    """Pick the factory implied by *options*."""
    if options.base_boundary or options.alt_boundary:
        return FixedBoundaryFactory(options.base_boundary, options.alt_boundary)
    return RandomBoundaryFactory()
