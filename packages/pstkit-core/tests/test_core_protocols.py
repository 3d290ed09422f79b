"""Tests for pstkit_core.protocols -- runtime-checkable protocol definitions."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pstkit_core.protocols import BoundaryFactory, Clock


class TestRuntimeCheckable:
    @pytest.mark.parametrize("protocol", [BoundaryFactory, Clock], ids=["Boundary", "Clock"])
    def test_is_runtime_checkable(self, protocol):
        """Protocol has _is_runtime_protocol attribute set by decorator."""
        assert getattr(protocol, "_is_runtime_protocol", False) is True


# -- Conforming mock classes (structural subtyping, NO inheritance) --

class _FakeBoundaries:
    def make_boundary(self, part, depth): return f"{part}-{depth}"

class _FakeClock:
    def now(self): return datetime(2026, 1, 1, tzinfo=timezone.utc)

class _Empty:
    pass


class TestStructuralSubtyping:
    def test_boundary_factory_conforms(self):
        assert isinstance(_FakeBoundaries(), BoundaryFactory)

    def test_clock_conforms(self):
        assert isinstance(_FakeClock(), Clock)

    def test_missing_method_rejected(self):
        assert not isinstance(_Empty(), BoundaryFactory)
        assert not isinstance(_Empty(), Clock)
