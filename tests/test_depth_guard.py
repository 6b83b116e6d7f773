"""Tests for DepthGuard and depth_clamp."""

from __future__ import annotations

import logging
import sys

import pytest

from parsecomb.constants import FRAMES_PER_RULE_LEVEL, MAX_RULE_DEPTH, RESERVED_FRAMES
from parsecomb.core import DepthGuard, DepthLimitExceededError, depth_clamp
from parsecomb.diagnostics import DiagnosticCode, ParsecombError


class TestDepthGuard:
    """Test DepthGuard context manager."""

    def test_defaults(self) -> None:
        """Default limit is MAX_RULE_DEPTH (when the stack allows it)."""
        guard = DepthGuard()

        assert guard.max_depth == depth_clamp(MAX_RULE_DEPTH)
        assert guard.depth == 0

    def test_enter_exit_tracks_depth(self) -> None:
        """Entering increments, exiting decrements."""
        guard = DepthGuard(max_depth=3)

        with guard:
            assert guard.depth == 1
            with guard:
                assert guard.depth == 2
        assert guard.depth == 0

    def test_raises_at_limit(self) -> None:
        """Entering beyond max_depth raises with a diagnostic."""
        guard = DepthGuard(max_depth=2)

        with guard, guard, pytest.raises(DepthLimitExceededError) as exc_info:
            guard.__enter__()

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.NESTING_DEPTH_EXCEEDED
        assert isinstance(exc_info.value, ParsecombError)

    def test_failed_enter_leaves_depth_unchanged(self) -> None:
        """A rejected enter does not corrupt the counter."""
        guard = DepthGuard(max_depth=1)

        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.depth == 1
        assert guard.depth == 0

    def test_exit_on_exception(self) -> None:
        """Depth unwinds even when the guarded block raises."""
        guard = DepthGuard(max_depth=5)

        with pytest.raises(KeyError), guard:
            raise KeyError

        assert guard.depth == 0

    def test_is_exceeded_and_reset(self) -> None:
        """is_exceeded() reports the limit; reset() zeroes the counter."""
        guard = DepthGuard(max_depth=1)
        guard.__enter__()

        assert guard.is_exceeded()
        guard.reset()
        assert guard.depth == 0
        assert not guard.is_exceeded()


class TestDepthClamp:
    """Test depth_clamp()."""

    def test_small_depth_unchanged(self) -> None:
        """Depths that fit the stack pass through."""
        assert depth_clamp(5) == 5

    def test_large_depth_clamped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Depths that would overflow the stack are clamped with a warning."""
        limit = sys.getrecursionlimit()
        expected = (limit - RESERVED_FRAMES) // FRAMES_PER_RULE_LEVEL

        with caplog.at_level(logging.WARNING, logger="parsecomb.core.depth_guard"):
            assert depth_clamp(limit) == expected

        assert "Clamping" in caplog.text

    def test_never_below_one(self) -> None:
        """Even an absurd per-level cost leaves depth 1."""
        assert depth_clamp(10, frames_per_level=10**9) == 1

    def test_guard_applies_clamp(self) -> None:
        """DepthGuard clamps at construction."""
        guard = DepthGuard(max_depth=10**6)

        assert guard.max_depth < 10**6
