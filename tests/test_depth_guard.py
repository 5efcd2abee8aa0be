"""Tests for core/depth_guard.py: visitor nesting limits.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys

import pytest
from hypothesis import given
from hypothesis import strategies as st

from clangengine.constants import MAX_VISIT_DEPTH
from clangengine.core.depth_guard import DepthGuard, DepthLimitExceededError, depth_clamp
from clangengine.errors import ClangError, ErrorCode


class TestDepthGuard:
    """DepthGuard construction and context manager behavior."""

    def test_default_construction(self) -> None:
        """DepthGuard uses MAX_VISIT_DEPTH by default."""
        guard = DepthGuard()

        assert guard.max_depth == MAX_VISIT_DEPTH
        assert guard.current_depth == 0

    def test_nested_entry_tracks_depth(self) -> None:
        """Nested context managers increment and restore depth."""
        guard = DepthGuard(max_depth=10)

        with guard:
            assert guard.current_depth == 1
            with guard:
                assert guard.current_depth == 2
            assert guard.current_depth == 1
        assert guard.current_depth == 0

    def test_limit_raises(self) -> None:
        """Entering past max_depth raises a ClangError with a depth code."""
        guard = DepthGuard(max_depth=2)

        with guard, guard, pytest.raises(DepthLimitExceededError) as exc_info:
            with guard:
                pass

        assert isinstance(exc_info.value, ClangError)
        assert exc_info.value.detail is not None
        assert exc_info.value.detail.code is ErrorCode.MAX_DEPTH_EXCEEDED

    def test_failed_entry_does_not_leak_depth(self) -> None:
        """A rejected __enter__ leaves the depth unchanged."""
        guard = DepthGuard(max_depth=1)

        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.current_depth == 1
        assert guard.current_depth == 0

    def test_depth_restored_after_exception(self) -> None:
        """An exception inside the guarded block still decrements."""
        guard = DepthGuard(max_depth=3)

        with pytest.raises(KeyError), guard:
            raise KeyError("inner")

        assert guard.current_depth == 0

    @given(limit=st.integers(min_value=1, max_value=50))
    def test_exactly_limit_levels_allowed(self, limit: int) -> None:
        """Property: limit levels succeed; the next one raises."""
        guard = DepthGuard(max_depth=limit)
        for _ in range(limit):
            guard.__enter__()
        assert guard.current_depth == limit
        with pytest.raises(DepthLimitExceededError):
            guard.check()


class TestDepthClamp:
    """depth_clamp() bounds requests by the interpreter recursion limit."""

    def test_small_request_unchanged(self) -> None:
        """Requests under the budget pass through."""
        assert depth_clamp(10) == 10

    def test_large_request_clamped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Requests over the budget are clamped with a warning."""
        limit = sys.getrecursionlimit()
        with caplog.at_level(logging.WARNING, logger="clangengine.core.depth_guard"):
            clamped = depth_clamp(limit * 10)

        assert clamped == (limit - 50) // 2
        assert "does not fit recursion limit" in caplog.text

    def test_guard_clamps_on_construction(self) -> None:
        """DepthGuard applies the clamp to its max_depth."""
        guard = DepthGuard(max_depth=sys.getrecursionlimit() * 10)

        assert guard.max_depth == depth_clamp(sys.getrecursionlimit() * 10)
