"""Tests for engine.py and index.py: token exclusivity and cascading close.

Python 3.13+.
"""

from __future__ import annotations

import gc
import logging
from pathlib import Path

import pytest

from clangengine import (
    BackgroundPriority,
    EngineToken,
    EngineUnavailableError,
    Index,
    StaleHandleError,
    TranslationUnit,
    TranslationUnitState,
    get_version,
)
from clangengine.errors import ErrorCode

pytestmark = pytest.mark.libclang


class TestEngineToken:
    """At most one live token per process."""

    def test_second_acquire_fails(self, token: EngineToken) -> None:
        """Acquiring while a token is live raises EngineUnavailableError."""
        assert not EngineToken.is_available()

        with pytest.raises(EngineUnavailableError) as exc_info:
            EngineToken.acquire()

        assert exc_info.value.detail is not None
        assert exc_info.value.detail.code is ErrorCode.ENGINE_UNAVAILABLE
        assert token.is_alive

    def test_release_allows_reacquire(self) -> None:
        """Closing the token makes the engine available again."""
        with EngineToken.acquire() as first:
            assert first.is_alive
        assert not first.is_alive
        assert EngineToken.is_available()

        second = EngineToken.acquire()
        second.close()

    def test_close_is_idempotent(self) -> None:
        """Closing twice is harmless and releases once."""
        token = EngineToken.acquire()
        token.close()
        token.close()
        assert EngineToken.is_available()

    def test_version(self, token: EngineToken) -> None:
        """The version string names clang."""
        assert "clang version" in token.version
        assert get_version() == token.version

    def test_library_after_close_is_stale(self) -> None:
        """A closed token no longer hands out the library."""
        token = EngineToken.acquire()
        token.close()

        with pytest.raises(StaleHandleError):
            _ = token.library

    def test_dropped_token_released_on_collection(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A token dropped without close() frees the engine and everything below it."""
        source = tmp_path / "dropped.c"
        source.write_text("int x;\n", encoding="utf-8")
        token = EngineToken.acquire()
        tu = TranslationUnit.from_source(Index(token), source)
        unit_lifetime = tu.lifetime

        with caplog.at_level(logging.WARNING, logger="clangengine.core.lifetime"):
            del token, tu
            gc.collect()

        assert not unit_lifetime.alive
        assert EngineToken.is_available()
        assert "TranslationUnit was not closed" in caplog.text
        EngineToken.acquire().close()

    def test_close_detaches_collection_release(self, caplog: pytest.LogCaptureFixture) -> None:
        """A closed token is not released again when collected."""
        token = EngineToken.acquire()
        token.close()

        with caplog.at_level(logging.WARNING, logger="clangengine.core.lifetime"):
            del token
            gc.collect()

        assert "was not closed" not in caplog.text
        EngineToken.acquire().close()


class TestIndex:
    """Index lifetime is bounded by its token."""

    def test_background_priority_round_trip(self, index: Index) -> None:
        """Global options set on the index are read back."""
        priority = BackgroundPriority(indexing=True, editing=True)
        index.set_background_priority(priority)
        assert index.get_background_priority() == priority

    def test_closing_token_closes_everything(self, tmp_path: Path) -> None:
        """Token close cascades to indexes and translation units."""
        source = tmp_path / "a.c"
        source.write_text("int x;\n", encoding="utf-8")

        token = EngineToken.acquire()
        index = Index(token)
        tu = TranslationUnit.from_source(index, source)
        cursor = tu.get_cursor()

        token.close()

        assert not index.is_alive
        assert not tu.is_alive
        assert tu.state is TranslationUnitState.DISPOSED
        assert not cursor.is_valid
        with pytest.raises(StaleHandleError):
            cursor.get_kind()
        with pytest.raises(StaleHandleError):
            Index(token)

    def test_closing_index_keeps_token(self, token: EngineToken) -> None:
        """An index can be closed and another created on the same token."""
        first = Index(token)
        first.close()
        assert not first.is_alive
        assert token.is_alive

        with Index(token) as second:
            assert second.is_alive
