"""A collection of translation units sharing libclang configuration.

Python 3.13+.
"""

from __future__ import annotations

import logging
import weakref
from functools import partial
from typing import TYPE_CHECKING, Self

from clangengine.core.lifetime import Lifetime
from clangengine.integrity import EncodingViolationError, IntegrityContext
from clangengine.options import BackgroundPriority

if TYPE_CHECKING:
    from ctypes import CDLL
    from types import TracebackType

    from clangengine.engine import EngineToken

__all__ = ["Index"]

logger = logging.getLogger(__name__)


def _dispose_index(lib: CDLL, ptr: int) -> None:
    lib.clang_disposeIndex(ptr)
    logger.debug("Index disposed")


class Index:
    """Owner of a libclang CXIndex.

    An Index can never outlive its EngineToken: closing the token closes
    the Index first, which in turn closes every TranslationUnit parsed
    through it.

    Example:
        >>> with EngineToken.acquire() as token, Index(token) as index:
        ...     index.set_background_priority(BackgroundPriority(indexing=True))
    """

    __slots__ = ("__weakref__", "_finalizer", "_lib", "_lifetime", "_ptr", "_token")

    def __init__(
        self,
        token: EngineToken,
        *,
        exclude_declarations_from_pch: bool = False,
        display_diagnostics: bool = False,
    ) -> None:
        """Create an index.

        Args:
            token: Live engine token
            exclude_declarations_from_pch: Hide declarations that come from
                precompiled headers when visiting
            display_diagnostics: Let libclang print diagnostics to stderr
                while parsing

        Raises:
            StaleHandleError: If the token is closed
        """
        self._token = token
        self._lib = token.library
        ptr = self._lib.clang_createIndex(
            int(exclude_declarations_from_pch), int(display_diagnostics)
        )
        if not ptr:
            msg = "clang_createIndex returned a null index"
            raise EncodingViolationError(
                msg, IntegrityContext(component="Index", operation="create", actual="NULL")
            )
        self._ptr: int = ptr
        self._lifetime = Lifetime(
            "Index", token.lifetime, on_retire=partial(_dispose_index, self._lib, ptr)
        )
        self._finalizer = weakref.finalize(self, self._lifetime.abandon)
        logger.debug(
            "Index created (exclude_pch=%s, display_diagnostics=%s)",
            exclude_declarations_from_pch,
            display_diagnostics,
        )

    @property
    def lifetime(self) -> Lifetime:
        """Lifetime node every TranslationUnit attaches to."""
        return self._lifetime

    @property
    def library(self) -> CDLL:
        """The loaded libclang."""
        self._lifetime.check(operation="library")
        return self._lib

    @property
    def pointer(self) -> int:
        """Raw CXIndex (validated)."""
        self._lifetime.check(operation="pointer")
        return self._ptr

    @property
    def token(self) -> EngineToken:
        """Engine token this index borrows from."""
        return self._token

    @property
    def is_alive(self) -> bool:
        """Whether neither the index nor its token has been closed."""
        return self._lifetime.alive

    def get_background_priority(self) -> BackgroundPriority:
        """Return which thread kinds have background priority."""
        return BackgroundPriority.from_flags(self._lib.clang_CXIndex_getGlobalOptions(self.pointer))

    def set_background_priority(self, priority: BackgroundPriority) -> None:
        """Set which thread kinds have background priority."""
        self._lib.clang_CXIndex_setGlobalOptions(self.pointer, priority.to_flags())

    def close(self) -> None:
        """Close every live TranslationUnit, then dispose the index. Idempotent."""
        self._lifetime.retire()
        self._finalizer.detach()

    def __enter__(self) -> Self:
        """Return the index for use in a with block."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the index."""
        self.close()

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        state = "alive" if self._lifetime.alive else "closed"
        return f"Index({state})"
