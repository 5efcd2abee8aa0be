"""Process-wide token proving libclang is in use.

libclang keeps process-global state, so at most one EngineToken may be live
per process. Every Index borrows from the token; closing the token closes
its Indexes (and their TranslationUnits) first.

Example:
    >>> with EngineToken.acquire() as token, Index(token) as index:
    ...     tu = TranslationUnit.from_source(index, "main.c")

Python 3.13+.
"""

from __future__ import annotations

import logging
import os
import threading
import weakref
from typing import TYPE_CHECKING, Self

from clangengine.core.library import get_library
from clangengine.core.lifetime import Lifetime
from clangengine.errors import EngineUnavailableError, ErrorTemplate
from clangengine.marshal import adopt_string

if TYPE_CHECKING:
    from ctypes import CDLL
    from types import TracebackType

__all__ = ["EngineToken", "get_version"]

logger = logging.getLogger(__name__)

# Held for as long as a token is live. Acquired without blocking: a second
# acquisition fails immediately instead of waiting.
_AVAILABLE = threading.Lock()


def _release_token() -> None:
    _AVAILABLE.release()
    logger.debug("EngineToken released")


class EngineToken:
    """Exclusive, process-wide handle on the loaded libclang.

    Use EngineToken.acquire(); the constructor is internal.

    A token dropped without close() is released when it is garbage
    collected, together with every Index and TranslationUnit under it.

    Thread Safety:
        The token records the acquiring thread. Every handle derived from it
        must be used on that thread (ThreadAffinityError otherwise).
    """

    __slots__ = ("__weakref__", "_finalizer", "_lib", "_lifetime")

    def __init__(self, lib: CDLL) -> None:
        """Wrap a loaded library. The availability lock must already be held."""
        self._lib = lib
        self._lifetime = Lifetime("EngineToken", on_retire=_release_token)
        self._finalizer = weakref.finalize(self, self._lifetime.abandon)

    @classmethod
    def acquire(cls, *, library_path: str | os.PathLike[str] | None = None) -> Self:
        """Acquire the process-wide token, loading libclang on first use.

        Args:
            library_path: Explicit shared library path (None: search order
                of clangengine.core.library)

        Returns:
            The live token

        Raises:
            EngineUnavailableError: If a token is already outstanding
            LibclangUnavailableError: If libclang cannot be loaded
        """
        if not _AVAILABLE.acquire(blocking=False):
            raise EngineUnavailableError(ErrorTemplate.engine_unavailable())
        try:
            token = cls(get_library(library_path))
        except BaseException:
            _AVAILABLE.release()
            raise
        logger.debug("EngineToken acquired on thread %d", token._lifetime.thread_id)
        return token

    @staticmethod
    def is_available() -> bool:
        """Whether acquire() would currently succeed (advisory only)."""
        return not _AVAILABLE.locked()

    @property
    def lifetime(self) -> Lifetime:
        """Root lifetime node every Index attaches to."""
        return self._lifetime

    @property
    def is_alive(self) -> bool:
        """Whether the token has not been closed."""
        return self._lifetime.alive

    @property
    def library(self) -> CDLL:
        """The loaded libclang."""
        self._lifetime.check(operation="library")
        return self._lib

    @property
    def version(self) -> str:
        """libclang version string, e.g. "clang version 18.1.1"."""
        lib = self.library
        return adopt_string(lib, lib.clang_getClangVersion())

    def close(self) -> None:
        """Close every live Index, then release the token. Idempotent.

        Raises:
            ContractViolationError: If a visitation is in flight below the token
        """
        self._lifetime.retire()
        self._finalizer.detach()

    def __enter__(self) -> Self:
        """Return the token for use in a with block."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the token."""
        self.close()

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        state = "alive" if self._lifetime.alive else "closed"
        return f"EngineToken({state}, thread={self._lifetime.thread_id})"


def get_version(library_path: str | os.PathLike[str] | None = None) -> str:
    """Return the libclang version string without acquiring a token.

    Args:
        library_path: Explicit shared library path

    Raises:
        LibclangUnavailableError: If libclang cannot be loaded
    """
    lib = get_library(library_path)
    return adopt_string(lib, lib.clang_getClangVersion())
