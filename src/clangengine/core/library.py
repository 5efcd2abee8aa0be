"""libclang locator and loader for the native shared library.

Provides centralized, lazy loading of libclang so that importing clangengine
never touches the shared library. Only acquiring an EngineToken (or calling
a CursorKind category predicate) loads it.

Search order:
    1. CLANGENGINE_LIBCLANG_PATH environment variable (explicit file path)
    2. The shared library bundled by the ``libclang`` distribution
       (installed as the ``clang`` package, under ``clang/native/``)
    3. ctypes.util.find_library("clang") (system installation)

Usage Pattern:
    from clangengine.core.library import get_library

    lib = get_library()  # Raises LibclangUnavailableError if missing

Python 3.13+.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import os
import threading
from functools import lru_cache
from importlib import resources

from clangengine.constants import LIBCLANG_DISTRIBUTION, LIBCLANG_PATH_ENV, LIBCLANG_SEARCH_NAME
from clangengine.native import register_functions

__all__ = [
    "LibclangUnavailableError",
    "get_library",
    "is_libclang_available",
    "locate_library",
]

logger = logging.getLogger(__name__)

_load_lock = threading.Lock()
_active_path: str | None = None


class LibclangUnavailableError(ImportError):
    """Raised when libclang is required but cannot be located or loaded.

    Provides a consistent, helpful error message directing users to install
    the libclang distribution or point the environment variable at a build.
    """

    def __init__(self, feature: str, reason: str = "no shared library found") -> None:
        """Create error with feature-specific message.

        Args:
            feature: Name of the feature/function requiring libclang
            reason: Why loading failed
        """
        message = (
            f"{feature} requires the libclang shared library ({reason}). "
            f"Install with: pip install {LIBCLANG_DISTRIBUTION}, "
            f"or set {LIBCLANG_PATH_ENV} to the library path"
        )
        super().__init__(message)
        self.feature = feature
        self.reason = reason


def _bundled_library() -> str | None:
    """Path of the shared library shipped inside the libclang distribution."""
    try:
        native = resources.files("clang") / "native"
    except ModuleNotFoundError:
        return None
    if not native.is_dir():
        return None
    for entry in sorted(native.iterdir(), key=lambda item: item.name):
        if entry.name.startswith(("libclang", "clang")) and entry.name.endswith(
            (".so", ".dylib", ".dll")
        ):
            return str(entry)
    return None


def locate_library() -> str | None:
    """Find the libclang shared library without loading it.

    Returns:
        Path or soname of the library, or None if nothing was found
    """
    explicit = os.environ.get(LIBCLANG_PATH_ENV)
    if explicit:
        return explicit
    bundled = _bundled_library()
    if bundled is not None:
        return bundled
    return ctypes.util.find_library(LIBCLANG_SEARCH_NAME)


@lru_cache(maxsize=None)
def _load(path: str) -> ctypes.CDLL:
    """Load and prepare one shared library (computed once per path)."""
    try:
        lib = ctypes.CDLL(path)
    except OSError as e:
        raise LibclangUnavailableError("clangengine", f"cannot load {path!r}: {e}") from e
    missing = register_functions(lib)
    logger.info("Loaded libclang from %s (%d prototypes missing)", path, len(missing))
    return lib


def get_library(path: str | os.PathLike[str] | None = None) -> ctypes.CDLL:
    """Return the loaded libclang, loading it on first use.

    The first successful load fixes the library for the process; later
    calls without a path reuse it.

    Args:
        path: Explicit shared library path (None: use the search order)

    Returns:
        The loaded library with prototypes registered

    Raises:
        LibclangUnavailableError: If no library can be located or loaded
    """
    global _active_path  # noqa: PLW0603 - process-wide library choice
    with _load_lock:
        if path is not None:
            resolved: str | None = os.fspath(path)
        elif _active_path is not None:
            resolved = _active_path
        else:
            resolved = locate_library()
        if resolved is None:
            raise LibclangUnavailableError("clangengine")
        lib = _load(resolved)
        if _active_path is None:
            _active_path = resolved
        elif _active_path != resolved:
            logger.warning(
                "libclang already loaded from %s; also loading %s", _active_path, resolved
            )
        return lib


def is_libclang_available() -> bool:
    """Check if libclang can be loaded.

    Returns:
        True if the library is (or can be) loaded, False otherwise.

    Example:
        >>> if is_libclang_available():
        ...     with EngineToken.acquire() as token:
        ...         ...
    """
    try:
        get_library()
    except LibclangUnavailableError:
        return False
    return True

