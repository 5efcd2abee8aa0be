"""Shared constants for clangengine.

This module provides centralized configuration constants used across the
native, core and handle layers. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Status sentinels: Raw values libclang uses on its success paths
- Depth limits: Recursion protection for Python-side cursor visitors
- Library discovery: Environment overrides for locating libclang

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Status sentinels
    "ERROR_CODE_SUCCESS",
    "SAVE_ERROR_NONE",
    "LAYOUT_SUCCESS_FLOOR",
    "INVALID_LANGUAGE",
    "INVALID_ACCESS_SPECIFIER",
    # Depth limits
    "MAX_VISIT_DEPTH",
    # Library discovery
    "LIBCLANG_PATH_ENV",
    "LIBCLANG_DISTRIBUTION",
    "LIBCLANG_SEARCH_NAME",
]

# ============================================================================
# STATUS SENTINELS
# ============================================================================
#
# libclang reuses overlapping integer ranges with family-specific meanings.
# Only the success sentinels live here; the per-family error tables live in
# clangengine.decoder next to the functions that consult them.

# CXErrorCode success value (parse / reparse).
ERROR_CODE_SUCCESS: int = 0

# CXSaveError success value.
SAVE_ERROR_NONE: int = 0

# Layout queries (sizeof / alignof / offsetof) return the magnitude itself.
# Any value at or above this floor is a successful result.
LAYOUT_SUCCESS_FLOOR: int = 0

# CXLanguage_Invalid: returned for cursors that are not declarations.
INVALID_LANGUAGE: int = 0

# CX_CXXInvalidAccessSpecifier.
INVALID_ACCESS_SPECIFIER: int = 0

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting depth for CursorVisitor.generic_visit().
# Only the Python-side visitor recurses on the Python stack; clang_visitChildren
# recursion happens inside libclang and is not bounded here.
# 256 covers heavily nested C++ template code while leaving ample margin
# under the default interpreter recursion limit (1000).
MAX_VISIT_DEPTH: int = 256

# ============================================================================
# LIBRARY DISCOVERY
# ============================================================================

# Explicit path to the libclang shared library (highest priority).
LIBCLANG_PATH_ENV: str = "CLANGENGINE_LIBCLANG_PATH"

# PyPI distribution that bundles the shared library under clang/native/.
LIBCLANG_DISTRIBUTION: str = "libclang"

# Name passed to ctypes.util.find_library() as the last resort.
LIBCLANG_SEARCH_NAME: str = "clang"
