"""clangengine - lifetime-checked access to libclang.

Parses C, C++ and Objective-C through libclang and exposes the AST as
handles whose validity is checked on every call: a handle used after its
owner is closed, or after its translation unit is reparsed, raises instead
of touching freed memory.

Public API:
    EngineToken - Process-wide proof that libclang is in use
    Index - Collection of translation units
    TranslationUnit - Parsed source file (from_source, from_ast, reparse, save)
    Cursor - Reference to an AST element
    Type - Type of an AST element (sizeof, alignof, offsetof)
    File, SourceLocation, SourceRange, Location - Source positions
    Diagnostic - Compiler diagnostic with fix-its
    Module - Clang module
    CursorVisitor - ast.NodeVisitor-style cursor walker

Exceptions:
    ClangError - Base of recoverable libclang failures (SourceError, SaveError, ...)
    ContractViolationError - Base of caller or library contract breaches
        (StaleHandleError, ThreadAffinityError, QueryNotApplicableError, ...)

Submodules:
    clangengine.errors - Error codes, templates and formatter
    clangengine.decoder - libclang status decoding tables
    clangengine.core - Library loading, lifetime arena, depth guard
    clangengine.native - ctypes structures and prototypes
"""

# Essential Public API - Minimal exports for clean namespace
from .core import LibclangUnavailableError, is_libclang_available
from .core.depth_guard import DepthLimitExceededError
from .cursor import Cursor, Type
from .diagnostic import Deletion, Diagnostic, FixIt, Insertion, Replacement
from .engine import EngineToken, get_version
from .enums import (
    AccessSpecifier,
    Availability,
    CursorKind,
    Language,
    MemoryUsage,
    Severity,
    TranslationUnitState,
    VisitDirective,
)
from .errors import (
    AlignofError,
    AstLoadError,
    ClangError,
    EngineUnavailableError,
    LayoutError,
    OffsetofError,
    SaveError,
    SizeofError,
    SourceError,
)
from .index import Index
from .integrity import (
    ContractViolationError,
    EncodingViolationError,
    QueryNotApplicableError,
    StaleHandleError,
    ThreadAffinityError,
)
from .module import Module
from .options import BackgroundPriority, FormatOptions, ParseOptions
from .source import File, Location, PresumedLocation, SourceLocation, SourceRange
from .translation_unit import TranslationUnit, Unsaved
from .visitation import CursorVisitor

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("clangengine")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AccessSpecifier",
    "AlignofError",
    "AstLoadError",
    "Availability",
    "BackgroundPriority",
    "ClangError",
    "ContractViolationError",
    "Cursor",
    "CursorKind",
    "CursorVisitor",
    "Deletion",
    "DepthLimitExceededError",
    "Diagnostic",
    "EncodingViolationError",
    "EngineToken",
    "EngineUnavailableError",
    "File",
    "FixIt",
    "FormatOptions",
    "Index",
    "Insertion",
    "Language",
    "LayoutError",
    "LibclangUnavailableError",
    "Location",
    "MemoryUsage",
    "Module",
    "OffsetofError",
    "ParseOptions",
    "PresumedLocation",
    "QueryNotApplicableError",
    "Replacement",
    "SaveError",
    "Severity",
    "SizeofError",
    "SourceError",
    "SourceLocation",
    "SourceRange",
    "StaleHandleError",
    "ThreadAffinityError",
    "TranslationUnit",
    "TranslationUnitState",
    "Type",
    "Unsaved",
    "VisitDirective",
    "__version__",
    "get_version",
    "is_libclang_available",
]
