"""Error system for recoverable clangengine failures.

Provides structured error details with codes, kinds, hints and raw status
values. Inspired by Rust compiler diagnostics.

Python 3.13+. Zero external dependencies.
"""

from .codes import (
    ErrorCategory,
    ErrorCode,
    ErrorDetail,
    LayoutErrorKind,
    LayoutFamily,
    SaveErrorKind,
    SourceErrorKind,
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
from .formatter import ErrorFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "AlignofError",
    "AstLoadError",
    "ClangError",
    "EngineUnavailableError",
    "ErrorCategory",
    "ErrorCode",
    "ErrorDetail",
    "ErrorFormatter",
    "ErrorTemplate",
    "LayoutError",
    "LayoutErrorKind",
    "LayoutFamily",
    "OffsetofError",
    "OutputFormat",
    "SaveError",
    "SaveErrorKind",
    "SizeofError",
    "SourceError",
    "SourceErrorKind",
]
