"""Error codes, error kinds and error detail structures.

Defines the numeric error codes carried by every recoverable failure, the
per-family error kinds produced by the status decoder, and the immutable
ErrorDetail record attached to each exception.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum

__all__ = [
    "ErrorCategory",
    "ErrorCode",
    "ErrorDetail",
    "LayoutErrorKind",
    "LayoutFamily",
    "SaveErrorKind",
    "SourceErrorKind",
]


class ErrorCategory(StrEnum):
    """Error categorization for ClangError.

    Categories:
        ENGINE: Engine token acquisition and library loading
        SOURCE: Translation unit parse, reparse and AST load
        SAVE: Writing a translation unit to an AST file
        LAYOUT: Type size, alignment and field offset queries
        VISIT: Python-side cursor visitor failures
    """

    ENGINE = "engine"
    SOURCE = "source"
    SAVE = "save"
    LAYOUT = "layout"
    VISIT = "visit"


class SourceErrorKind(StrEnum):
    """Reason a translation unit could not be parsed or reparsed."""

    AST_DESERIALIZATION = "ast_deserialization"
    """An error occurred while deserializing an AST file."""

    CRASH = "crash"
    """libclang crashed."""

    UNKNOWN = "unknown"
    """An unknown error occurred."""


class SaveErrorKind(StrEnum):
    """Reason a translation unit could not be saved to an AST file."""

    ERRORS = "errors"
    """Errors in the translation unit prevented saving."""

    UNKNOWN = "unknown"
    """An unknown error occurred."""


class LayoutFamily(StrEnum):
    """Layout query family; each has its own sentinel table."""

    SIZEOF = "sizeof"
    ALIGNOF = "alignof"
    OFFSETOF = "offsetof"


class LayoutErrorKind(StrEnum):
    """Reason a type layout query did not produce a magnitude."""

    INVALID = "invalid"
    """The type is invalid (for offsetof: the record has an invalid parent)."""

    INCOMPLETE = "incomplete"
    """The type is an incomplete type."""

    DEPENDENT = "dependent"
    """The type is a dependent type."""

    VARIABLE_SIZE = "variable_size"
    """The type is a variable size type."""

    INVALID_FIELD_NAME = "invalid_field_name"
    """The record type does not contain a field with the supplied name."""

    UNDEDUCED = "undeduced"
    """The type is an undeduced type."""

    UNKNOWN = "unknown"
    """An undocumented negative sentinel was returned."""


class ErrorCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Engine errors (token conflicts, library loading)
        2000-2999: Source errors (parse, reparse, AST load)
        3000-3999: Save errors
        4000-4999: Layout errors (sizeof, alignof, offsetof)
        5000-5999: Visitor errors
    """

    # Engine errors (1000-1999)
    ENGINE_UNAVAILABLE = 1001

    # Source errors (2000-2999)
    SOURCE_AST_DESERIALIZATION = 2001
    SOURCE_CRASH = 2002
    SOURCE_UNKNOWN = 2003
    AST_LOAD_FAILED = 2004

    # Save errors (3000-3999)
    SAVE_ERRORS = 3001
    SAVE_UNKNOWN = 3002

    # Layout errors (4000-4999)
    SIZEOF_FAILED = 4001
    ALIGNOF_FAILED = 4002
    OFFSETOF_FAILED = 4003

    # Visitor errors (5000-5999)
    MAX_DEPTH_EXCEEDED = 5001

    @property
    def category(self) -> ErrorCategory:
        """Category derived from the code range."""
        match self.value // 1000:
            case 1:
                return ErrorCategory.ENGINE
            case 2:
                return ErrorCategory.SOURCE
            case 3:
                return ErrorCategory.SAVE
            case 4:
                return ErrorCategory.LAYOUT
            case _:
                return ErrorCategory.VISIT


@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """Structured error detail.

    Inspired by Rust compiler diagnostics. Carries everything needed to
    render a failure for humans and tools.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        path: File the failing operation was applied to (optional)
        kind: Decoded error kind, as its string value (optional)
        raw_status: Raw status value returned by libclang (optional)
    """

    code: ErrorCode
    message: str
    hint: str | None = None
    path: str | None = None
    kind: str | None = None
    raw_status: int | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format detail like the Rust compiler.

        Delegates to ErrorFormatter for consistent output with
        control-character escaping.

        Example output:
            error[SOURCE_CRASH]: Failed to parse 'main.c': libclang crashed
              --> main.c
              = kind: crash
              = status: 2
              = help: Check the compiler arguments; libclang state is not retried

        Returns:
            Formatted error message
        """
        from .formatter import ErrorFormatter  # noqa: PLC0415 - circular

        return ErrorFormatter().format(self)
