"""Recoverable exception hierarchy with structured error details.

All exceptions store ErrorDetail objects for rich error information.
Contract violations (misuse, stale handles, bad UTF-8) live in
clangengine.integrity and do not derive from ClangError.

Python 3.13+. Zero external dependencies.
"""

from .codes import ErrorDetail, LayoutErrorKind, SaveErrorKind, SourceErrorKind

__all__ = [
    "AlignofError",
    "AstLoadError",
    "ClangError",
    "EngineUnavailableError",
    "LayoutError",
    "OffsetofError",
    "SaveError",
    "SizeofError",
    "SourceError",
]


class ClangError(Exception):
    """Base exception for all recoverable clangengine errors.

    Attributes:
        detail: Structured error information (optional)
    """

    def __init__(self, message: str | ErrorDetail) -> None:
        """Initialize ClangError.

        Args:
            message: Error message string OR ErrorDetail object
        """
        if isinstance(message, ErrorDetail):
            self.detail: ErrorDetail | None = message
            super().__init__(message.format_error())
        else:
            self.detail = None
            super().__init__(message)


class EngineUnavailableError(ClangError):
    """An EngineToken is already outstanding in this process.

    Recoverable: close the existing token and acquire again.
    """


class SourceError(ClangError):
    """A translation unit could not be parsed or reparsed.

    Never retried automatically; retrying a crash without new arguments is
    unsafe.

    Attributes:
        kind: AST_DESERIALIZATION, CRASH or UNKNOWN
    """

    def __init__(self, message: str | ErrorDetail, kind: SourceErrorKind) -> None:
        """Initialize SourceError.

        Args:
            message: Error message string OR ErrorDetail object
            kind: Decoded source error kind
        """
        super().__init__(message)
        self.kind = kind


class AstLoadError(ClangError):
    """A translation unit could not be loaded from an AST file.

    libclang returns only a null unit for this operation, so no kind is
    available.
    """


class SaveError(ClangError):
    """A translation unit could not be saved to an AST file.

    Attributes:
        kind: ERRORS or UNKNOWN
    """

    def __init__(self, message: str | ErrorDetail, kind: SaveErrorKind) -> None:
        """Initialize SaveError.

        Args:
            message: Error message string OR ErrorDetail object
            kind: Decoded save error kind
        """
        super().__init__(message)
        self.kind = kind


class LayoutError(ClangError):
    """A type layout query returned a negative sentinel instead of a magnitude.

    Attributes:
        kind: Decoded layout error kind
    """

    def __init__(self, message: str | ErrorDetail, kind: LayoutErrorKind) -> None:
        """Initialize LayoutError.

        Args:
            message: Error message string OR ErrorDetail object
            kind: Decoded layout error kind
        """
        super().__init__(message)
        self.kind = kind


class SizeofError(LayoutError):
    """The size of a type could not be determined."""


class AlignofError(LayoutError):
    """The alignment of a type could not be determined."""


class OffsetofError(LayoutError):
    """The offset of a field in a record type could not be determined."""
