"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import (
    ErrorCode,
    ErrorDetail,
    LayoutErrorKind,
    LayoutFamily,
    SaveErrorKind,
    SourceErrorKind,
)

__all__ = ["ErrorTemplate"]

_SOURCE_DESCRIPTIONS: dict[SourceErrorKind, tuple[ErrorCode, str, str]] = {
    SourceErrorKind.AST_DESERIALIZATION: (
        ErrorCode.SOURCE_AST_DESERIALIZATION,
        "AST deserialization failed",
        "Rebuild the precompiled header or AST file with the same libclang version",
    ),
    SourceErrorKind.CRASH: (
        ErrorCode.SOURCE_CRASH,
        "libclang crashed",
        "Check the compiler arguments; the operation is not retried automatically",
    ),
    SourceErrorKind.UNKNOWN: (
        ErrorCode.SOURCE_UNKNOWN,
        "an unknown error occurred",
        "Check that the file exists and the compiler arguments are valid",
    ),
}

_SAVE_DESCRIPTIONS: dict[SaveErrorKind, tuple[ErrorCode, str, str]] = {
    SaveErrorKind.ERRORS: (
        ErrorCode.SAVE_ERRORS,
        "errors in the translation unit prevented saving",
        "Fix the error diagnostics of the translation unit first",
    ),
    SaveErrorKind.UNKNOWN: (
        ErrorCode.SAVE_UNKNOWN,
        "an unknown error occurred",
        "Check that the destination directory exists and is writable",
    ),
}

_LAYOUT_CODES: dict[LayoutFamily, ErrorCode] = {
    LayoutFamily.SIZEOF: ErrorCode.SIZEOF_FAILED,
    LayoutFamily.ALIGNOF: ErrorCode.ALIGNOF_FAILED,
    LayoutFamily.OFFSETOF: ErrorCode.OFFSETOF_FAILED,
}

_LAYOUT_DESCRIPTIONS: dict[LayoutErrorKind, str] = {
    LayoutErrorKind.INVALID: "the type is invalid",
    LayoutErrorKind.INCOMPLETE: "the type is an incomplete type",
    LayoutErrorKind.DEPENDENT: "the type is a dependent type",
    LayoutErrorKind.VARIABLE_SIZE: "the type is a variable size type",
    LayoutErrorKind.INVALID_FIELD_NAME: (
        "the record type does not contain a field with the supplied name"
    ),
    LayoutErrorKind.UNDEDUCED: "the type is an undeduced type",
    LayoutErrorKind.UNKNOWN: "an unknown error occurred",
}


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    Every recoverable failure raised by clangengine obtains its ErrorDetail
    from one of these static methods.
    """

    @staticmethod
    def engine_unavailable() -> ErrorDetail:
        """Second EngineToken requested while one is outstanding.

        Returns:
            ErrorDetail for ENGINE_UNAVAILABLE
        """
        return ErrorDetail(
            code=ErrorCode.ENGINE_UNAVAILABLE,
            message="An EngineToken is already in use in this process",
            hint="Close the existing token first, or run the analysis in another process",
        )

    @staticmethod
    def source_failed(
        operation: str,
        path: str,
        kind: SourceErrorKind,
        raw_status: int,
    ) -> ErrorDetail:
        """Parse or reparse of a translation unit failed.

        Args:
            operation: "parse" or "reparse"
            path: Source file the unit was created from
            kind: Decoded source error kind
            raw_status: CXErrorCode returned by libclang

        Returns:
            ErrorDetail for the SOURCE_* code matching kind
        """
        code, description, hint = _SOURCE_DESCRIPTIONS[kind]
        return ErrorDetail(
            code=code,
            message=f"Failed to {operation} '{path}': {description}",
            hint=hint,
            path=path,
            kind=str(kind),
            raw_status=raw_status,
        )

    @staticmethod
    def ast_load_failed(path: str) -> ErrorDetail:
        """Loading a translation unit from an AST file failed.

        libclang reports no reason for this failure.

        Args:
            path: AST file path

        Returns:
            ErrorDetail for AST_LOAD_FAILED
        """
        return ErrorDetail(
            code=ErrorCode.AST_LOAD_FAILED,
            message=f"Failed to load AST file '{path}'",
            hint="Check that the file exists and was written by a compatible libclang",
            path=path,
        )

    @staticmethod
    def save_failed(path: str, kind: SaveErrorKind, raw_status: int) -> ErrorDetail:
        """Saving a translation unit to an AST file failed.

        Args:
            path: Destination path
            kind: Decoded save error kind
            raw_status: CXSaveError returned by libclang

        Returns:
            ErrorDetail for the SAVE_* code matching kind
        """
        code, description, hint = _SAVE_DESCRIPTIONS[kind]
        return ErrorDetail(
            code=code,
            message=f"Failed to save translation unit to '{path}': {description}",
            hint=hint,
            path=path,
            kind=str(kind),
            raw_status=raw_status,
        )

    @staticmethod
    def layout_failed(
        family: LayoutFamily,
        type_name: str,
        kind: LayoutErrorKind,
        raw_status: int,
        field: str | None = None,
    ) -> ErrorDetail:
        """Type layout query returned a negative sentinel.

        Args:
            family: Which layout query failed
            type_name: Spelling of the queried type
            kind: Decoded layout error kind
            raw_status: Raw value returned by libclang
            field: Field name for offsetof queries

        Returns:
            ErrorDetail for SIZEOF_FAILED, ALIGNOF_FAILED or OFFSETOF_FAILED
        """
        subject = f"'{type_name}'" if field is None else f"'{type_name}.{field}'"
        return ErrorDetail(
            code=_LAYOUT_CODES[family],
            message=f"Cannot compute {family} of {subject}: {_LAYOUT_DESCRIPTIONS[kind]}",
            kind=str(kind),
            raw_status=raw_status,
        )

    @staticmethod
    def visit_depth_exceeded(max_depth: int) -> ErrorDetail:
        """CursorVisitor nesting exceeded its depth limit.

        Args:
            max_depth: Configured depth limit

        Returns:
            ErrorDetail for MAX_DEPTH_EXCEEDED
        """
        return ErrorDetail(
            code=ErrorCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum cursor visit depth ({max_depth}) exceeded",
            hint="Raise max_depth or use get_descendants() for deep trees",
        )
