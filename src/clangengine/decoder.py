"""Family-specific decoding of libclang status values.

libclang reuses overlapping integer ranges with family-specific meanings:
-2 means "incomplete type" for a layout query, while 2 means "crashed" for a
parse. Each family therefore has its own table. Every decode function is
pure; the check_* helpers add logging and raise the family's exception.

Families:
    source: CXErrorCode from parse/reparse (0 = success)
    save: CXSaveError from save (0 = success)
    sizeof / alignof / offsetof: CXTypeLayoutError sentinels (>= 0 = magnitude)

Unknown codes:
    A non-success code missing from its family table decodes to the
    family's UNKNOWN kind. It is never treated as success and never raised
    as a contract violation. Each occurrence is logged at WARNING.

Python 3.13+.
"""

import logging
from types import MappingProxyType

from clangengine.constants import ERROR_CODE_SUCCESS, LAYOUT_SUCCESS_FLOOR, SAVE_ERROR_NONE
from clangengine.errors import (
    AlignofError,
    ErrorTemplate,
    LayoutError,
    LayoutErrorKind,
    LayoutFamily,
    OffsetofError,
    SaveError,
    SaveErrorKind,
    SizeofError,
    SourceError,
    SourceErrorKind,
)

__all__ = [
    "LAYOUT_TABLES",
    "SAVE_TABLE",
    "SOURCE_TABLE",
    "check_layout",
    "check_save_status",
    "check_source_status",
    "decode_handle",
    "decode_layout",
    "decode_save_status",
    "decode_source_status",
]

logger = logging.getLogger(__name__)

# CXErrorCode: Failure=1, Crashed=2, InvalidArguments=3, ASTReadError=4.
# InvalidArguments is not reachable through this API (arguments are built
# internally) and falls through to UNKNOWN.
SOURCE_TABLE: MappingProxyType[int, SourceErrorKind] = MappingProxyType({
    1: SourceErrorKind.UNKNOWN,
    2: SourceErrorKind.CRASH,
    4: SourceErrorKind.AST_DESERIALIZATION,
})

# CXSaveError: Unknown=1, TranslationErrors=2, InvalidTU=3.
SAVE_TABLE: MappingProxyType[int, SaveErrorKind] = MappingProxyType({
    1: SaveErrorKind.UNKNOWN,
    2: SaveErrorKind.ERRORS,
    3: SaveErrorKind.ERRORS,
})

# CXTypeLayoutError, restricted to the sentinels each query documents.
LAYOUT_TABLES: MappingProxyType[LayoutFamily, MappingProxyType[int, LayoutErrorKind]] = (
    MappingProxyType({
        LayoutFamily.SIZEOF: MappingProxyType({
            -1: LayoutErrorKind.INVALID,
            -2: LayoutErrorKind.INCOMPLETE,
            -3: LayoutErrorKind.DEPENDENT,
            -4: LayoutErrorKind.VARIABLE_SIZE,
            -6: LayoutErrorKind.UNDEDUCED,
        }),
        LayoutFamily.ALIGNOF: MappingProxyType({
            -1: LayoutErrorKind.INVALID,
            -2: LayoutErrorKind.INCOMPLETE,
            -3: LayoutErrorKind.DEPENDENT,
            -6: LayoutErrorKind.UNDEDUCED,
        }),
        LayoutFamily.OFFSETOF: MappingProxyType({
            -1: LayoutErrorKind.INVALID,
            -2: LayoutErrorKind.INCOMPLETE,
            -3: LayoutErrorKind.DEPENDENT,
            -5: LayoutErrorKind.INVALID_FIELD_NAME,
            -6: LayoutErrorKind.UNDEDUCED,
        }),
    })
)

_LAYOUT_ERRORS: MappingProxyType[LayoutFamily, type[LayoutError]] = MappingProxyType({
    LayoutFamily.SIZEOF: SizeofError,
    LayoutFamily.ALIGNOF: AlignofError,
    LayoutFamily.OFFSETOF: OffsetofError,
})


def decode_source_status(code: int) -> SourceErrorKind | None:
    """Decode a parse/reparse CXErrorCode.

    Args:
        code: Raw status returned by libclang

    Returns:
        None on success, otherwise the decoded kind
    """
    if code == ERROR_CODE_SUCCESS:
        return None
    kind = SOURCE_TABLE.get(code)
    if kind is None:
        logger.warning("Unknown source status code %d decoded as %s", code, SourceErrorKind.UNKNOWN)
        return SourceErrorKind.UNKNOWN
    return kind


def decode_save_status(code: int) -> SaveErrorKind | None:
    """Decode a CXSaveError.

    Args:
        code: Raw status returned by libclang

    Returns:
        None on success, otherwise the decoded kind
    """
    if code == SAVE_ERROR_NONE:
        return None
    kind = SAVE_TABLE.get(code)
    if kind is None:
        logger.warning("Unknown save status code %d decoded as %s", code, SaveErrorKind.UNKNOWN)
        return SaveErrorKind.UNKNOWN
    return kind


def decode_layout(value: int, family: LayoutFamily) -> LayoutErrorKind | None:
    """Decode the result of a sizeof/alignof/offsetof query.

    Non-negative values are the computed magnitude and decode to success.

    Args:
        value: Raw value returned by libclang
        family: Which query produced the value

    Returns:
        None on success, otherwise the decoded kind
    """
    if value >= LAYOUT_SUCCESS_FLOOR:
        return None
    kind = LAYOUT_TABLES[family].get(value)
    if kind is None:
        logger.warning("Unknown %s sentinel %d decoded as %s", family, value, LayoutErrorKind.UNKNOWN)
        return LayoutErrorKind.UNKNOWN
    return kind


def decode_handle(pointer: int | None) -> int | None:
    """Decode an opaque pointer returned through a ``c_void_p`` restype.

    ctypes already maps NULL to None; zero is normalized to None as well.
    """
    return pointer or None


def check_source_status(code: int, *, operation: str, path: str) -> None:
    """Raise SourceError unless a parse/reparse status is success.

    Args:
        code: Raw CXErrorCode
        operation: "parse" or "reparse"
        path: Source file involved

    Raises:
        SourceError: If the status is not success
    """
    kind = decode_source_status(code)
    if kind is None:
        return
    detail = ErrorTemplate.source_failed(operation, path, kind, code)
    logger.error("%s", detail.message)
    raise SourceError(detail, kind)


def check_save_status(code: int, *, path: str) -> None:
    """Raise SaveError unless a save status is success.

    Raises:
        SaveError: If the status is not success
    """
    kind = decode_save_status(code)
    if kind is None:
        return
    detail = ErrorTemplate.save_failed(path, kind, code)
    logger.error("%s", detail.message)
    raise SaveError(detail, kind)


def check_layout(value: int, family: LayoutFamily, *, type_name: str, field: str | None = None) -> int:
    """Return a layout magnitude or raise the family's LayoutError.

    Args:
        value: Raw value returned by libclang
        family: Which query produced the value
        type_name: Spelling of the queried type
        field: Field name for offsetof queries

    Returns:
        The magnitude (bytes for sizeof/alignof, bits for offsetof)

    Raises:
        SizeofError | AlignofError | OffsetofError: If value is a sentinel
    """
    kind = decode_layout(value, family)
    if kind is None:
        return value
    detail = ErrorTemplate.layout_failed(family, type_name, kind, value, field)
    logger.error("%s", detail.message)
    raise _LAYOUT_ERRORS[family](detail, kind)
