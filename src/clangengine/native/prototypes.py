"""Function prototypes for the subset of the libclang C API in use.

register_functions() must run once per loaded library before any call is
made; clangengine.core.library does this as part of loading.

Functions are listed in strictly alphabetical order.

Python 3.13+.
"""

import logging
from ctypes import (
    CDLL,
    POINTER,
    c_char_p,
    c_int,
    c_longlong,
    c_time_t,
    c_uint,
    c_void_p,
    py_object,
)

from .structs import (
    CXCursor,
    CXCursorVisitor,
    CXFileUniqueID,
    CXSourceLocation,
    CXSourceRange,
    CXString,
    CXTUResourceUsage,
    CXType,
    CXUnsavedFile,
)

__all__ = ["FUNCTION_PROTOTYPES", "register_functions"]

logger = logging.getLogger(__name__)

type Prototype = tuple[str, list[object], object]

# (name, argtypes, restype)
FUNCTION_PROTOTYPES: tuple[Prototype, ...] = (
    ("clang_CXIndex_getGlobalOptions", [c_void_p], c_uint),
    ("clang_CXIndex_setGlobalOptions", [c_void_p, c_uint], None),
    ("clang_CXXMethod_isConst", [CXCursor], c_uint),
    ("clang_CXXMethod_isPureVirtual", [CXCursor], c_uint),
    ("clang_CXXMethod_isStatic", [CXCursor], c_uint),
    ("clang_CXXMethod_isVirtual", [CXCursor], c_uint),
    ("clang_Cursor_getArgument", [CXCursor, c_uint], CXCursor),
    ("clang_Cursor_getBriefCommentText", [CXCursor], CXString),
    ("clang_Cursor_getCommentRange", [CXCursor], CXSourceRange),
    ("clang_Cursor_getMangling", [CXCursor], CXString),
    ("clang_Cursor_getModule", [CXCursor], c_void_p),
    ("clang_Cursor_getNumArguments", [CXCursor], c_int),
    ("clang_Cursor_getRawCommentText", [CXCursor], CXString),
    ("clang_Cursor_getSpellingNameRange", [CXCursor, c_uint, c_uint], CXSourceRange),
    ("clang_Cursor_isAnonymous", [CXCursor], c_uint),
    ("clang_Cursor_isBitField", [CXCursor], c_uint),
    ("clang_Cursor_isDynamicCall", [CXCursor], c_int),
    ("clang_Cursor_isNull", [CXCursor], c_int),
    ("clang_Cursor_isVariadic", [CXCursor], c_uint),
    ("clang_Location_isFromMainFile", [CXSourceLocation], c_int),
    ("clang_Location_isInSystemHeader", [CXSourceLocation], c_int),
    ("clang_Module_getASTFile", [c_void_p], c_void_p),
    ("clang_Module_getFullName", [c_void_p], CXString),
    ("clang_Module_getName", [c_void_p], CXString),
    ("clang_Module_getNumTopLevelHeaders", [c_void_p, c_void_p], c_uint),
    ("clang_Module_getParent", [c_void_p], c_void_p),
    ("clang_Module_getTopLevelHeader", [c_void_p, c_void_p, c_uint], c_void_p),
    ("clang_Module_isSystem", [c_void_p], c_int),
    ("clang_Range_isNull", [CXSourceRange], c_int),
    ("clang_Type_getAlignOf", [CXType], c_longlong),
    ("clang_Type_getOffsetOf", [CXType, c_char_p], c_longlong),
    ("clang_Type_getSizeOf", [CXType], c_longlong),
    ("clang_createIndex", [c_int, c_int], c_void_p),
    ("clang_createTranslationUnit", [c_void_p, c_char_p], c_void_p),
    ("clang_defaultDiagnosticDisplayOptions", [], c_uint),
    ("clang_defaultReparseOptions", [c_void_p], c_uint),
    ("clang_defaultSaveOptions", [c_void_p], c_uint),
    ("clang_disposeCXTUResourceUsage", [CXTUResourceUsage], None),
    ("clang_disposeIndex", [c_void_p], None),
    ("clang_disposeString", [CXString], None),
    ("clang_disposeTranslationUnit", [c_void_p], None),
    ("clang_equalCursors", [CXCursor, CXCursor], c_uint),
    ("clang_equalTypes", [CXType, CXType], c_uint),
    ("clang_formatDiagnostic", [c_void_p, c_uint], CXString),
    ("clang_getCString", [CXString], c_char_p),
    ("clang_getCXTUResourceUsage", [c_void_p], CXTUResourceUsage),
    ("clang_getCXXAccessSpecifier", [CXCursor], c_int),
    ("clang_getCanonicalCursor", [CXCursor], CXCursor),
    ("clang_getCanonicalType", [CXType], CXType),
    ("clang_getClangVersion", [], CXString),
    ("clang_getCursor", [c_void_p, CXSourceLocation], CXCursor),
    ("clang_getCursorAvailability", [CXCursor], c_int),
    ("clang_getCursorDefinition", [CXCursor], CXCursor),
    ("clang_getCursorDisplayName", [CXCursor], CXString),
    ("clang_getCursorExtent", [CXCursor], CXSourceRange),
    ("clang_getCursorLanguage", [CXCursor], c_int),
    ("clang_getCursorLexicalParent", [CXCursor], CXCursor),
    ("clang_getCursorLocation", [CXCursor], CXSourceLocation),
    ("clang_getCursorReferenced", [CXCursor], CXCursor),
    ("clang_getCursorSemanticParent", [CXCursor], CXCursor),
    ("clang_getCursorSpelling", [CXCursor], CXString),
    ("clang_getCursorType", [CXCursor], CXType),
    ("clang_getDiagnostic", [c_void_p, c_uint], c_void_p),
    ("clang_getDiagnosticFixIt", [c_void_p, c_uint, POINTER(CXSourceRange)], CXString),
    ("clang_getDiagnosticLocation", [c_void_p], CXSourceLocation),
    ("clang_getDiagnosticNumFixIts", [c_void_p], c_uint),
    ("clang_getDiagnosticNumRanges", [c_void_p], c_uint),
    ("clang_getDiagnosticRange", [c_void_p, c_uint], CXSourceRange),
    ("clang_getDiagnosticSeverity", [c_void_p], c_int),
    ("clang_getDiagnosticSpelling", [c_void_p], CXString),
    (
        "clang_getExpansionLocation",
        [CXSourceLocation, POINTER(c_void_p), POINTER(c_uint), POINTER(c_uint), POINTER(c_uint)],
        None,
    ),
    ("clang_getFile", [c_void_p, c_char_p], c_void_p),
    (
        "clang_getFileLocation",
        [CXSourceLocation, POINTER(c_void_p), POINTER(c_uint), POINTER(c_uint), POINTER(c_uint)],
        None,
    ),
    ("clang_getFileName", [c_void_p], CXString),
    ("clang_getFileTime", [c_void_p], c_time_t),
    ("clang_getFileUniqueID", [c_void_p, POINTER(CXFileUniqueID)], c_int),
    ("clang_getLocation", [c_void_p, c_void_p, c_uint, c_uint], CXSourceLocation),
    ("clang_getLocationForOffset", [c_void_p, c_void_p, c_uint], CXSourceLocation),
    ("clang_getModuleForFile", [c_void_p, c_void_p], c_void_p),
    ("clang_getNumDiagnostics", [c_void_p], c_uint),
    (
        "clang_getPresumedLocation",
        [CXSourceLocation, POINTER(CXString), POINTER(c_uint), POINTER(c_uint)],
        None,
    ),
    ("clang_getRange", [CXSourceLocation, CXSourceLocation], CXSourceRange),
    ("clang_getRangeEnd", [CXSourceRange], CXSourceLocation),
    ("clang_getRangeStart", [CXSourceRange], CXSourceLocation),
    (
        "clang_getSpellingLocation",
        [CXSourceLocation, POINTER(c_void_p), POINTER(c_uint), POINTER(c_uint), POINTER(c_uint)],
        None,
    ),
    ("clang_getTranslationUnitCursor", [c_void_p], CXCursor),
    ("clang_getTranslationUnitSpelling", [c_void_p], CXString),
    ("clang_getTypeDeclaration", [CXType], CXCursor),
    ("clang_getTypeKindSpelling", [c_int], CXString),
    ("clang_getTypeSpelling", [CXType], CXString),
    ("clang_hashCursor", [CXCursor], c_uint),
    ("clang_isAttribute", [c_int], c_uint),
    ("clang_isDeclaration", [c_int], c_uint),
    ("clang_isExpression", [c_int], c_uint),
    ("clang_isFileMultipleIncludeGuarded", [c_void_p, c_void_p], c_uint),
    ("clang_isInvalid", [c_int], c_uint),
    ("clang_isPreprocessing", [c_int], c_uint),
    ("clang_isReference", [c_int], c_uint),
    ("clang_isStatement", [c_int], c_uint),
    ("clang_isUnexposed", [c_int], c_uint),
    (
        "clang_parseTranslationUnit2",
        [
            c_void_p,
            c_char_p,
            POINTER(c_char_p),
            c_int,
            POINTER(CXUnsavedFile),
            c_uint,
            c_uint,
            POINTER(c_void_p),
        ],
        c_int,
    ),
    ("clang_reparseTranslationUnit", [c_void_p, c_uint, POINTER(CXUnsavedFile), c_uint], c_int),
    ("clang_saveTranslationUnit", [c_void_p, c_char_p, c_uint], c_int),
    ("clang_visitChildren", [CXCursor, CXCursorVisitor, py_object], c_uint),
)


def register_functions(lib: CDLL) -> tuple[str, ...]:
    """Register function prototypes with a libclang library instance.

    Functions missing from the loaded library (older releases) are skipped
    and reported; calling one later raises AttributeError from ctypes.

    Args:
        lib: Freshly loaded libclang shared library

    Returns:
        Names of prototypes the library does not export
    """
    missing: list[str] = []
    for name, argtypes, restype in FUNCTION_PROTOTYPES:
        try:
            function = getattr(lib, name)
        except AttributeError:
            missing.append(name)
            continue
        function.argtypes = argtypes
        function.restype = restype

    if missing:
        logger.warning(
            "libclang does not export %d function(s): %s", len(missing), ", ".join(missing)
        )
    return tuple(missing)
