"""Raw ctypes layer over the libclang C ABI.

Nothing here performs lifetime checks; the handle modules
(engine, index, translation_unit, cursor, ...) are the only callers.

Python 3.13+.
"""

from .prototypes import FUNCTION_PROTOTYPES, register_functions
from .structs import (
    CXCursor,
    CXCursorVisitor,
    CXFileUniqueID,
    CXSourceLocation,
    CXSourceRange,
    CXString,
    CXTUResourceUsage,
    CXTUResourceUsageEntry,
    CXType,
    CXUnsavedFile,
)

__all__ = [
    "FUNCTION_PROTOTYPES",
    "CXCursor",
    "CXCursorVisitor",
    "CXFileUniqueID",
    "CXSourceLocation",
    "CXSourceRange",
    "CXString",
    "CXTUResourceUsage",
    "CXTUResourceUsageEntry",
    "CXType",
    "CXUnsavedFile",
    "register_functions",
]
