"""ctypes layouts of the libclang structs passed by value.

Opaque handle types (CXIndex, CXTranslationUnit, CXFile, CXDiagnostic,
CXModule) are plain ``c_void_p`` and surface in Python as ``int | None``.

These classes mirror the C declarations in clang-c/Index.h and must not be
used outside the clangengine package.

Python 3.13+.
"""

from ctypes import (
    CFUNCTYPE,
    POINTER,
    Structure,
    c_char_p,
    c_int,
    c_uint,
    c_ulong,
    c_ulonglong,
    c_void_p,
    py_object,
)

__all__ = [
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
]


class CXString(Structure):
    """Library-owned string box. Released with clang_disposeString."""

    _fields_ = [
        ("data", c_void_p),
        ("private_flags", c_uint),
    ]


class CXCursor(Structure):
    """Reference to one AST node. Value type, no disposal."""

    _fields_ = [
        ("kind", c_int),
        ("xdata", c_int),
        ("data", c_void_p * 3),
    ]


class CXSourceLocation(Structure):
    """Opaque source location. Compare resolved positions, never raw bytes."""

    _fields_ = [
        ("ptr_data", c_void_p * 2),
        ("int_data", c_uint),
    ]


class CXSourceRange(Structure):
    """Opaque half-open source range."""

    _fields_ = [
        ("ptr_data", c_void_p * 2),
        ("begin_int_data", c_uint),
        ("end_int_data", c_uint),
    ]


class CXType(Structure):
    """Type of an AST element."""

    _fields_ = [
        ("kind", c_int),
        ("data", c_void_p * 2),
    ]


class CXFileUniqueID(Structure):
    """Stable (device, inode, mtime)-style identity of a file."""

    _fields_ = [("data", c_ulonglong * 3)]


class CXUnsavedFile(Structure):
    """In-memory contents overriding a file on disk."""

    _fields_ = [
        ("Filename", c_char_p),
        ("Contents", c_char_p),
        ("Length", c_ulong),
    ]


class CXTUResourceUsageEntry(Structure):
    """One (kind, bytes) memory usage entry."""

    _fields_ = [
        ("kind", c_int),
        ("amount", c_ulong),
    ]


class CXTUResourceUsage(Structure):
    """Memory usage report. Released with clang_disposeCXTUResourceUsage."""

    _fields_ = [
        ("data", c_void_p),
        ("numEntries", c_uint),
        ("entries", POINTER(CXTUResourceUsageEntry)),
    ]


# enum CXChildVisitResult (*CXCursorVisitor)(CXCursor, CXCursor, CXClientData)
# The client data pointer is declared as py_object so the visitation frame
# travels through libclang as a borrowed Python reference.
CXCursorVisitor = CFUNCTYPE(c_int, CXCursor, CXCursor, py_object)
