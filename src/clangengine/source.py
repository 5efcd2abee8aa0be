"""Files, locations and ranges within a translation unit.

A SourceLocation resolves to a Location in one of three views:

- spelling: where the characters were written (looks through macro expansion)
- expansion: where the macro was expanded
- file: like spelling, for locations outside macros

Python 3.13+.
"""

from __future__ import annotations

from ctypes import byref, c_uint, c_void_p
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Self

from clangengine.decoder import decode_handle
from clangengine.handle import DerivedHandle
from clangengine.integrity import ContractViolationError, IntegrityContext, QueryNotApplicableError
from clangengine.marshal import adopt_string
from clangengine.native import CXFileUniqueID, CXSourceLocation, CXSourceRange, CXString

if TYPE_CHECKING:
    from collections.abc import Callable

    from clangengine.core.lifetime import Lease
    from clangengine.cursor import Cursor
    from clangengine.module import Module
    from clangengine.translation_unit import TranslationUnit

__all__ = ["File", "Location", "PresumedLocation", "SourceLocation", "SourceRange"]

type FileId = tuple[int, int, int]
type LocationKey = tuple[FileId | None, int, int, int]


class File(DerivedHandle):
    """A file that is part of a translation unit.

    Equality and hashing use the file's unique id, so two handles for the
    same file compare equal even if reached through different paths.
    """

    __slots__ = ("_ptr",)

    def __init__(self, ptr: int, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Wrap a CXFile borrowed from tu."""
        super().__init__(tu, lease)
        self._ptr = ptr

    @property
    def pointer(self) -> int:
        """Raw CXFile (validated)."""
        self._lease.validate("pointer")
        return self._ptr

    def get_id(self) -> FileId:
        """Return the unique id of the file (device, inode, modification time)."""
        lib = self._native("get_id")
        out = CXFileUniqueID()
        if lib.clang_getFileUniqueID(self._ptr, byref(out)) != 0:
            msg = "clang_getFileUniqueID failed for a live file"
            raise ContractViolationError(
                msg, IntegrityContext(component="File", operation="get_id", actual="nonzero")
            )
        return (int(out.data[0]), int(out.data[1]), int(out.data[2]))

    def get_path(self) -> Path:
        """Return the path of the file as libclang knows it."""
        lib = self._native("get_path")
        return Path(adopt_string(lib, lib.clang_getFileName(self._ptr)))

    def get_time(self) -> int:
        """Return the last modification time of the file (seconds since the epoch)."""
        return int(self._native("get_time").clang_getFileTime(self._ptr))

    def get_location(self, line: int, column: int) -> SourceLocation:
        """Return the location at a 1-based line and column.

        Raises:
            QueryNotApplicableError: If line or column is less than 1
        """
        lib = self._native("get_location")
        if line < 1 or column < 1:
            msg = f"get_location() requires 1-based line and column, got {line}:{column}"
            raise QueryNotApplicableError(
                msg,
                IntegrityContext(
                    component="File",
                    operation="get_location",
                    expected="line >= 1 and column >= 1",
                    actual=f"{line}:{column}",
                ),
            )
        raw = lib.clang_getLocation(self._tu.pointer, self._ptr, line, column)
        return SourceLocation(raw, self._tu, self._lease)

    def get_offset_location(self, offset: int) -> SourceLocation:
        """Return the location at a 0-based character offset."""
        lib = self._native("get_offset_location")
        raw = lib.clang_getLocationForOffset(self._tu.pointer, self._ptr, offset)
        return SourceLocation(raw, self._tu, self._lease)

    def get_module(self) -> Module | None:
        """Return the module the file belongs to, if any."""
        from clangengine.module import Module  # noqa: PLC0415 - circular

        lib = self._native("get_module")
        ptr = decode_handle(lib.clang_getModuleForFile(self._tu.pointer, self._ptr))
        return None if ptr is None else Module(ptr, self._tu, self._lease)

    def is_include_guarded(self) -> bool:
        """Whether the file is guarded against multiple inclusion."""
        lib = self._native("is_include_guarded")
        return bool(lib.clang_isFileMultipleIncludeGuarded(self._tu.pointer, self._ptr))

    def __eq__(self, other: object) -> bool:
        """Whether both handles refer to the same file."""
        if not isinstance(other, File):
            return NotImplemented
        return self.get_id() == other.get_id()

    def __hash__(self) -> int:
        """Hash on the unique id."""
        return hash(self.get_id())

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if not self._lease.valid:
            return "File(<stale>)"
        return f"File({str(self.get_path())!r})"


@dataclass(frozen=True, slots=True)
class Location:
    """A resolved position in a file.

    Attributes:
        file: File containing the position (None for a null location)
        line: 1-based line (0 for a null location)
        column: 1-based column (0 for a null location)
        offset: 0-based character offset into the file
    """

    file: File | None
    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class PresumedLocation:
    """A position as adjusted by #line directives.

    Attributes:
        filename: File name as presumed by #line (empty if unknown)
        line: Presumed 1-based line
        column: Presumed 1-based column
    """

    filename: str
    line: int
    column: int


class SourceLocation(DerivedHandle):
    """A position in a translation unit's source."""

    __slots__ = ("_raw",)

    def __init__(self, raw: CXSourceLocation, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Wrap a raw location borrowed from tu."""
        super().__init__(tu, lease)
        self._raw = raw

    @property
    def raw(self) -> CXSourceLocation:
        """Underlying CXSourceLocation (validated)."""
        self._lease.validate("raw")
        return self._raw

    def _resolve(self, operation: str, function: Callable[..., None]) -> Location:
        self._lease.validate(operation)
        file_ptr = c_void_p()
        line = c_uint()
        column = c_uint()
        offset = c_uint()
        function(self._raw, byref(file_ptr), byref(line), byref(column), byref(offset))
        ptr = decode_handle(file_ptr.value)
        file = None if ptr is None else File(ptr, self._tu, self._lease)
        return Location(file, line.value, column.value, offset.value)

    def get_spelling_location(self) -> Location:
        """Resolve to where the characters were written."""
        return self._resolve("get_spelling_location", self._lib.clang_getSpellingLocation)

    def get_expansion_location(self) -> Location:
        """Resolve to where a macro containing the location was expanded."""
        return self._resolve("get_expansion_location", self._lib.clang_getExpansionLocation)

    def get_file_location(self) -> Location:
        """Resolve to the file position, looking through macro instantiations."""
        return self._resolve("get_file_location", self._lib.clang_getFileLocation)

    def get_presumed_location(self) -> PresumedLocation:
        """Resolve as adjusted by #line directives."""
        lib = self._native("get_presumed_location")
        filename = CXString()
        line = c_uint()
        column = c_uint()
        lib.clang_getPresumedLocation(self._raw, byref(filename), byref(line), byref(column))
        return PresumedLocation(adopt_string(lib, filename), line.value, column.value)

    def get_cursor(self) -> Cursor | None:
        """Return the most specific cursor covering the location, if any."""
        from clangengine.cursor import Cursor  # noqa: PLC0415 - circular

        lib = self._native("get_cursor")
        raw = lib.clang_getCursor(self._tu.pointer, self._raw)
        if lib.clang_Cursor_isNull(raw) or lib.clang_isInvalid(raw.kind):
            return None
        return Cursor(raw, self._tu, self._lease)

    def is_in_main_file(self) -> bool:
        """Whether the location is in the unit's main file."""
        return bool(self._native("is_in_main_file").clang_Location_isFromMainFile(self._raw))

    def is_in_system_header(self) -> bool:
        """Whether the location is in a system header."""
        lib = self._native("is_in_system_header")
        return bool(lib.clang_Location_isInSystemHeader(self._raw))

    def _key(self) -> LocationKey:
        spelled = self.get_spelling_location()
        file_id = None if spelled.file is None else spelled.file.get_id()
        return (file_id, spelled.line, spelled.column, spelled.offset)

    def __eq__(self, other: object) -> bool:
        """Whether both locations resolve to the same spelling position."""
        if not isinstance(other, SourceLocation):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: SourceLocation) -> bool:
        """Order by (file, offset) within the same file."""
        mine, theirs = self._key(), other._key()
        return (mine[0] or (), mine[3]) < (theirs[0] or (), theirs[3])

    def __le__(self, other: SourceLocation) -> bool:
        """Order by (file, offset) within the same file."""
        return self == other or self < other

    def __hash__(self) -> int:
        """Hash on the resolved spelling position."""
        return hash(self._key())

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if not self._lease.valid:
            return "SourceLocation(<stale>)"
        spelled = self.get_spelling_location()
        path = None if spelled.file is None else str(spelled.file.get_path())
        return f"SourceLocation({path!r}, line={spelled.line}, column={spelled.column})"


class SourceRange(DerivedHandle):
    """A half-open span between two locations."""

    __slots__ = ("_raw",)

    def __init__(self, raw: CXSourceRange, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Wrap a raw range borrowed from tu."""
        super().__init__(tu, lease)
        self._raw = raw

    @classmethod
    def new(cls, start: SourceLocation, end: SourceLocation) -> Self:
        """Build the range from start to end.

        Both locations must belong to the same translation unit generation.
        """
        lib = start._native("new")
        end._lease.validate("new")
        if start._tu is not end._tu:
            msg = "SourceRange.new() requires locations from the same translation unit"
            raise ContractViolationError(
                msg, IntegrityContext(component="SourceRange", operation="new")
            )
        return cls(lib.clang_getRange(start._raw, end._raw), start._tu, start._lease)

    @property
    def raw(self) -> CXSourceRange:
        """Underlying CXSourceRange (validated)."""
        self._lease.validate("raw")
        return self._raw

    def get_start(self) -> SourceLocation:
        """Return the location of the first character."""
        raw = self._native("get_start").clang_getRangeStart(self._raw)
        return SourceLocation(raw, self._tu, self._lease)

    def get_end(self) -> SourceLocation:
        """Return the location just past the last character."""
        raw = self._native("get_end").clang_getRangeEnd(self._raw)
        return SourceLocation(raw, self._tu, self._lease)

    def is_null(self) -> bool:
        """Whether the range is empty of any position."""
        return bool(self._native("is_null").clang_Range_isNull(self._raw))

    def __eq__(self, other: object) -> bool:
        """Whether both ranges resolve to the same start and end positions."""
        if not isinstance(other, SourceRange):
            return NotImplemented
        return self._key() == other._key()

    def _key(self) -> tuple[LocationKey, LocationKey]:
        return (self.get_start()._key(), self.get_end()._key())

    def __hash__(self) -> int:
        """Hash on the resolved start and end positions."""
        return hash(self._key())

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if not self._lease.valid:
            return "SourceRange(<stale>)"
        start = self.get_start().get_spelling_location()
        end = self.get_end().get_spelling_location()
        return f"SourceRange({start.line}:{start.column}-{end.line}:{end.column})"
