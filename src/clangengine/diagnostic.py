"""Compiler diagnostics and the fix-its attached to them.

A fix-it is one of three edits, classified from libclang's (range, text)
pair:

- Deletion: empty replacement text
- Insertion: empty range (start == end)
- Replacement: anything else

Python 3.13+.
"""

from __future__ import annotations

from ctypes import byref
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clangengine.enums import Severity
from clangengine.handle import DerivedHandle
from clangengine.marshal import ForeignSequence, adopt_array, adopt_string
from clangengine.native import CXSourceRange
from clangengine.source import SourceLocation, SourceRange

if TYPE_CHECKING:
    from clangengine.core.lifetime import Lease
    from clangengine.options import FormatOptions
    from clangengine.translation_unit import TranslationUnit

__all__ = [
    "Deletion",
    "Diagnostic",
    "FixIt",
    "Insertion",
    "Replacement",
    "classify_fix_it",
]


@dataclass(frozen=True, slots=True)
class Deletion:
    """Remove the text in range."""

    range: SourceRange


@dataclass(frozen=True, slots=True)
class Insertion:
    """Insert text at location."""

    location: SourceLocation
    text: str


@dataclass(frozen=True, slots=True)
class Replacement:
    """Replace the text in range with text."""

    range: SourceRange
    text: str


type FixIt = Deletion | Insertion | Replacement


def classify_fix_it(source_range: SourceRange, text: str) -> FixIt:
    """Classify a libclang fix-it as a deletion, insertion or replacement.

    An empty range with empty text is reported as a Deletion of nothing.
    """
    if not text:
        return Deletion(source_range)
    start = source_range.get_start()
    if start == source_range.get_end():
        return Insertion(start, text)
    return Replacement(source_range, text)


class Diagnostic(DerivedHandle):
    """A diagnostic reported while parsing a translation unit.

    Diagnostics obtained from TranslationUnit.get_diagnostics() are owned by
    the unit and released with it.
    """

    __slots__ = ("_ptr",)

    def __init__(self, ptr: int, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Wrap a CXDiagnostic borrowed from tu."""
        super().__init__(tu, lease)
        self._ptr = ptr

    def get_severity(self) -> Severity:
        """Return the severity."""
        return Severity(self._native("get_severity").clang_getDiagnosticSeverity(self._ptr))

    def get_text(self) -> str:
        """Return the message text, without location or severity."""
        lib = self._native("get_text")
        return adopt_string(lib, lib.clang_getDiagnosticSpelling(self._ptr))

    def get_location(self) -> SourceLocation:
        """Return the location the diagnostic refers to."""
        raw = self._native("get_location").clang_getDiagnosticLocation(self._ptr)
        return SourceLocation(raw, self._tu, self._lease)

    def get_ranges(self) -> ForeignSequence[SourceRange]:
        """Return the source ranges highlighted by the diagnostic, lazily."""
        lib = self._native("get_ranges")

        def count() -> int:
            self._lease.validate("get_ranges")
            return int(lib.clang_getDiagnosticNumRanges(self._ptr))

        def element(i: int) -> SourceRange:
            self._lease.validate("get_ranges")
            return SourceRange(lib.clang_getDiagnosticRange(self._ptr, i), self._tu, self._lease)

        return adopt_array(count, element)

    def get_fix_its(self) -> ForeignSequence[FixIt]:
        """Return the suggested fix-its, lazily."""
        lib = self._native("get_fix_its")

        def count() -> int:
            self._lease.validate("get_fix_its")
            return int(lib.clang_getDiagnosticNumFixIts(self._ptr))

        def element(i: int) -> FixIt:
            self._lease.validate("get_fix_its")
            raw_range = CXSourceRange()
            text = adopt_string(lib, lib.clang_getDiagnosticFixIt(self._ptr, i, byref(raw_range)))
            return classify_fix_it(SourceRange(raw_range, self._tu, self._lease), text)

        return adopt_array(count, element)

    def format(self, options: FormatOptions | None = None) -> str:
        """Render the diagnostic the way clang would print it.

        Args:
            options: What to include (None: libclang's defaults, which
                show the source location)
        """
        lib = self._native("format")
        flags = lib.clang_defaultDiagnosticDisplayOptions() if options is None else options.to_flags()
        return adopt_string(lib, lib.clang_formatDiagnostic(self._ptr, flags))

    def __str__(self) -> str:
        """Render with libclang's default display options."""
        return self.format()

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if not self._lease.valid:
            return "Diagnostic(<stale>)"
        return f"Diagnostic({self.get_severity().name}, {self.get_text()!r})"
