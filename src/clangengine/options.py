"""Option sets passed to libclang as bit flags.

Each option set is a frozen dataclass of booleans. The libclang flag bit of
every field is stored in the field metadata, so conversion in both
directions is driven by one table per class.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Self

__all__ = ["BackgroundPriority", "FormatOptions", "ParseOptions"]


def _flag(bit: int) -> bool:
    return field(default=False, metadata={"flag": bit})  # type: ignore[no-any-return]


class _FlagSet:
    """Bool <-> bitmask conversion shared by the option dataclasses."""

    __slots__ = ()

    @classmethod
    def from_flags(cls, flags: int) -> Self:
        """Build an option set from a libclang bitmask; unknown bits are ignored."""
        values = {f.name: bool(flags & f.metadata["flag"]) for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**values)

    def to_flags(self) -> int:
        """Return the libclang bitmask for this option set."""
        flags = 0
        for f in fields(self):  # type: ignore[arg-type]
            if getattr(self, f.name):
                flags |= f.metadata["flag"]
        return flags


@dataclass(frozen=True, slots=True)
class ParseOptions(_FlagSet):
    """How a source file is parsed into a translation unit (CXTranslationUnit_Flags).

    Attributes:
        detailed_preprocessing_record: Record every macro definition and
            instantiation (required to see MACRO_DEFINITION cursors)
        incomplete: Treat the unit as incomplete, suppressing semantic
            analyses (used when building precompiled headers)
        cache_completion_results: Cache code completion results on reparse
        skip_function_bodies: Skip function and method bodies
        include_brief_comments_in_code_completion: Include brief
            documentation comments in code completion results
        keep_going: Keep parsing after fatal errors such as missing includes
    """

    detailed_preprocessing_record: bool = _flag(0x01)
    incomplete: bool = _flag(0x02)
    cache_completion_results: bool = _flag(0x08)
    skip_function_bodies: bool = _flag(0x40)
    include_brief_comments_in_code_completion: bool = _flag(0x80)
    keep_going: bool = _flag(0x200)


@dataclass(frozen=True, slots=True)
class FormatOptions(_FlagSet):
    """How a diagnostic is rendered (CXDiagnosticDisplayOptions).

    FormatOptions() has every flag off; libclang's own defaults come from
    Diagnostic.format() with no argument.

    Attributes:
        display_source_location: Prefix the text with file and line
        display_column: Include the column in the location prefix
        display_source_ranges: Include source ranges in the location prefix
        display_option: Append the controlling option, e.g. [-Wconversion]
        display_category_id: Append the category number
        display_category_name: Append the category name
    """

    display_source_location: bool = _flag(0x01)
    display_column: bool = _flag(0x02)
    display_source_ranges: bool = _flag(0x04)
    display_option: bool = _flag(0x08)
    display_category_id: bool = _flag(0x10)
    display_category_name: bool = _flag(0x20)


@dataclass(frozen=True, slots=True)
class BackgroundPriority(_FlagSet):
    """Which libclang thread kinds run at background priority (CXGlobalOptFlags).

    Attributes:
        indexing: Indexing threads
        editing: Editing threads (parse, reparse, code completion)
    """

    indexing: bool = _flag(0x01)
    editing: bool = _flag(0x02)
