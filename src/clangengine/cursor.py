"""Cursors (references to AST elements) and the types they carry.

Cursor equality is AST node identity (clang_equalCursors) and its hash is
clang_hashCursor, so equal cursors always hash equal. Queries that do not
apply to a cursor's kind raise QueryNotApplicableError rather than
returning a sentinel.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from clangengine.constants import INVALID_ACCESS_SPECIFIER, INVALID_LANGUAGE
from clangengine.decoder import check_layout, decode_handle
from clangengine.enums import AccessSpecifier, Availability, CursorKind, Language, VisitDirective
from clangengine.errors import LayoutFamily
from clangengine.handle import DerivedHandle
from clangengine.integrity import IntegrityContext, QueryNotApplicableError
from clangengine.marshal import ForeignSequence, adopt_array, adopt_string, adopt_string_optional
from clangengine.native import CXCursor, CXType

if TYPE_CHECKING:
    from clangengine.core.lifetime import Lease
    from clangengine.module import Module
    from clangengine.source import SourceLocation, SourceRange
    from clangengine.translation_unit import TranslationUnit

__all__ = ["Cursor", "Type"]

type CursorCallback = Callable[[Cursor, Cursor], VisitDirective]


class Cursor(DerivedHandle):
    """A reference to an element in the AST of a translation unit."""

    __slots__ = ("_raw",)

    def __init__(self, raw: CXCursor, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Wrap a raw cursor borrowed from tu."""
        super().__init__(tu, lease)
        self._raw = raw

    @property
    def raw(self) -> CXCursor:
        """Underlying CXCursor (validated)."""
        self._lease.validate("raw")
        return self._raw

    def _not_applicable(self, operation: str, requirement: str) -> QueryNotApplicableError:
        msg = f"{operation}() requires {requirement}"
        return QueryNotApplicableError(
            msg,
            IntegrityContext(
                component="Cursor",
                operation=operation,
                key=CursorKind(self._raw.kind).name,
                expected=requirement,
            ),
        )

    def _wrap_optional(self, raw: CXCursor) -> Cursor | None:
        if self._lib.clang_Cursor_isNull(raw) or self._lib.clang_isInvalid(raw.kind):
            return None
        return Cursor(raw, self._tu, self._lease)

    # ------------------------------------------------------------------
    # Kind and names
    # ------------------------------------------------------------------

    def get_kind(self) -> CursorKind:
        """Return the kind of AST element this cursor references."""
        self._lease.validate("get_kind")
        return CursorKind(self._raw.kind)

    def get_display_name(self) -> str | None:
        """Return the display name, e.g. "f(int, char)" for a function."""
        lib = self._native("get_display_name")
        return adopt_string_optional(lib, lib.clang_getCursorDisplayName(self._raw))

    def get_name(self) -> str | None:
        """Return the name of the referenced element, if any."""
        lib = self._native("get_name")
        return adopt_string_optional(lib, lib.clang_getCursorSpelling(self._raw))

    def get_mangled_name(self) -> str | None:
        """Return the mangled name, if any."""
        lib = self._native("get_mangled_name")
        return adopt_string_optional(lib, lib.clang_Cursor_getMangling(self._raw))

    def get_comment(self) -> str | None:
        """Return the raw documentation comment attached to the element, if any."""
        lib = self._native("get_comment")
        return adopt_string_optional(lib, lib.clang_Cursor_getRawCommentText(self._raw))

    def get_comment_brief(self) -> str | None:
        """Return the brief paragraph of the documentation comment, if any."""
        lib = self._native("get_comment_brief")
        return adopt_string_optional(lib, lib.clang_Cursor_getBriefCommentText(self._raw))

    def get_comment_range(self) -> SourceRange | None:
        """Return the source range of the documentation comment, if any."""
        from clangengine.source import SourceRange  # noqa: PLC0415 - circular

        lib = self._native("get_comment_range")
        raw = lib.clang_Cursor_getCommentRange(self._raw)
        if lib.clang_Range_isNull(raw):
            return None
        return SourceRange(raw, self._tu, self._lease)

    # ------------------------------------------------------------------
    # Semantic properties
    # ------------------------------------------------------------------

    def get_access_specifier(self) -> AccessSpecifier | None:
        """Return the C++ accessibility of the element, if it has one."""
        value = self._native("get_access_specifier").clang_getCXXAccessSpecifier(self._raw)
        return None if value == INVALID_ACCESS_SPECIFIER else AccessSpecifier(value)

    def get_availability(self) -> Availability:
        """Return the availability of the element."""
        return Availability(self._native("get_availability").clang_getCursorAvailability(self._raw))

    def get_language(self) -> Language:
        """Return the language of a declaration.

        Raises:
            QueryNotApplicableError: If the cursor is not a declaration
        """
        value = self._native("get_language").clang_getCursorLanguage(self._raw)
        if value == INVALID_LANGUAGE:
            raise self._not_applicable("get_language", "a cursor that refers to a declaration")
        return Language(value)

    def get_arguments(self) -> ForeignSequence[Cursor]:
        """Return the argument cursors of a function, method or call.

        The sequence is lazy; the applicability check runs on first use.

        Raises:
            QueryNotApplicableError: If the cursor is not a function, method
                or call (raised on first use of the sequence)
        """
        lib = self._native("get_arguments")

        def count() -> int:
            self._lease.validate("get_arguments")
            return int(lib.clang_Cursor_getNumArguments(self._raw))

        def element(i: int) -> Cursor:
            self._lease.validate("get_arguments")
            return Cursor(lib.clang_Cursor_getArgument(self._raw, i), self._tu, self._lease)

        return adopt_array(
            count,
            element,
            misuse="get_arguments() requires a cursor that refers to a function or a method",
        )

    def get_type(self) -> Type:
        """Return the type of the referenced element."""
        return Type(self._native("get_type").clang_getCursorType(self._raw), self._tu, self._lease)

    # ------------------------------------------------------------------
    # Related cursors
    # ------------------------------------------------------------------

    def get_canonical_cursor(self) -> Cursor:
        """Return the canonical declaration among redeclarations of the element."""
        raw = self._native("get_canonical_cursor").clang_getCanonicalCursor(self._raw)
        return Cursor(raw, self._tu, self._lease)

    def get_definition(self) -> Cursor | None:
        """Return the cursor of the element's definition, if any."""
        return self._wrap_optional(self._native("get_definition").clang_getCursorDefinition(self._raw))

    def get_lexical_parent(self) -> Cursor | None:
        """Return the lexical parent, if any."""
        lib = self._native("get_lexical_parent")
        return self._wrap_optional(lib.clang_getCursorLexicalParent(self._raw))

    def get_semantic_parent(self) -> Cursor | None:
        """Return the semantic parent, if any."""
        lib = self._native("get_semantic_parent")
        return self._wrap_optional(lib.clang_getCursorSemanticParent(self._raw))

    def get_reference(self) -> Cursor | None:
        """Return the element a reference or expression refers to, if any."""
        return self._wrap_optional(self._native("get_reference").clang_getCursorReferenced(self._raw))

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def get_location(self) -> SourceLocation:
        """Return the source location of the element.

        Raises:
            QueryNotApplicableError: If the cursor is the translation unit cursor
        """
        from clangengine.source import SourceLocation  # noqa: PLC0415 - circular

        lib = self._native("get_location")
        if self._raw.kind == CursorKind.TRANSLATION_UNIT:
            raise self._not_applicable("get_location", "a cursor other than the translation unit")
        return SourceLocation(lib.clang_getCursorLocation(self._raw), self._tu, self._lease)

    def get_range(self) -> SourceRange:
        """Return the source extent of the element.

        Raises:
            QueryNotApplicableError: If the cursor is the translation unit cursor
        """
        from clangengine.source import SourceRange  # noqa: PLC0415 - circular

        lib = self._native("get_range")
        if self._raw.kind == CursorKind.TRANSLATION_UNIT:
            raise self._not_applicable("get_range", "a cursor other than the translation unit")
        return SourceRange(lib.clang_getCursorExtent(self._raw), self._tu, self._lease)

    def get_name_ranges(self) -> list[SourceRange]:
        """Return the source ranges of the element's name pieces.

        Objective-C selectors and C++ operator names can span several pieces.
        """
        from clangengine.source import SourceRange  # noqa: PLC0415 - circular

        lib = self._native("get_name_ranges")
        ranges: list[SourceRange] = []
        piece = 0
        while True:
            raw = lib.clang_Cursor_getSpellingNameRange(self._raw, piece, 0)
            if lib.clang_Range_isNull(raw):
                break
            candidate = SourceRange(raw, self._tu, self._lease)
            if candidate.get_start().get_spelling_location().file is None:
                break
            ranges.append(candidate)
            piece += 1
        return ranges

    def get_module(self) -> Module:
        """Return the module imported by a module import declaration.

        Raises:
            QueryNotApplicableError: If the cursor is not a module import
        """
        from clangengine.module import Module  # noqa: PLC0415 - circular

        ptr = decode_handle(self._native("get_module").clang_Cursor_getModule(self._raw))
        if ptr is None:
            raise self._not_applicable("get_module", "a module import declaration")
        return Module(ptr, self._tu, self._lease)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_anonymous(self) -> bool:
        """Whether the cursor is an anonymous record declaration."""
        return bool(self._native("is_anonymous").clang_Cursor_isAnonymous(self._raw))

    def is_bit_field(self) -> bool:
        """Whether the cursor is a bit field."""
        return bool(self._native("is_bit_field").clang_Cursor_isBitField(self._raw))

    def is_const_method(self) -> bool:
        """Whether the cursor is a const C++ method."""
        return bool(self._native("is_const_method").clang_CXXMethod_isConst(self._raw))

    def is_dynamic_call(self) -> bool:
        """Whether the cursor is a virtual call or an instance message send."""
        return bool(self._native("is_dynamic_call").clang_Cursor_isDynamicCall(self._raw))

    def is_pure_virtual_method(self) -> bool:
        """Whether the cursor is a pure virtual C++ method."""
        return bool(self._native("is_pure_virtual_method").clang_CXXMethod_isPureVirtual(self._raw))

    def is_static_method(self) -> bool:
        """Whether the cursor is a static C++ method."""
        return bool(self._native("is_static_method").clang_CXXMethod_isStatic(self._raw))

    def is_variadic(self) -> bool:
        """Whether the cursor is a variadic function or method."""
        return bool(self._native("is_variadic").clang_Cursor_isVariadic(self._raw))

    def is_virtual_method(self) -> bool:
        """Whether the cursor is a virtual C++ method."""
        return bool(self._native("is_virtual_method").clang_CXXMethod_isVirtual(self._raw))

    # ------------------------------------------------------------------
    # Visitation
    # ------------------------------------------------------------------

    def visit_children(self, callback: CursorCallback) -> bool:
        """Walk the children with callback(cursor, parent) -> VisitDirective.

        Returns:
            True if the walk was stopped by VisitDirective.BREAK
        """
        from clangengine.visitation import visit_children  # noqa: PLC0415 - circular

        return visit_children(self, callback)

    def get_children(self) -> list[Cursor]:
        """Return the direct children in traversal order."""
        from clangengine.visitation import get_children  # noqa: PLC0415 - circular

        return get_children(self)

    def get_descendants(self) -> list[Cursor]:
        """Return every descendant in pre-order."""
        from clangengine.visitation import get_descendants  # noqa: PLC0415 - circular

        return get_descendants(self)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        """Whether both cursors reference the same AST node."""
        if not isinstance(other, Cursor):
            return NotImplemented
        return bool(self._native("__eq__").clang_equalCursors(self._raw, other._raw))

    def __hash__(self) -> int:
        """Hash consistent with AST node identity."""
        return int(self._native("__hash__").clang_hashCursor(self._raw))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if not self._lease.valid:
            return "Cursor(<stale>)"
        kind = self.get_kind()
        location = ""
        if kind != CursorKind.TRANSLATION_UNIT:
            spelled = self.get_location().get_spelling_location()
            location = f", line={spelled.line}, column={spelled.column}"
        return f"Cursor({kind.name}, {self.get_display_name()!r}{location})"


class Type(DerivedHandle):
    """The type of an AST element."""

    __slots__ = ("_raw",)

    def __init__(self, raw: CXType, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Wrap a raw type borrowed from tu."""
        super().__init__(tu, lease)
        self._raw = raw

    @property
    def kind(self) -> int:
        """Raw CXTypeKind value."""
        self._lease.validate("kind")
        return int(self._raw.kind)

    def get_kind_spelling(self) -> str:
        """Return the name of the type kind, e.g. "Int" or "Pointer"."""
        lib = self._native("get_kind_spelling")
        return adopt_string(lib, lib.clang_getTypeKindSpelling(self._raw.kind))

    def get_display_name(self) -> str:
        """Return the spelling of the type, e.g. "const char *"."""
        lib = self._native("get_display_name")
        return adopt_string(lib, lib.clang_getTypeSpelling(self._raw))

    def get_canonical_type(self) -> Type:
        """Return the type with typedefs and sugar removed."""
        raw = self._native("get_canonical_type").clang_getCanonicalType(self._raw)
        return Type(raw, self._tu, self._lease)

    def get_declaration(self) -> Cursor | None:
        """Return the declaration of the type, if it has one."""
        lib = self._native("get_declaration")
        raw = lib.clang_getTypeDeclaration(self._raw)
        if lib.clang_Cursor_isNull(raw) or lib.clang_isInvalid(raw.kind):
            return None
        return Cursor(raw, self._tu, self._lease)

    def get_sizeof(self) -> int:
        """Return the size of the type in bytes.

        Raises:
            SizeofError: If the type is invalid, incomplete, dependent,
                variable size or undeduced
        """
        value = self._native("get_sizeof").clang_Type_getSizeOf(self._raw)
        return check_layout(value, LayoutFamily.SIZEOF, type_name=self.get_display_name())

    def get_alignof(self) -> int:
        """Return the alignment of the type in bytes.

        Raises:
            AlignofError: If the type is invalid, incomplete, dependent or undeduced
        """
        value = self._native("get_alignof").clang_Type_getAlignOf(self._raw)
        return check_layout(value, LayoutFamily.ALIGNOF, type_name=self.get_display_name())

    def get_offsetof(self, field: str) -> int:
        """Return the offset of a field of this record type in bits.

        Raises:
            OffsetofError: If the record is invalid, incomplete, dependent or
                undeduced, or has no field with that name
        """
        value = self._native("get_offsetof").clang_Type_getOffsetOf(
            self._raw, field.encode("utf-8")
        )
        return check_layout(
            value, LayoutFamily.OFFSETOF, type_name=self.get_display_name(), field=field
        )

    def __eq__(self, other: object) -> bool:
        """Whether both handles denote the same type."""
        if not isinstance(other, Type):
            return NotImplemented
        return bool(self._native("__eq__").clang_equalTypes(self._raw, other._raw))

    def __hash__(self) -> int:
        """Hash on kind and spelling.

        clang_equalTypes compares the exact, possibly sugared, type: a typedef
        and its canonical type are unequal, and both their kinds and their
        spellings differ. Types it reports equal are one type, so they always
        share kind and spelling. Distinct types that happen to spell the same
        only collide in the hash.
        """
        return hash((self.kind, self.get_display_name()))

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if not self._lease.valid:
            return "Type(<stale>)"
        return f"Type({self.get_display_name()!r}, kind={self._raw.kind})"
