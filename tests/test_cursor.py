"""Tests for cursor.py: cursor queries, identity and types.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from clangengine import (
    Cursor,
    CursorKind,
    EngineToken,
    Index,
    Language,
    OffsetofError,
    QueryNotApplicableError,
    SizeofError,
    TranslationUnit,
)
from clangengine.errors import LayoutErrorKind

pytestmark = pytest.mark.libclang


def find(tu: TranslationUnit, name: str) -> Cursor:
    for cursor in tu.get_cursor().get_children():
        if cursor.get_name() == name:
            return cursor
    msg = f"no top-level declaration named {name}"
    raise LookupError(msg)


class TestCursorQueries:
    """Names, kinds and related cursors."""

    def test_kinds_and_names(self, sample_tu: TranslationUnit) -> None:
        """Top-level declarations are reported in source order."""
        children = sample_tu.get_cursor().get_children()

        assert [(c.get_kind(), c.get_name()) for c in children] == [
            (CursorKind.STRUCT_DECL, "point"),
            (CursorKind.FUNCTION_DECL, "add"),
            (CursorKind.FUNCTION_DECL, "scale"),
        ]

    def test_display_name(self, sample_tu: TranslationUnit) -> None:
        """Function display names include parameter types."""
        assert find(sample_tu, "add").get_display_name() == "add(int, int)"

    def test_arguments(self, sample_tu: TranslationUnit) -> None:
        """Function arguments are exposed lazily and in order."""
        arguments = find(sample_tu, "add").get_arguments()

        assert len(arguments) == 2
        assert [a.get_name() for a in arguments] == ["a", "b"]
        assert all(a.get_kind() is CursorKind.PARM_DECL for a in arguments)

    def test_arguments_not_applicable(self, sample_tu: TranslationUnit) -> None:
        """A struct has no argument list."""
        arguments = find(sample_tu, "point").get_arguments()

        with pytest.raises(QueryNotApplicableError):
            len(arguments)

    def test_language(self, sample_tu: TranslationUnit) -> None:
        """Declarations in a .c file are C."""
        assert find(sample_tu, "add").get_language() is Language.C

    def test_language_not_applicable(self, sample_tu: TranslationUnit) -> None:
        """The translation unit cursor is not a declaration."""
        with pytest.raises(QueryNotApplicableError) as exc_info:
            sample_tu.get_cursor().get_language()
        assert exc_info.value.context is not None
        assert exc_info.value.context.operation == "get_language"

    def test_translation_unit_has_no_location(self, sample_tu: TranslationUnit) -> None:
        """Location and range queries reject the root cursor."""
        root = sample_tu.get_cursor()
        with pytest.raises(QueryNotApplicableError):
            root.get_location()
        with pytest.raises(QueryNotApplicableError):
            root.get_range()

    def test_location(self, sample_tu: TranslationUnit) -> None:
        """The function name is located at line 6, column 5."""
        spelled = find(sample_tu, "add").get_location().get_spelling_location()

        assert (spelled.line, spelled.column) == (6, 5)
        assert spelled.file is not None
        assert spelled.file.get_path().name == "sample.c"

    def test_semantic_parent(self, sample_tu: TranslationUnit) -> None:
        """Top-level declarations belong to the translation unit."""
        parent = find(sample_tu, "add").get_semantic_parent()
        assert parent == sample_tu.get_cursor()

    def test_reference_and_definition(self, sample_tu: TranslationUnit) -> None:
        """The call to add() refers to its definition."""
        calls = [
            c for c in find(sample_tu, "scale").get_descendants()
            if c.get_kind() is CursorKind.CALL_EXPR
        ]
        assert len(calls) == 1

        referenced = calls[0].get_reference()
        assert referenced == find(sample_tu, "add")
        assert referenced is not None
        assert referenced.get_definition() == referenced

    def test_missing_relations_are_none(self, sample_tu: TranslationUnit) -> None:
        """A declaration refers to nothing and has no comment."""
        point = find(sample_tu, "point")
        assert point.get_comment() is None
        assert sample_tu.get_cursor().get_reference() is None

    def test_module_not_applicable(self, sample_tu: TranslationUnit) -> None:
        """Only module imports have a module."""
        with pytest.raises(QueryNotApplicableError):
            find(sample_tu, "add").get_module()

    def test_predicates(self, sample_tu: TranslationUnit) -> None:
        """Predicates answer without raising on plain C declarations."""
        add = find(sample_tu, "add")
        assert not add.is_variadic()
        assert not add.is_anonymous()
        assert not add.is_bit_field()


class TestCursorIdentity:
    """Equality is node identity; equal cursors hash equal."""

    def test_same_node_reached_twice(self, sample_tu: TranslationUnit) -> None:
        """Two walks yield equal cursors with equal hashes."""
        first = find(sample_tu, "scale")
        second = find(sample_tu, "scale")

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_distinct_nodes_differ(self, sample_tu: TranslationUnit) -> None:
        """Different declarations compare unequal."""
        assert find(sample_tu, "add") != find(sample_tu, "scale")

    def test_canonical_cursor(self, sample_tu: TranslationUnit) -> None:
        """A single declaration is its own canonical cursor."""
        add = find(sample_tu, "add")
        assert add.get_canonical_cursor() == add

    def test_repr(self, sample_tu: TranslationUnit) -> None:
        """repr shows kind, name and location."""
        expected = "Cursor(FUNCTION_DECL, 'add(int, int)', line=6, column=5)"
        assert repr(find(sample_tu, "add")) == expected


class TestType:
    """Types and layout queries."""

    def test_struct_layout(self, sample_tu: TranslationUnit) -> None:
        """struct point is two ints."""
        point = find(sample_tu, "point").get_type()

        assert point.get_display_name() == "struct point"
        assert point.get_sizeof() == 8
        assert point.get_alignof() == 4
        assert point.get_offsetof("y") == 32

    def test_offsetof_unknown_field(self, sample_tu: TranslationUnit) -> None:
        """A missing field raises OffsetofError with kind INVALID_FIELD_NAME."""
        with pytest.raises(OffsetofError) as exc_info:
            find(sample_tu, "point").get_type().get_offsetof("z")
        assert exc_info.value.kind is LayoutErrorKind.INVALID_FIELD_NAME

    def test_incomplete_type(self, index: Index, write_source: Callable[..., Path]) -> None:
        """sizeof of a forward-declared struct is INCOMPLETE."""
        path = write_source("struct opaque;\n", "opaque.c")

        with TranslationUnit.from_source(index, path) as tu:
            opaque = find(tu, "opaque").get_type()
            with pytest.raises(SizeofError) as exc_info:
                opaque.get_sizeof()
            assert exc_info.value.kind is LayoutErrorKind.INCOMPLETE
            assert "struct opaque" in str(exc_info.value)

    def test_declaration_round_trip(self, sample_tu: TranslationUnit) -> None:
        """A record type's declaration is the struct cursor."""
        point = find(sample_tu, "point")
        assert point.get_type().get_declaration() == point

    def test_builtin_type_has_no_declaration(self, sample_tu: TranslationUnit) -> None:
        """int has no declaration."""
        argument = find(sample_tu, "add").get_arguments()[0]
        int_type = argument.get_type()

        assert int_type.get_display_name() == "int"
        assert int_type.get_kind_spelling() == "Int"
        assert int_type.get_declaration() is None

    def test_type_equality(self, sample_tu: TranslationUnit) -> None:
        """Both parameters of add() have the same type."""
        a, b = find(sample_tu, "add").get_arguments()
        assert a.get_type() == b.get_type()
        assert hash(a.get_type()) == hash(b.get_type())
        assert a.get_type().get_canonical_type() == a.get_type()


class TestCursorKindCategories:
    """Category predicates classify kinds without an engine token."""

    @pytest.mark.parametrize(
        ("kind", "predicate"),
        [
            (CursorKind.FUNCTION_DECL, CursorKind.is_declaration),
            (CursorKind.TYPE_REF, CursorKind.is_reference),
            (CursorKind.CALL_EXPR, CursorKind.is_expression),
            (CursorKind.COMPOUND_STMT, CursorKind.is_statement),
            (CursorKind.UNEXPOSED_ATTR, CursorKind.is_attribute),
            (CursorKind.MACRO_DEFINITION, CursorKind.is_preprocessing),
            (CursorKind.UNEXPOSED_EXPR, CursorKind.is_unexposed),
        ],
    )
    def test_category(self, kind: CursorKind, predicate: Callable[[CursorKind], bool]) -> None:
        """Each kind falls in its libclang category."""
        assert predicate(kind)

    def test_categories_are_exclusive_for_plain_kinds(self) -> None:
        """A declaration is not also an expression or a statement."""
        kind = CursorKind.VAR_DECL
        assert kind.is_declaration()
        assert not kind.is_expression()
        assert not kind.is_statement()

    def test_no_token_needed(self) -> None:
        """Predicates neither require nor take the engine token."""
        assert EngineToken.is_available()

        assert CursorKind.RETURN_STMT.is_statement()
        assert EngineToken.is_available()

    def test_with_live_token(self, sample_tu: TranslationUnit) -> None:
        """Kinds read from live cursors classify the same way."""
        kinds = {c.get_kind() for c in sample_tu.get_cursor().get_descendants()}

        assert CursorKind.BINARY_OPERATOR in kinds
        assert CursorKind.BINARY_OPERATOR.is_expression()
        assert all(k.is_declaration() for k in kinds if k.name.endswith("_DECL"))


class TestTypeHashing:
    """Type hashing agrees with clang_equalTypes for sugared types."""

    def test_typedef_and_canonical(self, index: Index, write_source: Callable[..., Path]) -> None:
        """A typedef differs from its canonical type; the canonical form equals int."""
        path = write_source("typedef int myint;\nmyint v;\nint w;\n", "sugar.c")

        with TranslationUnit.from_source(index, path) as tu:
            sugared = find(tu, "v").get_type()
            plain = find(tu, "w").get_type()

            assert sugared != plain
            assert sugared.get_display_name() == "myint"
            canonical = sugared.get_canonical_type()
            assert canonical == plain
            assert hash(canonical) == hash(plain)
            assert len({sugared, plain, canonical}) == 2
