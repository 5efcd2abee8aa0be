"""Tests for visitation.py: callback-driven and visitor-driven traversal.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from clangengine import (
    ContractViolationError,
    Cursor,
    CursorKind,
    CursorVisitor,
    DepthLimitExceededError,
    TranslationUnit,
    VisitDirective,
)
from clangengine.visitation import _dispatch, get_children, get_descendants, visit_children


class TestDispatch:
    """Callback results are validated before reaching libclang."""

    @pytest.mark.parametrize("directive", list(VisitDirective))
    def test_directive_values(self, directive: VisitDirective) -> None:
        """Directives map to their CXChildVisitResult values."""
        assert _dispatch(directive) == directive.value

    @pytest.mark.parametrize("result", [None, 1, "continue", True])
    def test_non_directive_raises(self, result: object) -> None:
        """Anything but a VisitDirective is a TypeError."""
        with pytest.raises(TypeError, match="VisitDirective"):
            _dispatch(result)

    def test_directive_order(self) -> None:
        """BREAK, CONTINUE and RECURSE keep libclang's numbering."""
        assert [d.value for d in VisitDirective] == [0, 1, 2]


@pytest.mark.libclang
class TestVisitChildren:
    """clang_visitChildren driven by a Python callback."""

    def test_continue_matches_children(self, sample_tu: TranslationUnit) -> None:
        """CONTINUE on every node visits exactly the direct children."""
        root = sample_tu.get_cursor()
        seen: list[Cursor] = []

        def collect(cursor: Cursor, parent: Cursor) -> VisitDirective:
            assert parent == root
            seen.append(cursor)
            return VisitDirective.CONTINUE

        stopped = root.visit_children(collect)

        assert stopped is False
        assert seen == get_children(root)
        assert len(seen) == 3

    def test_break_on_first(self, sample_tu: TranslationUnit) -> None:
        """BREAK stops after one callback and reports the stop."""
        calls: list[Cursor] = []

        def first_only(cursor: Cursor, _parent: Cursor) -> VisitDirective:
            calls.append(cursor)
            return VisitDirective.BREAK

        assert visit_children(sample_tu.get_cursor(), first_only) is True
        assert len(calls) == 1

    def test_recurse_visits_every_node_once(self, sample_tu: TranslationUnit) -> None:
        """RECURSE yields each descendant exactly once, in pre-order."""
        descendants = get_descendants(sample_tu.get_cursor())

        assert len(descendants) == len(set(descendants))
        kinds = [c.get_kind() for c in descendants]
        assert kinds[0] is CursorKind.STRUCT_DECL
        assert kinds[1:3] == [CursorKind.FIELD_DECL, CursorKind.FIELD_DECL]
        assert kinds.count(CursorKind.FUNCTION_DECL) == 2
        assert kinds.count(CursorKind.PARM_DECL) == 4

    def test_nested_visit_from_callback(self, sample_tu: TranslationUnit) -> None:
        """A callback may walk another subtree; each walk keeps its own callback."""
        inner_counts: dict[str | None, int] = {}
        pins_seen: list[bool] = []

        def count_children(cursor: Cursor, _parent: Cursor) -> VisitDirective:
            inner_counts[cursor.get_name()] = 0

            def tally(_child: Cursor, _inner_parent: Cursor) -> VisitDirective:
                inner_counts[cursor.get_name()] += 1
                pins_seen.append(sample_tu.lifetime.pinned)
                return VisitDirective.CONTINUE

            assert cursor.visit_children(tally) is False
            return VisitDirective.BREAK if cursor.get_name() == "add" else VisitDirective.CONTINUE

        stopped = sample_tu.get_cursor().visit_children(count_children)

        assert stopped is True
        assert inner_counts == {"point": 2, "add": 3}
        assert all(pins_seen)
        assert not sample_tu.lifetime.pinned

    def test_exception_propagates(self, sample_tu: TranslationUnit) -> None:
        """An exception in the callback stops the walk and is re-raised."""
        calls = 0

        def explode(_cursor: Cursor, _parent: Cursor) -> VisitDirective:
            nonlocal calls
            calls += 1
            raise KeyError("boom")

        with pytest.raises(KeyError, match="boom"):
            sample_tu.get_cursor().visit_children(explode)
        assert calls == 1

    def test_wrong_return_type_propagates(self, sample_tu: TranslationUnit) -> None:
        """Returning a plain int is rejected with TypeError."""
        with pytest.raises(TypeError):
            sample_tu.get_cursor().visit_children(lambda _c, _p: 1)  # type: ignore[arg-type,return-value]

    def test_close_during_visit_raises(self, sample_tu: TranslationUnit) -> None:
        """Closing the unit from inside a callback is a contract violation."""

        def close_unit(_cursor: Cursor, _parent: Cursor) -> VisitDirective:
            sample_tu.close()
            return VisitDirective.CONTINUE

        with pytest.raises(ContractViolationError, match="in flight"):
            sample_tu.get_cursor().visit_children(close_unit)

        assert sample_tu.is_alive
        assert len(get_children(sample_tu.get_cursor())) == 3

    def test_reparse_during_visit_raises(self, sample_tu: TranslationUnit) -> None:
        """Reparsing from inside a callback is a contract violation."""

        def reparse_unit(_cursor: Cursor, _parent: Cursor) -> VisitDirective:
            sample_tu.reparse()
            return VisitDirective.CONTINUE

        with pytest.raises(ContractViolationError):
            sample_tu.get_cursor().visit_children(reparse_unit)
        assert sample_tu.generation == 0

    def test_cursors_usable_after_walk(self, sample_tu: TranslationUnit) -> None:
        """Cursors collected during a walk remain valid until reparse."""
        children = sample_tu.get_cursor().get_children()

        assert [c.get_name() for c in children] == ["point", "add", "scale"]


@pytest.mark.libclang
class TestCursorVisitor:
    """ast.NodeVisitor-style traversal."""

    def test_dispatch_by_kind(self, sample_tu: TranslationUnit) -> None:
        """visit_<kind> methods are called; others fall back to generic_visit."""

        class Collector(CursorVisitor):
            __slots__ = ("fields", "functions")

            def __init__(self) -> None:
                super().__init__()
                self.functions: list[str | None] = []
                self.fields: list[str | None] = []

            def visit_function_decl(self, cursor: Cursor) -> None:
                self.functions.append(cursor.get_name())
                self.generic_visit(cursor)

            def visit_field_decl(self, cursor: Cursor) -> None:
                self.fields.append(cursor.get_name())

        collector = Collector()
        collector.visit(sample_tu.get_cursor())

        assert collector.functions == ["add", "scale"]
        assert collector.fields == ["x", "y"]

    def test_depth_limit(self, sample_tu: TranslationUnit) -> None:
        """Nesting deeper than max_depth raises DepthLimitExceededError."""

        class Walker(CursorVisitor):
            __slots__ = ()

        with pytest.raises(DepthLimitExceededError):
            Walker(max_depth=2).visit(sample_tu.get_cursor())

    def test_shallow_tree_within_limit(self, sample_tu: TranslationUnit) -> None:
        """The sample tree fits within the default depth."""

        class Counter(CursorVisitor):
            __slots__ = ("count",)

            def __init__(self) -> None:
                super().__init__()
                self.count = 0

            def generic_visit(self, cursor: Cursor) -> None:
                self.count += 1
                super().generic_visit(cursor)

        counter = Counter()
        counter.visit(sample_tu.get_cursor())

        assert counter.count == len(get_descendants(sample_tu.get_cursor())) + 1
