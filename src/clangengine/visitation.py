"""Cursor traversal.

Two styles are offered:

- visit_children(): libclang drives the walk (clang_visitChildren) and a
  callback steers it with a VisitDirective per cursor
- CursorVisitor: Python drives the walk, dispatching to visit_<kind>
  methods in the manner of ast.NodeVisitor

Callback Contract:
    callback(cursor, parent) -> VisitDirective. Anything else raises
    TypeError. An exception raised by the callback stops the walk and is
    re-raised from visit_children() once libclang has returned; it never
    unwinds through native frames. While the walk is in flight the unit
    cannot be closed or reparsed (ContractViolationError).

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from clangengine.constants import MAX_VISIT_DEPTH
from clangengine.core.depth_guard import DepthGuard
from clangengine.cursor import Cursor
from clangengine.enums import CursorKind, VisitDirective
from clangengine.native import CXCursor, CXCursorVisitor

if TYPE_CHECKING:
    from clangengine.core.lifetime import Lease
    from clangengine.translation_unit import TranslationUnit

__all__ = ["CursorVisitor", "get_children", "get_descendants", "visit_children"]

logger = logging.getLogger(__name__)

type VisitCallback = Callable[[Cursor, Cursor], VisitDirective]


@dataclass(slots=True)
class _VisitFrame:
    """Per-walk state handed to the trampoline as client data."""

    callback: VisitCallback
    tu: TranslationUnit
    lease: Lease
    error: BaseException | None = None


def _dispatch(result: object) -> int:
    """Convert a callback result to the CXChildVisitResult libclang expects.

    Raises:
        TypeError: If result is not a VisitDirective
    """
    if not isinstance(result, VisitDirective):
        msg = f"Visit callback must return a VisitDirective, got {type(result).__name__}"
        raise TypeError(msg)
    return int(result)


@CXCursorVisitor
def _trampoline(raw: CXCursor, raw_parent: CXCursor, frame: _VisitFrame) -> int:
    try:
        cursor = Cursor(CXCursor.from_buffer_copy(raw), frame.tu, frame.lease)
        parent = Cursor(CXCursor.from_buffer_copy(raw_parent), frame.tu, frame.lease)
        return _dispatch(frame.callback(cursor, parent))
    except BaseException as e:  # noqa: BLE001 - re-raised by visit_children
        frame.error = e
        return int(VisitDirective.BREAK)


def visit_children(cursor: Cursor, callback: VisitCallback) -> bool:
    """Walk the children of cursor, letting callback steer.

    Args:
        cursor: Cursor whose children are visited
        callback: Called as callback(child, parent) for each cursor reached

    Returns:
        True if the walk was stopped by VisitDirective.BREAK (or by an
        exception, which is re-raised instead)

    Raises:
        TypeError: If callback returns anything but a VisitDirective
        StaleHandleError: If cursor's unit was closed or reparsed
    """
    raw = cursor.raw
    tu = cursor.get_translation_unit()
    lifetime = tu.lifetime
    frame = _VisitFrame(callback, tu, lifetime.lease())
    with lifetime.pin():
        stopped = tu.library.clang_visitChildren(raw, _trampoline, frame)
    if frame.error is not None:
        logger.debug("Visitation stopped by %s", type(frame.error).__name__)
        raise frame.error
    return bool(stopped)


def get_children(cursor: Cursor) -> list[Cursor]:
    """Return the direct children of cursor in traversal order."""
    children: list[Cursor] = []

    def collect(child: Cursor, _parent: Cursor) -> VisitDirective:
        children.append(child)
        return VisitDirective.CONTINUE

    visit_children(cursor, collect)
    return children


def get_descendants(cursor: Cursor) -> list[Cursor]:
    """Return every descendant of cursor in pre-order (cursor excluded)."""
    descendants: list[Cursor] = []

    def collect(child: Cursor, _parent: Cursor) -> VisitDirective:
        descendants.append(child)
        return VisitDirective.RECURSE

    visit_children(cursor, collect)
    return descendants


class CursorVisitor:
    """Base visitor for walking a cursor tree from Python.

    Follows stdlib ast.NodeVisitor convention: generic_visit() traverses all
    children. Override visit_<kind> methods, named after the CursorKind
    member in lower case, to add behavior for a kind.

    Uses class-level dispatch table for performance:
    - Dispatch table built once per class definition via __init_subclass__
    - Bound methods cached per CursorKind on first use

    Example:
        >>> class FunctionCollector(CursorVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.names = []
        ...
        ...     def visit_function_decl(self, cursor):
        ...         self.names.append(cursor.get_name())
        ...         self.generic_visit(cursor)
        ...
        >>> collector = FunctionCollector()
        >>> collector.visit(tu.get_cursor())
    """

    __slots__ = ("_depth_guard", "_instance_dispatch_cache")

    # Maps CursorKind member name to method name; built per subclass
    _class_visit_methods: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Build class-level dispatch table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {}
        for name in dir(cls):
            if name.startswith("visit_"):
                cls._class_visit_methods[name[6:].upper()] = name

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize visitor with depth guard and dispatch cache.

        Subclasses MUST call super().__init__().

        Args:
            max_depth: Maximum nesting depth (default: MAX_VISIT_DEPTH)
        """
        self._depth_guard = DepthGuard(
            max_depth=max_depth if max_depth is not None else MAX_VISIT_DEPTH
        )
        self._instance_dispatch_cache: dict[CursorKind, Callable[[Cursor], None]] = {}

    def visit(self, cursor: Cursor) -> None:
        """Dispatch cursor to visit_<kind> or generic_visit."""
        kind = cursor.get_kind()
        method = self._instance_dispatch_cache.get(kind)
        if method is None:
            method_name = self._class_visit_methods.get(kind.name)
            method = getattr(self, method_name) if method_name else self.generic_visit
            self._instance_dispatch_cache[kind] = method
        method(cursor)

    def generic_visit(self, cursor: Cursor) -> None:
        """Visit every child of cursor, with depth protection.

        Raises:
            DepthLimitExceededError: If nesting exceeds max_depth
        """
        with self._depth_guard:
            for child in get_children(cursor):
                self.visit(child)
