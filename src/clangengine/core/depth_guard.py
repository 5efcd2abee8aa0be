"""Nesting limit for CursorVisitor.generic_visit().

CursorVisitor recurses on the Python stack, one visit()/generic_visit() pair
per AST level. Generated code and deep template instantiations can nest far
enough to hit RecursionError, so the visitor enters a DepthGuard per level
and fails with a typed error instead.

Walks driven by clang_visitChildren recurse inside libclang and never reach
this module.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from clangengine.constants import MAX_VISIT_DEPTH
from clangengine.errors import ClangError
from clangengine.errors.templates import ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]

logger = logging.getLogger(__name__)

# Frames kept free for the caller, pytest and logging machinery.
_RESERVED_FRAMES = 50

# visit() plus generic_visit() per level.
_FRAMES_PER_LEVEL = 2


class DepthLimitExceededError(ClangError):
    """A cursor visitor nested deeper than its max_depth."""


@dataclass(slots=True)
class DepthGuard:
    """Counts visitor nesting; entering past max_depth raises.

    One guard is owned by each CursorVisitor instance and shared by every
    level of its walk:

        with self._depth_guard:
            for child in get_children(cursor):
                self.visit(child)

    Attributes:
        max_depth: Deepest nesting allowed, clamped to the recursion limit
        current_depth: Levels currently entered
    """

    max_depth: int = MAX_VISIT_DEPTH
    current_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.max_depth = depth_clamp(self.max_depth)

    def __enter__(self) -> DepthGuard:
        # Check before counting: __exit__ does not run when __enter__ raises.
        self.check()
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.current_depth -= 1

    def check(self) -> None:
        """Raise if one more level would exceed max_depth.

        Raises:
            DepthLimitExceededError: With a MAX_DEPTH_EXCEEDED detail
        """
        if self.current_depth >= self.max_depth:
            raise DepthLimitExceededError(ErrorTemplate.visit_depth_exceeded(self.max_depth))


def depth_clamp(requested_depth: int) -> int:
    """Bound a requested visitor depth by what the interpreter stack allows.

    Args:
        requested_depth: Desired max_depth

    Returns:
        requested_depth, or the largest depth that fits under
        sys.getrecursionlimit() (logged at WARNING)
    """
    limit = sys.getrecursionlimit()
    budget = (limit - _RESERVED_FRAMES) // _FRAMES_PER_LEVEL
    if requested_depth <= budget:
        return requested_depth
    logger.warning(
        "Visit depth %d does not fit recursion limit %d; using %d",
        requested_depth,
        limit,
        budget,
    )
    return budget
