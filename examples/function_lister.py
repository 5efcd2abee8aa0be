"""Function Lister Example - Demonstrating the CursorVisitor API.

Lists every function definition in a C or C++ file together with its
signature, location and argument count, in the manner of ast.NodeVisitor.

Usage:
    python examples/function_lister.py path/to/file.c [-- compiler args...]

Python 3.13+.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from clangengine import Cursor, CursorVisitor, EngineToken, Index, TranslationUnit


@dataclass(frozen=True, slots=True)
class FunctionInfo:
    """One function definition found in the main file."""

    signature: str
    line: int
    arguments: int


class FunctionLister(CursorVisitor):
    """Collect function definitions from the main file only."""

    __slots__ = ("functions",)

    def __init__(self) -> None:
        super().__init__()
        self.functions: list[FunctionInfo] = []

    def visit_function_decl(self, cursor: Cursor) -> None:
        location = cursor.get_location()
        if not location.is_in_main_file() or cursor.get_definition() != cursor:
            return
        self.functions.append(
            FunctionInfo(
                signature=cursor.get_display_name() or "<anonymous>",
                line=location.get_spelling_location().line,
                arguments=len(cursor.get_arguments()),
            )
        )

    visit_method = visit_function_decl


def main(argv: list[str]) -> int:
    if not argv:
        print(__doc__)
        return 2
    path = Path(argv[0])
    arguments = argv[2:] if argv[1:2] == ["--"] else []

    with EngineToken.acquire() as token, Index(token) as index:
        with TranslationUnit.from_source(index, path, arguments) as tu:
            lister = FunctionLister()
            lister.visit(tu.get_cursor())

    for info in lister.functions:
        print(f"{path.name}:{info.line}: {info.signature} ({info.arguments} argument(s))")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
