"""Quickstart example for clangengine.

This example parses a small C file, prints its diagnostics (with fix-its),
walks the AST and queries type layout.

Note: Requires a loadable libclang. The 'libclang' package bundles one;
otherwise set CLANGENGINE_LIBCLANG_PATH to the shared library.
"""

import logging
import tempfile
from pathlib import Path

from clangengine import (
    CursorKind,
    Deletion,
    EngineToken,
    Index,
    Insertion,
    Replacement,
    StaleHandleError,
    TranslationUnit,
    VisitDirective,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

SOURCE = """\
struct point { int x; int y; };

int add(int a, int b) {
    return a + b
}
"""

with tempfile.TemporaryDirectory() as tmp:
    path = Path(tmp) / "example.c"
    path.write_text(SOURCE, encoding="utf-8")

    with EngineToken.acquire() as token, Index(token) as index:
        print(token.version)
        tu = TranslationUnit.from_source(index, path, ["-std=c11"])

        # Example 1: Diagnostics and fix-its
        print("=" * 50)
        print("Example 1: Diagnostics")
        print("=" * 50)

        for diagnostic in tu.get_diagnostics():
            print(diagnostic)
            for fix in diagnostic.get_fix_its():
                match fix:
                    case Insertion(location=location, text=text):
                        spelled = location.get_spelling_location()
                        print(f"  fix: insert {text!r} at {spelled.line}:{spelled.column}")
                    case Replacement(text=text):
                        print(f"  fix: replace with {text!r}")
                    case Deletion():
                        print("  fix: delete")
        # Output: example.c:4:17: error: expected ';' after return statement
        #   fix: insert ';' at 4:17

        # Example 2: Walking the AST
        print("\n" + "=" * 50)
        print("Example 2: Declarations")
        print("=" * 50)

        def show(cursor, parent):
            depth = 0 if parent.get_kind() is CursorKind.TRANSLATION_UNIT else 1
            print("  " * depth + f"{cursor.get_kind().name} {cursor.get_name() or ''}")
            return VisitDirective.RECURSE if depth == 0 else VisitDirective.CONTINUE

        tu.get_cursor().visit_children(show)

        # Example 3: Type layout
        print("\n" + "=" * 50)
        print("Example 3: Layout")
        print("=" * 50)

        point = tu.get_cursor().get_children()[0].get_type()
        print(f"sizeof({point.get_display_name()}) = {point.get_sizeof()}")
        print(f"offsetof(y) = {point.get_offsetof('y') // 8} bytes")

        # Example 4: Stale handles
        print("\n" + "=" * 50)
        print("Example 4: Reparse invalidates handles")
        print("=" * 50)

        cursor = tu.get_cursor()
        tu.reparse()
        try:
            cursor.get_kind()
        except StaleHandleError as e:
            print(f"StaleHandleError: {e}")
