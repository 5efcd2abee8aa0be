"""Clang modules (from -fmodules builds).

Python 3.13+.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from clangengine.decoder import decode_handle
from clangengine.handle import DerivedHandle
from clangengine.marshal import ForeignSequence, adopt_array, adopt_string
from clangengine.source import File

if TYPE_CHECKING:
    from clangengine.core.lifetime import Lease
    from clangengine.translation_unit import TranslationUnit

__all__ = ["Module"]


class Module(DerivedHandle):
    """A module imported or defined by a translation unit."""

    __slots__ = ("_ptr",)

    def __init__(self, ptr: int, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Wrap a CXModule borrowed from tu."""
        super().__init__(tu, lease)
        self._ptr = ptr

    def get_file(self) -> File | None:
        """Return the module's AST file, if it has one."""
        ptr = decode_handle(self._native("get_file").clang_Module_getASTFile(self._ptr))
        return None if ptr is None else File(ptr, self._tu, self._lease)

    def get_name(self) -> str:
        """Return the last component of the module name, e.g. "vector"."""
        lib = self._native("get_name")
        return adopt_string(lib, lib.clang_Module_getName(self._ptr))

    def get_full_name(self) -> str:
        """Return the dotted module name, e.g. "std.vector"."""
        lib = self._native("get_full_name")
        return adopt_string(lib, lib.clang_Module_getFullName(self._ptr))

    def get_parent(self) -> Module | None:
        """Return the enclosing module, if this is a submodule."""
        ptr = decode_handle(self._native("get_parent").clang_Module_getParent(self._ptr))
        return None if ptr is None else Module(ptr, self._tu, self._lease)

    def get_top_level_headers(self) -> ForeignSequence[File]:
        """Return the headers that make up the module, lazily."""
        lib = self._native("get_top_level_headers")

        def count() -> int:
            self._lease.validate("get_top_level_headers")
            return int(lib.clang_Module_getNumTopLevelHeaders(self._tu.pointer, self._ptr))

        def element(i: int) -> File:
            self._lease.validate("get_top_level_headers")
            ptr = lib.clang_Module_getTopLevelHeader(self._tu.pointer, self._ptr, i)
            return File(ptr, self._tu, self._lease)

        return adopt_array(count, element)

    def is_system(self) -> bool:
        """Whether the module is a system module."""
        return bool(self._native("is_system").clang_Module_isSystem(self._ptr))

    def _key(self) -> tuple[object, str]:
        file = self.get_file()
        return (None if file is None else file.get_id(), self.get_full_name())

    def __eq__(self, other: object) -> bool:
        """Whether both handles denote the same module."""
        if not isinstance(other, Module):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        """Hash on AST file and full name."""
        return hash(self._key())

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        if not self._lease.valid:
            return "Module(<stale>)"
        return f"Module({self.get_full_name()!r})"
