"""Parsed source files and their lifecycle.

States:
    PARSED -> {REPARSED, SAVED, DISPOSED}

    REPARSED and SAVED accept the same operations as PARSED; DISPOSED
    accepts none. Reparsing re-issues the unit: the same object is returned
    with a new generation, so every handle derived earlier becomes stale.
    A failed reparse disposes the unit, since libclang invalidates it.

Python 3.13+.
"""

from __future__ import annotations

import logging
import os
import weakref
from collections.abc import Iterable, Sequence
from ctypes import byref, c_char_p, c_void_p
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Self

from clangengine.core.lifetime import Lifetime
from clangengine.decoder import check_save_status, check_source_status, decode_handle
from clangengine.enums import MemoryUsage, TranslationUnitState
from clangengine.errors import AstLoadError, ErrorTemplate, SourceError
from clangengine.integrity import EncodingViolationError, IntegrityContext
from clangengine.marshal import ForeignSequence, adopt_array, adopt_string
from clangengine.native import CXUnsavedFile

if TYPE_CHECKING:
    from ctypes import CDLL, Array
    from types import TracebackType

    from clangengine.cursor import Cursor
    from clangengine.diagnostic import Diagnostic
    from clangengine.index import Index
    from clangengine.options import ParseOptions
    from clangengine.source import File

__all__ = ["StrPath", "TranslationUnit", "Unsaved"]

logger = logging.getLogger(__name__)

type StrPath = str | os.PathLike[str]


def _dispose_unit(lib: CDLL, ptr: int, path: str) -> None:
    lib.clang_disposeTranslationUnit(ptr)
    logger.debug("TranslationUnit %s disposed", path)


@dataclass(frozen=True, slots=True)
class Unsaved:
    """In-memory contents overriding a file on disk.

    Attributes:
        path: Path of the file being overridden
        contents: Text libclang should see instead of the file's contents
    """

    path: str
    contents: str

    @classmethod
    def new(cls, path: StrPath, contents: str) -> Self:
        """Create an override, accepting any path-like object."""
        return cls(os.fspath(path), contents)


def _unsaved_array(
    unsaved: Iterable[Unsaved],
) -> tuple[Array[CXUnsavedFile] | None, int, list[bytes]]:
    """Build a CXUnsavedFile array; the bytes list must outlive the call."""
    keepalive: list[bytes] = []
    entries: list[CXUnsavedFile] = []
    for item in unsaved:
        name = os.fsencode(item.path)
        contents = item.contents.encode("utf-8")
        keepalive.extend((name, contents))
        entries.append(CXUnsavedFile(name, contents, len(contents)))
    if not entries:
        return None, 0, keepalive
    return (CXUnsavedFile * len(entries))(*entries), len(entries), keepalive


class TranslationUnit:
    """A preprocessed and parsed source file.

    Create with from_source() or from_ast(); use as a context manager or
    call close(). Disposal or reparse while a visitation over the unit is in
    flight raises ContractViolationError.

    Example:
        >>> with TranslationUnit.from_source(index, "main.c", ["-std=c11"]) as tu:
        ...     for diagnostic in tu.get_diagnostics():
        ...         print(diagnostic)
    """

    __slots__ = (
        "__weakref__",
        "_finalizer",
        "_index",
        "_lib",
        "_lifetime",
        "_path",
        "_ptr",
        "_state",
    )

    def __init__(self, index: Index, ptr: int, path: str) -> None:
        """Adopt a native unit. Internal: use from_source() or from_ast()."""
        self._index = index
        self._lib = index.library
        self._ptr = ptr
        self._path = path
        self._state = TranslationUnitState.PARSED
        self._lifetime = Lifetime(
            "TranslationUnit",
            index.lifetime,
            on_retire=partial(_dispose_unit, self._lib, ptr, path),
        )
        self._finalizer = weakref.finalize(self, self._lifetime.abandon)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_source(
        cls,
        index: Index,
        path: StrPath,
        arguments: Sequence[str] = (),
        unsaved: Iterable[Unsaved] = (),
        options: ParseOptions | None = None,
    ) -> Self:
        """Parse a source file.

        Args:
            index: Live index to parse through
            path: Source file path
            arguments: Compiler command line arguments (without the file)
            unsaved: In-memory overrides of file contents
            options: Parse flags (default: none set)

        Returns:
            The parsed unit, in state PARSED

        Raises:
            SourceError: With kind AST_DESERIALIZATION, CRASH or UNKNOWN
        """
        lib = index.library
        filename = os.fspath(path)
        encoded_args = [arg.encode("utf-8") for arg in arguments]
        argv = (c_char_p * len(encoded_args))(*encoded_args) if encoded_args else None
        files, count, _keepalive = _unsaved_array(unsaved)
        flags = options.to_flags() if options is not None else 0
        out = c_void_p()
        code = lib.clang_parseTranslationUnit2(
            index.pointer,
            os.fsencode(filename),
            argv,
            len(encoded_args),
            files,
            count,
            flags,
            byref(out),
        )
        check_source_status(code, operation="parse", path=filename)
        ptr = decode_handle(out.value)
        if ptr is None:
            msg = "clang_parseTranslationUnit2 reported success but returned a null unit"
            raise EncodingViolationError(
                msg,
                IntegrityContext(
                    component="TranslationUnit", operation="parse", key=filename, actual="NULL"
                ),
            )
        logger.info(
            "Parsed %s (%d argument(s), %d unsaved file(s))", filename, len(encoded_args), count
        )
        return cls(index, ptr, filename)

    @classmethod
    def from_ast(cls, index: Index, path: StrPath) -> Self:
        """Load a unit previously written with save().

        Args:
            index: Live index to load through
            path: AST file path

        Returns:
            The loaded unit, in state PARSED

        Raises:
            AstLoadError: If libclang returns no unit (no reason is reported)
        """
        lib = index.library
        filename = os.fspath(path)
        ptr = decode_handle(lib.clang_createTranslationUnit(index.pointer, os.fsencode(filename)))
        if ptr is None:
            detail = ErrorTemplate.ast_load_failed(filename)
            logger.error("%s", detail.message)
            raise AstLoadError(detail)
        logger.info("Loaded AST file %s", filename)
        return cls(index, ptr, filename)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def lifetime(self) -> Lifetime:
        """Lifetime node every derived handle leases from."""
        return self._lifetime

    @property
    def library(self) -> CDLL:
        """The loaded libclang."""
        self._lifetime.check(operation="library")
        return self._lib

    @property
    def pointer(self) -> int:
        """Raw CXTranslationUnit (validated)."""
        self._lifetime.check(operation="pointer")
        return self._ptr

    @property
    def index(self) -> Index:
        """Index this unit was created through."""
        return self._index

    @property
    def state(self) -> TranslationUnitState:
        """Current lifecycle state."""
        if not self._lifetime.alive:
            return TranslationUnitState.DISPOSED
        return self._state

    @property
    def is_alive(self) -> bool:
        """Whether the unit (and its index and token) is still open."""
        return self._lifetime.alive

    @property
    def generation(self) -> int:
        """Number of successful reparses."""
        return self._lifetime.generation

    @property
    def path(self) -> str:
        """Path the unit was created from, as given by the caller."""
        return self._path

    @property
    def spelling(self) -> str:
        """Main file name as recorded by libclang."""
        return adopt_string(self._lib, self._lib.clang_getTranslationUnitSpelling(self.pointer))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_cursor(self) -> Cursor:
        """Return the root cursor (kind TRANSLATION_UNIT)."""
        from clangengine.cursor import Cursor  # noqa: PLC0415 - circular

        return Cursor(self._lib.clang_getTranslationUnitCursor(self.pointer), self)

    def get_diagnostics(self) -> ForeignSequence[Diagnostic]:
        """Return the diagnostics produced while parsing, lazily."""
        from clangengine.diagnostic import Diagnostic  # noqa: PLC0415 - circular

        lease = self._lifetime.lease()

        def count() -> int:
            lease.validate("get_diagnostics")
            return int(self._lib.clang_getNumDiagnostics(self._ptr))

        def element(i: int) -> Diagnostic:
            lease.validate("get_diagnostics")
            return Diagnostic(self._lib.clang_getDiagnostic(self._ptr, i), self, lease)

        return adopt_array(count, element)

    def get_file(self, path: StrPath) -> File | None:
        """Return the file at path if it is part of this unit."""
        from clangengine.source import File  # noqa: PLC0415 - circular

        ptr = decode_handle(self._lib.clang_getFile(self.pointer, os.fsencode(os.fspath(path))))
        return None if ptr is None else File(ptr, self)

    def get_memory_usage(self) -> dict[MemoryUsage, int]:
        """Return memory usage in bytes by category.

        Categories unknown to this version are omitted.
        """
        usage = self._lib.clang_getCXTUResourceUsage(self.pointer)
        try:
            return {
                MemoryUsage(entry.kind): int(entry.amount)
                for entry in usage.entries[: usage.numEntries]
                if entry.kind in MemoryUsage
            }
        finally:
            self._lib.clang_disposeCXTUResourceUsage(usage)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def save(self, path: StrPath) -> None:
        """Write the unit to an AST file loadable with from_ast().

        Raises:
            SaveError: With kind ERRORS or UNKNOWN
        """
        filename = os.fspath(path)
        ptr = self.pointer
        options = self._lib.clang_defaultSaveOptions(ptr)
        code = self._lib.clang_saveTranslationUnit(ptr, os.fsencode(filename), options)
        check_save_status(code, path=filename)
        self._state = TranslationUnitState.SAVED
        logger.info("Saved %s to %s", self._path, filename)

    def reparse(self, unsaved: Iterable[Unsaved] = ()) -> Self:
        """Re-analyze the unit with the same arguments it was parsed with.

        Every handle derived before the call becomes stale, whatever the
        outcome.

        Args:
            unsaved: In-memory overrides of file contents

        Returns:
            This unit, in state REPARSED with a new generation

        Raises:
            SourceError: With kind AST_DESERIALIZATION, CRASH or UNKNOWN;
                the unit is disposed
            ContractViolationError: If a visitation over the unit is in flight
        """
        ptr = self.pointer
        self._lifetime.advance()
        files, count, _keepalive = _unsaved_array(unsaved)
        options = self._lib.clang_defaultReparseOptions(ptr)
        code = self._lib.clang_reparseTranslationUnit(ptr, count, files, options)
        try:
            check_source_status(code, operation="reparse", path=self._path)
        except SourceError:
            self.close()
            raise
        self._state = TranslationUnitState.REPARSED
        logger.info("Reparsed %s (generation %d)", self._path, self._lifetime.generation)
        return self

    def close(self) -> None:
        """Dispose the native unit. Idempotent; every derived handle becomes stale."""
        self._lifetime.retire()
        self._finalizer.detach()

    def __enter__(self) -> Self:
        """Return the unit for use in a with block."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the unit."""
        self.close()

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"TranslationUnit({self._path!r}, state={self.state}, "
            f"generation={self._lifetime.generation})"
        )
