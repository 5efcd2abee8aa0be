"""Base class for values derived from a TranslationUnit.

Cursor, Type, File, SourceLocation, SourceRange, Diagnostic and Module hold
a lease on their unit's lifetime and validate it before each native call.

Python 3.13+.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ctypes import CDLL

    from clangengine.core.lifetime import Lease
    from clangengine.translation_unit import TranslationUnit

__all__ = ["DerivedHandle"]


class DerivedHandle:
    """Value handle borrowing from a TranslationUnit.

    Derived handles have no lifecycle of their own. Using one after its unit
    is closed or reparsed raises StaleHandleError; using one from another
    thread raises ThreadAffinityError.
    """

    __slots__ = ("_lease", "_lib", "_tu")

    def __init__(self, tu: TranslationUnit, lease: Lease | None = None) -> None:
        """Borrow from tu at its current generation.

        Args:
            tu: Owning translation unit (must be alive)
            lease: Existing lease to share (visitation reuses one per walk)
        """
        self._tu = tu
        self._lease = tu.lifetime.lease() if lease is None else lease
        self._lib = tu.library

    def _native(self, operation: str) -> CDLL:
        self._lease.validate(operation)
        return self._lib

    @property
    def is_valid(self) -> bool:
        """Whether the handle can still be used."""
        return self._lease.valid

    def get_translation_unit(self) -> TranslationUnit:
        """Return the translation unit this value belongs to."""
        return self._tu
