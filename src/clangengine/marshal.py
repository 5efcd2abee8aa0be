"""Adoption of library-owned strings and count/index collections.

libclang returns text as CXString values that the caller must release with
clang_disposeString, and exposes collections as a count function paired
with an element-by-index function. This module is the only place either
protocol is driven.

Guarantees:
    - Every CXString passed to adopt_string/adopt_string_optional is
      released exactly once, whether decoding succeeds or fails
    - Text that is not valid UTF-8 raises EncodingViolationError
    - A negative count raises; it never becomes an empty sequence

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING, overload

from clangengine.integrity import (
    ContractViolationError,
    EncodingViolationError,
    IntegrityContext,
    QueryNotApplicableError,
)

if TYPE_CHECKING:
    from clangengine.native import CXString

__all__ = [
    "ForeignSequence",
    "adopt_array",
    "adopt_string",
    "adopt_string_optional",
    "is_null_string",
]


def is_null_string(raw: CXString) -> bool:
    """Whether a CXString carries no data pointer at all."""
    return not raw.data


def adopt_string(lib: object, raw: CXString) -> str:
    """Decode a CXString and release it.

    Args:
        lib: Loaded libclang (anything exposing clang_getCString and
            clang_disposeString)
        raw: String returned by a libclang call

    Returns:
        The decoded text (possibly empty)

    Raises:
        EncodingViolationError: If the content is null or not valid UTF-8
    """
    try:
        data: bytes | None = lib.clang_getCString(raw)  # type: ignore[attr-defined]
        if data is None:
            msg = "libclang returned a null string where text was required"
            raise EncodingViolationError(
                msg, IntegrityContext(component="marshal", operation="adopt_string", actual="NULL")
            )
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            msg = f"libclang returned text that is not valid UTF-8: {data[:64]!r}"
            raise EncodingViolationError(
                msg,
                IntegrityContext(
                    component="marshal",
                    operation="adopt_string",
                    expected="UTF-8",
                    actual=f"invalid byte at offset {e.start}",
                ),
            ) from e
    finally:
        lib.clang_disposeString(raw)  # type: ignore[attr-defined]


def adopt_string_optional(
    lib: object,
    raw: CXString,
    is_null: Callable[[CXString], bool] = is_null_string,
) -> str | None:
    """Decode a CXString that may be absent, releasing it in every case.

    libclang uses both a null string and the empty string as "no value" for
    spelling queries (mangled names, comments, module names).

    Args:
        lib: Loaded libclang
        raw: String returned by a libclang call
        is_null: Family-specific null test, applied before decoding

    Returns:
        The decoded text, or None if null or empty

    Raises:
        EncodingViolationError: If the content is not valid UTF-8
    """
    if is_null(raw):
        lib.clang_disposeString(raw)  # type: ignore[attr-defined]
        return None
    text = adopt_string(lib, raw)
    return text or None


class ForeignSequence[T](Sequence[T]):
    """Lazy, finite, restartable view over a count/index collection.

    The count call runs once, on first use. Elements are fetched on demand,
    so iterating twice calls element_call twice per index.
    """

    __slots__ = ("_count", "_count_call", "_element_call", "_misuse")

    def __init__(
        self,
        count_call: Callable[[], int],
        element_call: Callable[[int], T],
        *,
        misuse: str | None = None,
    ) -> None:
        """Create a sequence; no libclang call is made yet.

        Args:
            count_call: Returns the number of elements
            element_call: Returns the element at an index in [0, count)
            misuse: Description of the query when a negative count means the
                query does not apply to the handle (QueryNotApplicableError).
                None means a negative count is never expected
                (ContractViolationError).
        """
        self._count: int | None = None
        self._count_call = count_call
        self._element_call = element_call
        self._misuse = misuse

    def _length(self) -> int:
        if self._count is None:
            count = self._count_call()
            if count < 0:
                if self._misuse is not None:
                    msg = f"Query not applicable: {self._misuse}"
                    raise QueryNotApplicableError(
                        msg,
                        IntegrityContext(
                            component="marshal",
                            operation="adopt_array",
                            key=self._misuse,
                            expected="count >= 0",
                            actual=str(count),
                        ),
                    )
                msg = f"libclang returned a negative element count: {count}"
                raise ContractViolationError(
                    msg,
                    IntegrityContext(
                        component="marshal",
                        operation="adopt_array",
                        expected="count >= 0",
                        actual=str(count),
                    ),
                )
            self._count = count
        return self._count

    def __len__(self) -> int:
        return self._length()

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        length = self._length()
        if isinstance(index, slice):
            return [self._element_call(i) for i in range(*index.indices(length))]
        if index < 0:
            index += length
        if not 0 <= index < length:
            msg = f"index {index} out of range for {length} element(s)"
            raise IndexError(msg)
        return self._element_call(index)

    def __iter__(self) -> Iterator[T]:
        for i in range(self._length()):
            yield self._element_call(i)

    def __repr__(self) -> str:
        """Return representation without forcing the count."""
        count = "?" if self._count is None else str(self._count)
        return f"ForeignSequence(len={count})"


def adopt_array[T](
    count_call: Callable[[], int],
    element_call: Callable[[int], T],
    *,
    misuse: str | None = None,
) -> ForeignSequence[T]:
    """Wrap a count/index protocol in a lazy sequence.

    Args:
        count_call: Returns the number of elements (may be negative for
            queries with a "not applicable" sentinel)
        element_call: Returns the element at an index
        misuse: Description of the query when a negative count signals a
            caller error

    Returns:
        ForeignSequence over the collection
    """
    return ForeignSequence(count_call, element_call, misuse=misuse)
