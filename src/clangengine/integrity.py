"""Contract violation exceptions for handle and library misuse.

These exceptions indicate PROGRAMMING ERRORS or an invariant break inside
libclang, not recoverable analysis failures. They should propagate to the
top level; continuing would operate on undefined native data.

Design:
    - NOT subclasses of ClangError (different error domain)
    - Carry diagnostic context for post-mortem analysis
    - Immutable after construction
    - @final decorator prevents subclassing of the concrete kinds

Hierarchy:
    ContractViolationError (base - misuse and invariant breaks)
    ├─ EncodingViolationError (non-UTF-8 text or unexpected null from libclang)
    ├─ ImmutabilityViolationError (mutation attempt on frozen object)
    ├─ QueryNotApplicableError (query issued against the wrong cursor kind)
    ├─ StaleHandleError (use after dispose or reparse)
    └─ ThreadAffinityError (use from a thread other than the acquiring one)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import final

__all__ = [
    "ContractViolationError",
    "EncodingViolationError",
    "ImmutabilityViolationError",
    "IntegrityContext",
    "QueryNotApplicableError",
    "StaleHandleError",
    "ThreadAffinityError",
]


@dataclass(frozen=True, slots=True)
class IntegrityContext:
    """Context for contract violation diagnosis.

    Attributes:
        component: Handle type or layer where the violation occurred
            (cursor, translation_unit, marshal, ...)
        operation: Operation being performed (get_language, adopt_string, ...)
        key: Handle identity or libclang function involved (optional)
        expected: Expected value or state (optional)
        actual: Actual value or state found (optional)
    """

    component: str
    operation: str
    key: str | None = None
    expected: str | None = None
    actual: str | None = None


class ContractViolationError(Exception):
    """Base exception for all contract violations.

    NOT a ClangError subclass. Raised when a caller breaks a documented
    precondition, or when libclang returns data this layer cannot trust.

    This exception is immutable after construction to prevent
    tampering with error evidence.

    Attributes:
        context: Structured diagnostic context for post-mortem analysis
    """

    __slots__ = ("_context", "_frozen")

    _context: IntegrityContext | None
    _frozen: bool

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
    ) -> None:
        """Initialize ContractViolationError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
        """
        super().__init__(message)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_frozen", True)

    # Python's exception handling sets these attributes when propagating exceptions.
    _PYTHON_EXCEPTION_ATTRS: frozenset[str] = frozenset(
        ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
    )

    def __setattr__(self, name: str, value: object) -> None:
        """Reject all attribute mutations after initialization.

        Raises:
            ImmutabilityViolationError: If attempting to modify after construction
        """
        if name in self._PYTHON_EXCEPTION_ATTRS:
            object.__setattr__(self, name, value)
            return
        if getattr(self, "_frozen", False):
            msg = f"Cannot modify contract violation attribute: {name}"
            raise ImmutabilityViolationError(msg)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        """Reject all attribute deletions.

        Raises:
            ImmutabilityViolationError: Always
        """
        msg = f"Cannot delete contract violation attribute: {name}"
        raise ImmutabilityViolationError(msg)

    @property
    def context(self) -> IntegrityContext | None:
        """Structured diagnostic context."""
        return self._context

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.args[0]!r}, context={self._context!r})"


@final
class ImmutabilityViolationError(ContractViolationError):
    """Attempt to mutate an immutable object.

    Raised when code attempts to modify a frozen ContractViolationError.
    """


@final
class QueryNotApplicableError(ContractViolationError):
    """Query issued against a handle it does not apply to.

    libclang signals this only through sentinel return values (a count of
    -1, an invalid language, a null module). Examples:
        - get_arguments() on a cursor that is not a function or call
        - get_language() on a cursor that is not a declaration
        - get_location() on the translation unit cursor
    """


@final
class EncodingViolationError(ContractViolationError):
    """libclang returned text that is not valid UTF-8, or an unexpected null.

    Indicates an invariant break in the wrapped library or in this layer's
    assumptions about it.
    """


@final
class StaleHandleError(ContractViolationError):
    """Handle used after its owner was disposed or reparsed.

    Every Cursor, File, Diagnostic, Module, SourceLocation, SourceRange and
    Type carries the generation of the TranslationUnit it came from. Closing
    or reparsing the unit (or closing its Index or EngineToken) retires that
    generation.
    """


@final
class ThreadAffinityError(ContractViolationError):
    """Handle used from a thread other than the one that acquired the engine.

    libclang handles derived from one EngineToken are not safe to share
    across threads.

    Attributes:
        owner_thread: Thread identifier recorded at acquisition
        current_thread: Thread identifier of the offending call
    """

    __slots__ = ("_current_thread", "_owner_thread")

    _owner_thread: int
    _current_thread: int

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
        *,
        owner_thread: int = 0,
        current_thread: int = 0,
    ) -> None:
        """Initialize ThreadAffinityError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
            owner_thread: Thread identifier recorded at acquisition
            current_thread: Thread identifier of the offending call
        """
        # Must set these before calling super().__init__ which freezes
        object.__setattr__(self, "_owner_thread", owner_thread)
        object.__setattr__(self, "_current_thread", current_thread)
        super().__init__(message, context)

    @property
    def owner_thread(self) -> int:
        """Thread identifier recorded at acquisition."""
        return self._owner_thread

    @property
    def current_thread(self) -> int:
        """Thread identifier of the offending call."""
        return self._current_thread

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"ThreadAffinityError({self.args[0]!r}, "
            f"owner_thread={self._owner_thread}, "
            f"current_thread={self._current_thread})"
        )
