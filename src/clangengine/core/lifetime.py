"""Generation-checked lifetime arena for native handles.

libclang handles form a strict ownership chain: an EngineToken outlives its
Indexes, an Index outlives its TranslationUnits, and a TranslationUnit
outlives every Cursor, File, Diagnostic, Module, SourceLocation, SourceRange
and Type derived from it. Each owner gets a Lifetime node; each derived
value holds a Lease on its unit's node and validates it before every native
call.

Invariants:
    - Retiring a node retires its children first (TU before Index before token)
    - A retired node never comes back to life
    - advance() bumps the generation; leases from older generations are stale
    - A pinned node (visitation in flight) cannot be retired or advanced
    - Every check runs on the thread that created the root node
    - abandon() (owner collected without close()) retires without thread or pin checks

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from clangengine.integrity import (
    ContractViolationError,
    IntegrityContext,
    StaleHandleError,
    ThreadAffinityError,
)

__all__ = ["Lease", "Lifetime"]

logger = logging.getLogger(__name__)


class Lifetime:
    """Arena node tracking whether one native owner is still alive.

    Attributes:
        owner: Name of the owning handle type (for messages)
        parent: Enclosing lifetime, or None for the engine token
        thread_id: Identifier of the thread allowed to use the node
        generation: Incremented on every advance()
    """

    __slots__ = (
        "_alive",
        "_children",
        "_on_retire",
        "_pins",
        "generation",
        "owner",
        "parent",
        "thread_id",
    )

    def __init__(
        self,
        owner: str,
        parent: Lifetime | None = None,
        *,
        on_retire: Callable[[], None] | None = None,
    ) -> None:
        """Create a live node, registering it with its parent.

        Args:
            owner: Name of the owning handle type
            parent: Enclosing lifetime (must be alive)
            on_retire: Native release callback, run once when retired
        """
        if parent is not None:
            parent.check(operation="create_" + owner)
        self.owner = owner
        self.parent = parent
        self.thread_id = threading.get_ident() if parent is None else parent.thread_id
        self.generation = 0
        self._alive = True
        self._children: list[Lifetime] = []
        self._on_retire = on_retire
        self._pins = 0
        if parent is not None:
            parent._children.append(self)

    @property
    def alive(self) -> bool:
        """Whether this node and every ancestor are alive."""
        node: Lifetime | None = self
        while node is not None:
            if not node._alive:
                return False
            node = node.parent
        return True

    @property
    def pinned(self) -> bool:
        """Whether a visitation currently holds this node."""
        return self._pins > 0

    def check(self, *, operation: str = "use") -> None:
        """Validate thread affinity and liveness of the whole ancestor chain.

        Args:
            operation: Operation name for error context

        Raises:
            ThreadAffinityError: If called from another thread
            StaleHandleError: If this node or an ancestor was retired
        """
        self._check_thread(operation)
        if not self.alive:
            msg = f"{self.owner} used after it was disposed"
            raise StaleHandleError(
                msg,
                IntegrityContext(
                    component=self.owner, operation=operation, expected="alive", actual="disposed"
                ),
            )

    def lease(self) -> Lease:
        """Issue a lease on the current generation."""
        self.check(operation="lease")
        return Lease(self, self.generation)

    def advance(self) -> int:
        """Start a new generation, making every outstanding lease stale.

        Returns:
            The new generation number

        Raises:
            ContractViolationError: If a visitation is in flight
        """
        self.check(operation="advance")
        self._reject_pinned("advance")
        self.generation += 1
        logger.debug("%s advanced to generation %d", self.owner, self.generation)
        return self.generation

    def retire(self) -> None:
        """Retire this node and its children, children first.

        Idempotent. The on_retire callback of each node runs exactly once.

        Raises:
            ContractViolationError: If this node or a descendant is pinned
        """
        if not self._alive:
            return
        self._check_thread("retire")
        self._reject_pinned("retire")
        self._retire()

    def abandon(self) -> None:
        """Retire from a garbage-collection finalizer.

        Same cascade as retire(), without the thread and visitation checks.
        Logs at WARNING, since the owner was dropped without close().
        """
        if not self._alive:
            return
        logger.warning("%s was not closed; releasing it on collection", self.owner)
        self._retire()

    def _retire(self) -> None:
        if not self._alive:
            return
        for child in tuple(self._children):
            child._retire()
        self._alive = False
        if self.parent is not None and self in self.parent._children:
            self.parent._children.remove(self)
        callback, self._on_retire = self._on_retire, None
        logger.debug("%s retired at generation %d", self.owner, self.generation)
        if callback is not None:
            callback()

    @contextmanager
    def pin(self) -> Iterator[None]:
        """Hold the node alive for the duration of a foreign call.

        Yields:
            None
        """
        self.check(operation="pin")
        self._pins += 1
        try:
            yield
        finally:
            self._pins -= 1

    def _check_thread(self, operation: str) -> None:
        current = threading.get_ident()
        if current != self.thread_id:
            msg = f"{self.owner} used from a thread other than the one that acquired the engine"
            raise ThreadAffinityError(
                msg,
                IntegrityContext(component=self.owner, operation=operation),
                owner_thread=self.thread_id,
                current_thread=current,
            )

    def _reject_pinned(self, operation: str) -> None:
        if self._pins:
            msg = f"Cannot {operation} {self.owner} while a visitation over it is in flight"
            raise ContractViolationError(
                msg,
                IntegrityContext(
                    component=self.owner,
                    operation=operation,
                    expected="no active visitation",
                    actual=f"{self._pins} active visitation(s)",
                ),
            )
        for child in self._children:
            child._reject_pinned(operation)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        state = "alive" if self._alive else "retired"
        return f"Lifetime({self.owner!r}, generation={self.generation}, {state})"


@dataclass(frozen=True, slots=True)
class Lease:
    """Borrow of a Lifetime at a specific generation.

    Attributes:
        lifetime: Node the lease was issued from
        generation: Generation current at issue time
    """

    lifetime: Lifetime
    generation: int

    @property
    def valid(self) -> bool:
        """Whether the lease can still be used (no exception raised)."""
        return self.lifetime.alive and self.lifetime.generation == self.generation

    def validate(self, operation: str = "use") -> None:
        """Raise unless the lifetime is alive at the leased generation.

        Args:
            operation: Operation name for error context

        Raises:
            ThreadAffinityError: If called from another thread
            StaleHandleError: If the lifetime was retired or advanced
        """
        self.lifetime.check(operation=operation)
        if self.lifetime.generation != self.generation:
            msg = f"{self.lifetime.owner} handle used after the unit was reparsed"
            raise StaleHandleError(
                msg,
                IntegrityContext(
                    component=self.lifetime.owner,
                    operation=operation,
                    expected=f"generation {self.generation}",
                    actual=f"generation {self.lifetime.generation}",
                ),
            )
