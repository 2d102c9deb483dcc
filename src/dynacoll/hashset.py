"""
Set: unordered collection of unique values of any encodable type.

Storage maps ContentHash -> value. Two values are the same member exactly
when their canonical encodings match, which makes membership type-sensitive:

    >>> s = Set.from_values(1, 1.0, "1")
    >>> len(s)
    3

Operands of the set algebra may be any iterable of values. The usual
operators (&, |, -, ^, <, <=, >, >=) accept builtin sets too, compare them
by content hash like every other operand, and return Set instances built
with this set's hasher.

Members are stored as given, not copied. Mutating a stored list, dict or
dataclass afterwards leaves it filed under its old digest, so it can no
longer be found or removed. Treat members as frozen once added.
"""

from __future__ import annotations
import logging
from collections.abc import Iterable as AbstractIterable, MutableSet, Set as AbstractSet
from typing import Any, Iterable, Iterator, Optional

from .errors import EncodingError
from .hasher import ContentHasher
from .hashindex import HashIndexed
from .iteration import LazySequence
from .types import NO_VALUE

logger = logging.getLogger(__name__)


class Set(HashIndexed, MutableSet):
    """
    Construction:
        Set()                            # empty
        Set(other)                       # from any container or iterable
        Set.from_values(1, 2.2, "hello")
        Set(values, hasher=ContentHasher(context=0x0001))

    Raises:
        EncodingError: a source value has no canonical encoding.
    """

    def __init__(
        self,
        source: Optional[Iterable[Any]] = None,
        *,
        hasher: Optional[ContentHasher] = None
    ):
        super().__init__(hasher)
        self._values: dict = {}
        if source is not None:
            for value in source:
                self.add(value)

    @classmethod
    def from_values(cls, *values: Any, hasher: Optional[ContentHasher] = None) -> 'Set':
        return cls(values, hasher=hasher)

    def _from_iterable(self, it: Iterable[Any]) -> 'Set':
        # Used by the MutableSet operator mixins
        return type(self)(it, hasher=self._hasher)

    def _as_set(self, other: Iterable[Any]) -> 'Set':
        if isinstance(other, Set):
            return other
        return self._from_iterable(other)

    # ------------------------------------------------------------------
    # Size, lookup and iteration
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._values)

    def iterate(self) -> LazySequence:
        """Return a lazy sequence of the members, in arbitrary order."""
        return LazySequence(self._values.values())

    def __iter__(self) -> Iterator[Any]:
        return self.iterate()

    def get(self, digest: str) -> Any:
        """Return the member stored under a content hash, or None."""
        return self._values.get(digest, NO_VALUE)

    def contains(self, value: Any) -> bool:
        """
        Test for membership.

        Raises:
            EncodingError: value has no canonical encoding.
        """
        return self._derive(value) in self._values

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, value: Any) -> None:
        """Add a value. Adding a present value leaves the set unchanged."""
        digest = self._derive(value)
        if digest not in self._values:
            self._values[digest] = value

    def remove(self, value: Any) -> None:
        """Remove a value. Removing an absent value is a no-op."""
        self._values.pop(self._derive(value), None)

    discard = remove

    def combine(self, other: Iterable[Any]) -> None:
        """
        In-place union. Members of other replace members with the same digest.
        Nothing changes if any value of other fails to encode.
        """
        entries = [(self._derive(value), value) for value in other]
        self._values.update(entries)

    def update(self, *others: Iterable[Any]) -> None:
        for other in others:
            self.combine(other)

    def pop(self) -> Any:
        """Remove and return an arbitrary member, or None when empty."""
        if not self._values:
            return NO_VALUE
        _, value = self._values.popitem()
        return value

    def clear(self) -> None:
        logger.debug("Clearing Set of %d members", len(self._values))
        self._values = {}

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def disjoint(self, other: Iterable[Any]) -> bool:
        """True if no value of other is a member. Vacuously true for empty other."""
        for value in other:
            if self.contains(value):
                return False
        return True

    def superset_of(self, other: Iterable[Any]) -> bool:
        """True if every value of other is a member."""
        for value in other:
            if not self.contains(value):
                return False
        return True

    def subset_of(self, other: Iterable[Any]) -> bool:
        """True if every member is in other."""
        return self._as_set(other).superset_of(self)

    def equals(self, other: Iterable[Any]) -> bool:
        """True if each set is a superset of the other."""
        other_set = self._as_set(other)
        return other_set.superset_of(self) and self.superset_of(other_set)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        try:
            return self.equals(other)
        except EncodingError:
            # other holds a member no Set can hold
            return False

    __hash__ = None  # type: ignore[assignment]

    # The MutableSet mixins test builtin set operands with Python's own
    # membership, where 1 == 1.0 == True. Route every operator through the
    # content-hash operations instead.

    def __le__(self, other: object) -> bool:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return self.subset_of(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        other_set = self._as_set(other)
        return len(self) < len(other_set) and other_set.superset_of(self)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        return self.superset_of(other)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, AbstractSet):
            return NotImplemented
        other_set = self._as_set(other)
        return len(self) > len(other_set) and self.superset_of(other_set)

    def isdisjoint(self, other: Iterable[Any]) -> bool:
        return self.disjoint(other)

    def __and__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self.intersection(other)

    def __rand__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self._as_set(other).intersection(self)

    def __or__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self.union(other)

    def __ror__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self._as_set(other).union(self)

    def __sub__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self.difference(other)

    def __rsub__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self._as_set(other).difference(self)

    def __xor__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self.symmetric_difference(other)

    def __rxor__(self, other: object) -> 'Set':
        if not isinstance(other, AbstractIterable):
            return NotImplemented
        return self._as_set(other).symmetric_difference(self)

    # ------------------------------------------------------------------
    # Set algebra (new sets)
    # ------------------------------------------------------------------

    def intersection(self, other: Iterable[Any]) -> 'Set':
        """Return a new set of the members also in other."""
        output = self._from_iterable(())
        for value in other:
            digest = self._derive(value)
            if digest in self._values:
                output._values[digest] = self._values[digest]
        return output

    def difference(self, other: Iterable[Any]) -> 'Set':
        """Return a new set of the members not in other."""
        output = self.copy()
        for value in other:
            output.remove(value)
        return output

    def symmetric_difference(self, other: Iterable[Any]) -> 'Set':
        """Return a new set of values in exactly one of the two sets."""
        other_set = self._as_set(other)
        output = self.difference(other_set)
        output.combine(other_set.difference(self))
        return output

    def union(self, other: Iterable[Any]) -> 'Set':
        """Return a new set of the members of both sets."""
        output = self.copy()
        output.combine(other)
        return output

    def copy(self) -> 'Set':
        """Return an independent set. Every digest is derived again."""
        return self._from_iterable(self.iterate())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return '(' + ' '.join(f"{v}" for v in self._values.values()) + ')'

    def __repr__(self) -> str:
        return f"Set({list(self._values.values())!r})"
