"""
Ordered Sequence Containers

Tuple (immutable) and List (mutable) keep their values in a plain array, in
insertion order. Iteration goes through the same LazySequence protocol as
the hash-indexed containers, in storage order.

Value comparison here (contains, index, count, equals) uses ==. Content
hashing is only used by the unordered containers.

Nested inside a Set element or a Dict key, a Tuple or List encodes through
canonical_form(), tagged with its class, so Tuple.from_values(1, 2),
List.from_values(1, 2) and the builtin (1, 2) are three different members.
"""

from __future__ import annotations
from typing import Any, Iterable, Iterator, List as ListType, Optional

from .errors import ArityMismatchError, EmptyContainerError, IndexOutOfRangeError
from .iteration import LazySequence


def clamp_index(i: int, length: int) -> int:
    """Clamp an index to [0, length]."""
    if i < 0:
        return 0
    if i > length:
        return length
    return i


class ArraySequence:
    """
    Array-backed storage and the read-only operations shared by Tuple and
    List. Derived sequences keep the concrete class of their source.
    """

    _OPEN = '('
    _CLOSE = ')'

    def __init__(self, source: Optional[Iterable[Any]] = None):
        self._values: ListType[Any] = []
        if source is not None:
            self._values.extend(source)

    @classmethod
    def from_values(cls, *values: Any) -> 'ArraySequence':
        return cls(values)

    def _new(self, values: Iterable[Any]) -> 'ArraySequence':
        return type(self)(values)

    # ------------------------------------------------------------------
    # Size and iteration
    # ------------------------------------------------------------------

    def length(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def iterate(self) -> LazySequence:
        """Return a lazy sequence of the values in storage order."""
        return LazySequence(self._values)

    def __iter__(self) -> Iterator[Any]:
        return self.iterate()

    def __reversed__(self) -> Iterator[Any]:
        return LazySequence(reversed(self._values))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, i: int) -> Any:
        """
        Return the value at index i.

        Raises:
            IndexOutOfRangeError: i is outside [0, length).
        """
        if i < 0 or i >= len(self._values):
            raise IndexOutOfRangeError(
                f"Index {i} out of range for {type(self).__name__} of length {len(self._values)}"
            )
        return self._values[i]

    def __getitem__(self, item: Any) -> Any:
        if isinstance(item, slice):
            return self._new(self._values[item])
        if item < 0:
            item += len(self._values)
        return self.get(item)

    def range(self, start: int, end: int) -> 'ArraySequence':
        """Return the values in [start, end), indices clamped to the bounds."""
        start = clamp_index(start, len(self._values))
        end = clamp_index(end, len(self._values))
        return self._new(self._values[start:end])

    def index(self, value: Any) -> int:
        """Return the first index of value, or -1 if not found."""
        for i, v in enumerate(self._values):
            if v == value:
                return i
        return -1

    def count(self, value: Any) -> int:
        return sum(1 for v in self._values if v == value)

    def contains(self, value: Any) -> bool:
        return any(v == value for v in self._values)

    def __contains__(self, value: Any) -> bool:
        return self.contains(value)

    def equals(self, other: Iterable[Any]) -> bool:
        """True if other holds equal values in the same order."""
        other_values = list(other)
        if len(other_values) != len(self._values):
            return False
        return all(a == b for a, b in zip(self._values, other_values))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Derived sequences
    # ------------------------------------------------------------------

    def concatenate(self, other: Iterable[Any]) -> 'ArraySequence':
        """Return a new sequence of these values followed by other's."""
        return self._new(self._values + list(other))

    def __add__(self, other: object) -> 'ArraySequence':
        if not isinstance(other, ArraySequence):
            return NotImplemented
        return self.concatenate(other)

    def multiply(self, n: int) -> 'ArraySequence':
        """Return the values repeated n times. n <= 0 gives an empty sequence."""
        return self._new(self._values * max(n, 0))

    def __mul__(self, n: int) -> 'ArraySequence':
        if not isinstance(n, int):
            return NotImplemented
        return self.multiply(n)

    __rmul__ = __mul__

    def copy(self) -> 'ArraySequence':
        return self._new(self.iterate())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self._OPEN + ' '.join(f"{v}" for v in self._values) + self._CLOSE

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values!r})"


class Tuple(ArraySequence):
    """
    Ordered, immutable sequence of arbitrary values.

    Construction:
        Tuple()                       # empty
        Tuple(other)                  # copy of any container or iterable
        Tuple.from_values(1, 2.2, "hello")
    """

    def canonical_form(self) -> Any:
        """Encodable form used when this tuple is nested in a key."""
        return tuple(self._values)


class List(ArraySequence):
    """
    Ordered, mutable sequence of arbitrary values.

    Construction:
        List()
        List(other)
        List.from_values(1, 2.2, "hello")
    """

    _OPEN = '['
    _CLOSE = ']'

    def reverse(self) -> 'List':
        """Return a new list with the values in reverse order."""
        return self._new(reversed(self._values))

    def __setitem__(self, i: int, value: Any) -> None:
        if i < 0:
            i += len(self._values)
        if i < 0 or i >= len(self._values):
            raise IndexOutOfRangeError(
                f"Index {i} out of range for List of length {len(self._values)}"
            )
        self._values[i] = value

    def insert(self, i: int, value: Any) -> None:
        """
        Insert value before index i. i == length appends.

        Raises:
            IndexOutOfRangeError: i is outside [0, length].
        """
        if i < 0 or i > len(self._values):
            raise IndexOutOfRangeError(
                f"Insert index {i} out of range for List of length {len(self._values)}"
            )
        self._values.insert(i, value)

    def set_range(self, start: int, end: int, source: Iterable[Any]) -> None:
        """
        Replace the values in [start, end) with the first end - start
        values of source. Extra source values are ignored.

        Raises:
            IndexOutOfRangeError: start or end is outside [0, length], or
                start > end.
            ArityMismatchError: source has fewer than end - start values.
        """
        length = len(self._values)
        if not 0 <= start <= length:
            raise IndexOutOfRangeError(f"Start index {start} out of range for List of length {length}")
        if not start <= end <= length:
            raise IndexOutOfRangeError(f"End index {end} out of range for List of length {length}")

        replacement = []
        values = iter(source)
        for _ in range(end - start):
            try:
                replacement.append(next(values))
            except StopIteration:
                raise ArityMismatchError(
                    f"Source has fewer than {end - start} values"
                ) from None
        self._values[start:end] = replacement

    def remove(self, value: Any) -> None:
        """Remove the first occurrence of value. Absent values are ignored."""
        i = self.index(value)
        if i >= 0:
            del self._values[i]

    def delete(self, start: int, end: Optional[int] = None) -> None:
        """
        Remove the values in [start, end), or the single value at start
        when end is omitted. Indices are clamped to the bounds.
        """
        length = len(self._values)
        s = clamp_index(start, length)
        e = clamp_index(s + 1 if end is None else end, length)
        if e > s:
            del self._values[s:e]

    def append(self, value: Any) -> None:
        self._values.append(value)

    def pop(self) -> Any:
        """
        Remove and return the last value.

        Raises:
            EmptyContainerError: the list is empty.
        """
        if not self._values:
            raise EmptyContainerError("Cannot pop from empty List")
        return self._values.pop()

    def clear(self) -> None:
        self._values = []

    def canonical_form(self) -> Any:
        return list(self._values)
