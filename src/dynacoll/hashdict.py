"""
Dict: unordered mapping from keys of any encodable type to arbitrary values.

Storage is two maps over one digest space, always mutated together:

    keys:   ContentHash -> key
    values: ContentHash -> value

Key identity is type-sensitive, as for Set. Values are never hashed and need
not be encodable.

Limitation: get() answers None for an absent key, so a stored None value
cannot be told apart from a missing key through get(). Use contains() or
d[key] when that matters.

Limitation: keys are stored as given, not copied. Mutating a stored list,
dict or dataclass key afterwards leaves it filed under its old digest, so
get(), contains() and remove() no longer find it. Treat keys as frozen once
set. Values carry no digest and may be mutated freely.
"""

from __future__ import annotations
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Iterable, Iterator, Optional, Tuple as TupleType

from .errors import ArityMismatchError, EncodingError
from .hasher import ContentHasher
from .hashindex import HashIndexed
from .iteration import LazySequence
from .sequence import Tuple
from .types import NO_VALUE

logger = logging.getLogger(__name__)


def _same_value(a: Any, b: Any) -> bool:
    """Values match when they are the same object or equal with the same type."""
    return a is b or (type(a) is type(b) and a == b)


class Dict(HashIndexed, MutableMapping):
    """
    Construction:
        Dict()                                  # empty
        Dict(other)                             # copy of any mapping
        Dict(["a", 1, "b", 2])                  # alternating keys and values
        Dict.from_key_values(["a", "b"], [1, 2])
        Dict.from_items(("a", 1), ("b", 2))

    Raises:
        ArityMismatchError: an alternating source has an odd number of values.
        EncodingError: a key has no canonical encoding or is None.
    """

    def __init__(
        self,
        source: Optional[Iterable[Any]] = None,
        *,
        hasher: Optional[ContentHasher] = None
    ):
        super().__init__(hasher)
        self._keys: dict = {}
        self._values: dict = {}
        if source is None:
            return
        if isinstance(source, Mapping):
            for key, value in self._pairs(source):
                self.set(key, value)
            return
        flat = list(source)
        if len(flat) % 2:
            raise ArityMismatchError(
                f"Alternating key/value source has odd length {len(flat)}"
            )
        for key, value in zip(flat[0::2], flat[1::2]):
            self.set(key, value)

    @classmethod
    def from_key_values(
        cls,
        keys: Iterable[Any],
        values: Iterable[Any],
        *,
        hasher: Optional[ContentHasher] = None
    ) -> 'Dict':
        """Pair keys[i] with values[i]."""
        keys = list(keys)
        values = list(values)
        if len(keys) != len(values):
            raise ArityMismatchError(
                f"Number of keys ({len(keys)}) does not match number of values ({len(values)})"
            )
        output = cls(hasher=hasher)
        for key, value in zip(keys, values):
            output.set(key, value)
        return output

    @classmethod
    def from_items(cls, *items: Iterable[Any], hasher: Optional[ContentHasher] = None) -> 'Dict':
        """Build from (key, value) pairs. Any pair not of length 2 is rejected."""
        output = cls(hasher=hasher)
        for item in items:
            try:
                pair = list(item)
            except TypeError as exc:
                raise ArityMismatchError(f"Item {item!r} is not a (key, value) pair") from exc
            if len(pair) != 2:
                raise ArityMismatchError(
                    f"Each item must be of length 2 (key, value), got {len(pair)}"
                )
            output.set(pair[0], pair[1])
        return output

    @staticmethod
    def _pairs(source: Mapping) -> Iterable[TupleType[Any, Any]]:
        if isinstance(source, Dict):
            return source.iterate_items()
        return source.items()

    # ------------------------------------------------------------------
    # Size, lookup and iteration
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._keys)

    def iterate(self) -> LazySequence:
        """Return a lazy sequence of the keys, in arbitrary order."""
        return LazySequence(self._keys.values())

    def iterate_items(self) -> LazySequence:
        """Return a lazy sequence of (key, value) pairs, in arbitrary order."""
        return LazySequence((self._keys[d], self._values[d]) for d in self._keys)

    def __iter__(self) -> Iterator[Any]:
        return self.iterate()

    def get(self, key: Any, default: Any = NO_VALUE) -> Any:
        """
        Return the value stored for key, or default (None) when absent.

        Raises:
            EncodingError: key has no canonical encoding.
        """
        return self._values.get(self._derive(key), default)

    def __getitem__(self, key: Any) -> Any:
        digest = self._derive(key)
        if digest not in self._values:
            raise KeyError(key)
        return self._values[digest]

    def contains(self, key: Any) -> bool:
        return self._derive(key) in self._keys

    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set(self, key: Any, value: Any) -> None:
        """
        Store value under key, replacing any previous value.

        Raises:
            EncodingError: key is None or has no canonical encoding.
        """
        if key is NO_VALUE:
            raise EncodingError("Dict keys must not be None")
        digest = self._derive(key)
        self._keys[digest] = key
        self._values[digest] = value

    __setitem__ = set

    def remove(self, key: Any) -> None:
        """Remove key and its value. Removing an absent key is a no-op."""
        digest = self._derive(key)
        self._keys.pop(digest, None)
        self._values.pop(digest, None)

    def __delitem__(self, key: Any) -> None:
        if not self.contains(key):
            raise KeyError(key)
        self.remove(key)

    def combine(self, other: Mapping) -> None:
        """
        Set every (key, value) of other on this dict. Later writers win.
        Nothing changes if any key of other fails to encode.
        """
        entries = [(self._derive(key), key, value) for key, value in self._pairs(other)]
        for digest, key, value in entries:
            self._keys[digest] = key
            self._values[digest] = value

    def pop_key(self) -> Any:
        """Remove an arbitrary entry and return its key, or None when empty."""
        return self.pop_item()[0]

    def pop_value(self) -> Any:
        """Remove an arbitrary entry and return its value, or None when empty."""
        return self.pop_item()[1]

    def pop_item(self) -> TupleType[Any, Any]:
        """Remove an arbitrary entry and return (key, value), or (None, None)."""
        if not self._keys:
            return NO_VALUE, NO_VALUE
        digest, key = self._keys.popitem()
        return key, self._values.pop(digest)

    def clear(self) -> None:
        logger.debug("Clearing Dict of %d entries", len(self._keys))
        self._keys = {}
        self._values = {}

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def equals(self, other: Mapping) -> bool:
        """
        True if both hold the same keys with matching values, regardless
        of enumeration order. Values match when they have the same type and
        compare equal.
        """
        if len(self) != len(other):
            return False
        for key, value in self._pairs(other):
            digest = self._derive(key)
            if digest not in self._keys:
                return False
            if not _same_value(self._values[digest], value):
                return False
        return True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        try:
            return self.equals(other)
        except EncodingError:
            # other has a key no Dict can hold
            return False

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def keys(self) -> Tuple:  # type: ignore[override]
        """Tuple of the keys, in current enumeration order."""
        return Tuple(self._keys.values())

    def values(self) -> Tuple:  # type: ignore[override]
        """Tuple of the values, in current enumeration order."""
        return Tuple(self._values[d] for d in self._keys)

    def items(self) -> Tuple:  # type: ignore[override]
        """Tuple of (key, value) Tuples, in current enumeration order."""
        return Tuple(Tuple.from_values(key, value) for key, value in self.iterate_items())

    def copy(self) -> 'Dict':
        """Return an independent dict. Every digest is derived again."""
        return type(self)(self, hasher=self._hasher)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return '{' + ' '.join(f"({k} {v})" for k, v in self.iterate_items()) + '}'

    def __repr__(self) -> str:
        body = ', '.join(f"{k!r}: {v!r}" for k, v in self.iterate_items())
        return f"Dict({{{body}}})"
