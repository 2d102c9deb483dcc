"""
Lazy Sequence Protocol

Every container exposes iterate(), which returns a LazySequence over the
elements present at the time of the call.

A LazySequence is pull-based: nothing runs between calls to next(). There is
no producer task, so a consumer that stops early leaves nothing blocked or
running behind it. close() ends a sequence explicitly, and a LazySequence is
also a context manager.

Guarantees:
- finite: yields exactly the elements of the snapshot, then ends
- not restartable: once ended it stays ended; call iterate() again for a
  fresh walk of the container's current storage
- independent: sequences never share state with each other, and mutating the
  container afterwards does not change a sequence already handed out
"""

from __future__ import annotations
import logging
from typing import Any, Iterable, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)


class LazySequence(Iterator[Any]):
    """
    Pull-style iterator over a snapshot of a container.

    Usage:
        seq = container.iterate()
        for value in seq:
            ...

        # explicit advance-and-fetch-or-end
        found, value = seq.fetch()

        # early exit
        with container.iterate() as seq:
            first = next(seq)
    """

    __slots__ = ('_snapshot', '_position')

    def __init__(self, elements: Iterable[Any]):
        self._snapshot: Optional[Tuple[Any, ...]] = tuple(elements)
        self._position = 0

    def __iter__(self) -> 'LazySequence':
        return self

    def __next__(self) -> Any:
        found, value = self.fetch()
        if not found:
            raise StopIteration
        return value

    def __enter__(self) -> 'LazySequence':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __length_hint__(self) -> int:
        return self.remaining

    def __repr__(self) -> str:
        state = 'closed' if self.closed else f'remaining={self.remaining}'
        return f"LazySequence({state})"

    def fetch(self) -> Tuple[bool, Any]:
        """
        Advance and return (True, element), or (False, None) at the end.

        Reaching the end releases the snapshot.
        """
        snapshot = self._snapshot
        if snapshot is None:
            return False, None
        if self._position >= len(snapshot):
            self.close()
            return False, None
        value = snapshot[self._position]
        self._position += 1
        return True, value

    def close(self) -> None:
        """End the sequence now. Idempotent."""
        if self._snapshot is not None:
            if self._position < len(self._snapshot):
                logger.debug(
                    "LazySequence closed with %d of %d elements unread",
                    len(self._snapshot) - self._position, len(self._snapshot)
                )
            self._snapshot = None

    @property
    def closed(self) -> bool:
        return self._snapshot is None

    @property
    def remaining(self) -> int:
        """Number of elements not yet fetched."""
        if self._snapshot is None:
            return 0
        return len(self._snapshot) - self._position
