"""
Hash-Indexed storage shared by Set and Dict.

Both containers key their storage by the content hash of a value, never by
the value itself, so any encodable value can be a member or a key whether or
not Python can hash() it.

Invariants kept by every mutation:
- index consistency: each stored digest equals derive(stored key)
- uniqueness: a digest appears at most once
"""

from __future__ import annotations
from typing import Any, Optional

from .hasher import ContentHasher, default_hasher


class HashIndexed:
    """Digest derivation and configuration common to the hash containers."""

    def __init__(self, hasher: Optional[ContentHasher] = None):
        self._hasher = hasher if hasher is not None else default_hasher()

    @property
    def hasher(self) -> ContentHasher:
        """The ContentHasher this container derives digests with."""
        return self._hasher

    def _derive(self, value: Any) -> str:
        return self._hasher.derive(value)

    def length(self) -> int:
        return len(self)
