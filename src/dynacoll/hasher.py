"""
Content-Hash Deriver

ContentHash = base64url(SHAKE256(DOMAIN_TAG ‖ [KEY] ‖ TAPE))

The digest stands in for a value's identity inside Set and Dict:
- Values with identical canonical encodings always share a digest.
- Values with different encodings are ASSUMED to have different digests.
  At the default 256-bit output a collision is astronomically unlikely, but
  it is not impossible. Two colliding values would be treated as the same
  member. Do not rely on these containers where a crafted collision would
  be a security problem, unless a secret key is configured.

Equality is type-sensitive: the encoder tags every node with its dynamic
type, so 1, 1.0, True and "1" all derive different digests.
"""

from __future__ import annotations
import base64
import hashlib
import struct
from typing import Any, Optional

from .encoder import CanonicalEncoder
from .types import DomainTag


class ContentHasher:
    """
    Derives fixed-length printable digests from values.

    Usage:
        hasher = ContentHasher()
        digest = hasher.derive({"name": "Alice"})

        # Separate digest spaces per application
        other = ContentHasher(context=0x0001)

        # Keyed digests, for inputs an adversary controls
        keyed = ContentHasher(key=secret)
    """

    DEFAULT_HASH_SIZE = 32  # 256 bits
    MIN_HASH_SIZE = 16
    DEFAULT_CONTEXT = 0x0000

    def __init__(
        self,
        hash_size: int = DEFAULT_HASH_SIZE,
        context: int = DEFAULT_CONTEXT,
        key: Optional[bytes] = None
    ):
        """
        Args:
            hash_size: Digest size in bytes before base64 (default 32)
            context: 2-byte context tag mixed into every tape
            key: Optional secret key for keyed digests
        """
        if hash_size < self.MIN_HASH_SIZE:
            raise ValueError(
                f"hash_size must be at least {self.MIN_HASH_SIZE} bytes, got {hash_size}"
            )
        if not 0 <= context <= 0xFFFF:
            raise ValueError(f"context must fit in 2 bytes, got {context}")
        self.hash_size = hash_size
        self.context = context
        self._key = key

    def __repr__(self) -> str:
        return (
            f"ContentHasher(hash_size={self.hash_size}, context={self.context:#06x}, "
            f"keyed={self._key is not None})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentHasher):
            return NotImplemented
        return (
            self.hash_size == other.hash_size and
            self.context == other.context and
            self._key == other._key
        )

    def __hash__(self) -> int:
        return hash((self.hash_size, self.context, self._key))

    def tape(self, value: Any) -> bytes:
        """Return the canonical tape a value is hashed from."""
        return CanonicalEncoder.tape(value, context_tag=self.context).to_bytes()

    def digest(self, value: Any) -> bytes:
        """
        Return the raw digest of a value.

        Raises:
            EncodingError: the value has no canonical encoding.
        """
        tape = self.tape(value)
        h = hashlib.shake_256()
        if self._key is None:
            h.update(bytes([DomainTag.CONTENT]))
        else:
            h.update(bytes([DomainTag.KEYED]))
            h.update(struct.pack('>I', len(self._key)))
            h.update(self._key)
        h.update(tape)
        return h.digest(self.hash_size)

    def derive(self, value: Any) -> str:
        """
        Return the printable content hash of a value.

        Raises:
            EncodingError: the value has no canonical encoding.
        """
        return base64.urlsafe_b64encode(self.digest(value)).decode('ascii')


# Default global instance
_default_hasher = ContentHasher()


def default_hasher() -> ContentHasher:
    """Return the hasher containers use when none is given."""
    return _default_hasher


def content_hash(value: Any) -> str:
    """Derive a content hash with default settings."""
    return _default_hasher.derive(value)
