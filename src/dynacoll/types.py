"""
Type Tag Registry for dynacoll

Every node of a canonical encoding starts with a type tag. The tag is what
makes equality type-sensitive: ``1``, ``1.0``, ``True`` and ``"1"`` never share
an encoding, so they never share a content hash.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Any
import struct


# =============================================================================
# NO VALUE SENTINEL
# =============================================================================

#: Result of lookups and pops that find nothing. It is also the one value that
#: can never be used as a Set element or a Dict key.
NO_VALUE: Any = None


# =============================================================================
# TAG REGISTRY (Domain Separation)
# =============================================================================

class TypeTag(IntEnum):
    """
    Tags for every kind of node the encoder can emit.
    Tags are 2 bytes on the tape.
    """
    # Primitives (0x00XX)
    NULL = 0x0000
    BOOL = 0x0001
    INT = 0x0002
    FLOAT = 0x0003
    BYTES = 0x0004
    STRING = 0x0005

    # Collections (0x01XX)
    LIST = 0x0100
    SET = 0x0101
    MAP = 0x0102
    TUPLE = 0x0103

    # Structured (0x02XX)
    STRUCT = 0x0200
    ENUM = 0x0201

    # Objects adapted through canonical_form() (0x04XX)
    CUSTOM = 0x0400


class DomainTag(IntEnum):
    """
    One-byte prefixes absorbed by the hash function before the tape.
    Keeps digests of different roles apart.
    """
    CONTENT = 0x00
    KEYED = 0x04


@dataclass(frozen=True)
class SchemaId:
    """
    Identifies the class behind a STRUCT, ENUM or CUSTOM node.

    Two instances of different classes with identical fields therefore
    encode differently.
    """
    namespace: str
    name: str

    @classmethod
    def of(cls, obj_type: type) -> 'SchemaId':
        return cls(obj_type.__module__, obj_type.__qualname__)

    def to_bytes(self) -> bytes:
        """Canonical byte representation."""
        ns_bytes = self.namespace.encode('utf-8')
        name_bytes = self.name.encode('utf-8')
        return (
            struct.pack('>H', len(ns_bytes)) + ns_bytes +
            struct.pack('>H', len(name_bytes)) + name_bytes
        )
