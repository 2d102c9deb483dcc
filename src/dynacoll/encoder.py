"""
Canonical Encoder

Turns an arbitrary Python value into a byte-stable canonical tape:

TAPE = MAGIC ‖ FORMAT_VERSION ‖ CONTEXT_TAG ‖ TLV(value)

Every node is TLV encoded: TYPE_TAG (2 bytes) ‖ LENGTH (4 bytes) ‖ VALUE.

Properties:
1. Deterministic: the same value gives the same bytes in every process.
   Unordered collections are sorted by the encoded bytes of their members,
   never by hash() or id().
2. Type separated: the type tag is part of every node, so values of
   different dynamic types never share an encoding.
3. Total or loud: a value either encodes completely or raises EncodingError.

Canonical rules:
- float: -0.0 encodes as +0.0, every NaN encodes as one canonical NaN
- str: NFC normalized before UTF-8 encoding
- None: allowed inside structures (NULL), rejected at the top level, where
  it is the "no value" sentinel
"""

from __future__ import annotations
import dataclasses
import math
import struct
import unicodedata
from collections.abc import Mapping, Set as AbstractSet
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Set, Tuple

from .errors import EncodingError
from .types import NO_VALUE, SchemaId, TypeTag


# =============================================================================
# CANONICAL TAPE STRUCTURE
# =============================================================================

@dataclass
class CanonicalTape:
    """
    The canonical tape fed to the hash function.

    Structure:
    - MAGIC (4 bytes): Identifies the dynacoll format
    - VERSION (2 bytes): Encoding format version
    - CONTEXT_TAG (2 bytes): Application context
    - PAYLOAD: The TLV-encoded value
    """
    MAGIC = b'DYNC'
    FORMAT_VERSION = 1

    context_tag: int
    payload: bytes

    def to_bytes(self) -> bytes:
        """Produce the final tape."""
        return (
            self.MAGIC +
            struct.pack('>H', self.FORMAT_VERSION) +
            struct.pack('>H', self.context_tag) +
            self.payload
        )


# =============================================================================
# ENCODER
# =============================================================================

class CanonicalEncoder:
    """
    Canonical encoding of Python values.

    Supported values:
    - None (nested only), bool, int, float, str, bytes, bytearray
    - Enum members
    - list, tuple
    - any collections.abc.Set or collections.abc.Mapping
    - dataclass instances
    - objects exposing a canonical_form() method, encoded as the value it
      returns tagged with the object's class

    Everything else raises EncodingError.
    """

    DEFAULT_CONTEXT = 0x0000

    @classmethod
    def encode(cls, value: Any) -> bytes:
        """
        Return the TLV encoding of a value.

        Raises:
            EncodingError: the value is the "no value" sentinel or contains
                data with no canonical encoding.
        """
        if value is NO_VALUE:
            raise EncodingError("Cannot encode the 'no value' sentinel")
        return cls._encode_object(value, set())

    @classmethod
    def tape(cls, value: Any, context_tag: int = DEFAULT_CONTEXT) -> CanonicalTape:
        """Encode a value and wrap it in a canonical tape."""
        if not 0 <= context_tag <= 0xFFFF:
            raise ValueError(f"Context tag must fit in 2 bytes: {context_tag}")
        return CanonicalTape(context_tag=context_tag, payload=cls.encode(value))

    @classmethod
    def _encode_object(cls, value: Any, active: Set[int]) -> bytes:
        """Encode one node, tracking the containers currently being walked."""
        type_tag, value_bytes = cls._encode_value(value, active)
        return (
            struct.pack('>H', type_tag) +
            struct.pack('>I', len(value_bytes)) +
            value_bytes
        )

    @classmethod
    def _encode_value(cls, value: Any, active: Set[int]) -> Tuple[TypeTag, bytes]:
        """Return the type tag and value bytes of a node."""

        if value is None:
            return TypeTag.NULL, b''

        # Enum before int: IntEnum members are ints too
        if isinstance(value, Enum):
            return TypeTag.ENUM, cls._encode_enum(value)

        if isinstance(value, bool):
            return TypeTag.BOOL, b'\x01' if value else b'\x00'

        if isinstance(value, int):
            return TypeTag.INT, cls._encode_int(value)

        if isinstance(value, float):
            return TypeTag.FLOAT, cls._encode_float(value)

        if isinstance(value, str):
            return TypeTag.STRING, unicodedata.normalize('NFC', value).encode('utf-8')

        if isinstance(value, (bytes, bytearray)):
            return TypeTag.BYTES, bytes(value)

        # Everything below may recurse
        marker = id(value)
        if marker in active:
            raise EncodingError(
                f"Cannot encode self-referencing {type(value).__name__}"
            )
        active.add(marker)
        try:
            return cls._encode_compound(value, active)
        finally:
            active.discard(marker)

    @classmethod
    def _encode_compound(cls, value: Any, active: Set[int]) -> Tuple[TypeTag, bytes]:
        if isinstance(value, list):
            return TypeTag.LIST, cls._encode_sequence(value, active)

        if isinstance(value, tuple):
            return TypeTag.TUPLE, cls._encode_sequence(value, active)

        if isinstance(value, AbstractSet):
            return TypeTag.SET, cls._encode_set(value, active)

        if isinstance(value, Mapping):
            return TypeTag.MAP, cls._encode_map(value.items(), active)

        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return TypeTag.STRUCT, cls._encode_struct(value, active)

        canonical_form = getattr(value, 'canonical_form', None)
        if callable(canonical_form) and not isinstance(value, type):
            return TypeTag.CUSTOM, (
                SchemaId.of(type(value)).to_bytes() +
                cls._encode_object(canonical_form(), active)
            )

        raise EncodingError(
            f"Cannot canonically encode value of type {type(value).__qualname__}"
        )

    @classmethod
    def _encode_int(cls, value: int) -> bytes:
        """
        Canonical integer encoding.

        Format:
        - Sign byte (0x00 = non-negative, 0x01 = negative)
        - Length (2 bytes): Number of magnitude bytes
        - Magnitude: Big-endian, minimal (no leading zeros)
        """
        if value == 0:
            return b'\x00\x00\x00'

        sign = 0x01 if value < 0 else 0x00
        magnitude = abs(value)
        byte_length = (magnitude.bit_length() + 7) // 8
        if byte_length > 0xFFFF:
            raise EncodingError("Integer too large to encode")
        mag_bytes = magnitude.to_bytes(byte_length, 'big')

        return bytes([sign]) + struct.pack('>H', byte_length) + mag_bytes

    @classmethod
    def _encode_float(cls, value: float) -> bytes:
        """
        Canonical float encoding: IEEE 754 double, big-endian.
        NaN collapses to 0x7FF8000000000000 and -0.0 to +0.0.
        """
        if math.isnan(value):
            return b'\x7f\xf8\x00\x00\x00\x00\x00\x00'

        if value == 0.0:
            return b'\x00\x00\x00\x00\x00\x00\x00\x00'

        return struct.pack('>d', value)

    @classmethod
    def _encode_enum(cls, value: Enum) -> bytes:
        name_bytes = value.name.encode('utf-8')
        return (
            SchemaId.of(type(value)).to_bytes() +
            struct.pack('>H', len(name_bytes)) +
            name_bytes
        )

    @classmethod
    def _encode_sequence(cls, elements: Iterable[Any], active: Set[int]) -> bytes:
        """Count followed by elements in order."""
        parts = [cls._encode_object(e, active) for e in elements]
        return struct.pack('>I', len(parts)) + b''.join(parts)

    @classmethod
    def _encode_set(cls, elements: Iterable[Any], active: Set[int]) -> bytes:
        """
        Count followed by elements in CANONICAL ORDER (sorted by bytes).
        {a, b} and {b, a} encode identically.
        """
        encoded = sorted(cls._encode_object(e, active) for e in elements)
        return struct.pack('>I', len(encoded)) + b''.join(encoded)

    @classmethod
    def _encode_map(cls, items: Iterable[Tuple[Any, Any]], active: Set[int]) -> bytes:
        """
        Count followed by key-value pairs sorted by encoded key bytes.
        A None key is rejected: it can never be stored as a key anyway.
        """
        pairs: List[Tuple[bytes, bytes]] = []
        for k, v in items:
            if k is NO_VALUE:
                raise EncodingError("Cannot encode a mapping with a 'no value' key")
            pairs.append((cls._encode_object(k, active), cls._encode_object(v, active)))
        pairs.sort(key=lambda p: p[0])

        parts = [struct.pack('>I', len(pairs))]
        for k_bytes, v_bytes in pairs:
            parts.append(k_bytes)
            parts.append(v_bytes)
        return b''.join(parts)

    @classmethod
    def _encode_struct(cls, value: Any, active: Set[int]) -> bytes:
        """
        Schema followed by fields sorted by field name.
        """
        parts = [SchemaId.of(type(value)).to_bytes()]

        fields = sorted(
            ((f.name, getattr(value, f.name)) for f in dataclasses.fields(value)),
            key=lambda x: x[0]
        )
        parts.append(struct.pack('>I', len(fields)))
        for name, field_value in fields:
            name_bytes = name.encode('utf-8')
            parts.append(struct.pack('>H', len(name_bytes)))
            parts.append(name_bytes)
            parts.append(cls._encode_object(field_value, active))

        return b''.join(parts)


def encode(value: Any) -> bytes:
    """Canonically encode a value with the default encoder."""
    return CanonicalEncoder.encode(value)
