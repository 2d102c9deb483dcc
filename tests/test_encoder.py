"""
Canonical Encoder and Content-Hash Tests

1. Determinism: the same value always encodes and hashes identically
2. Canonical rules: equivalent values share an encoding
3. Type separation: values of different types never share an encoding
4. Rejection: unencodable values and the "no value" sentinel raise EncodingError
"""

import pytest
import math
import string
from dataclasses import dataclass
from enum import Enum

from dynacoll.encoder import CanonicalEncoder, CanonicalTape, encode
from dynacoll.errors import EncodingError
from dynacoll.hasher import ContentHasher, content_hash
from dynacoll.sequence import List, Tuple
from dynacoll.hashset import Set
from dynacoll.hashdict import Dict
from dynacoll.types import TypeTag


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Vector:
    x: int
    y: int


class Color(Enum):
    RED = 1
    GREEN = 2


class Token:
    """Plain object adapted through canonical_form()."""

    def __init__(self, text):
        self.text = text

    def canonical_form(self):
        return self.text.lower()


# =============================================================================
# DETERMINISM
# =============================================================================

class TestDeterminism:

    def test_same_value_same_bytes(self):
        value = {"name": "Alice", "tags": ["a", "b"], "scores": {1.5, 2.5}}
        assert encode(value) == encode(value)

    def test_same_value_same_hash(self):
        value = [1, 2.2, "hello", None, b"\x00"]
        assert content_hash(value) == content_hash(value)

    def test_equal_values_built_separately(self):
        assert content_hash({"a": [1, 2]}) == content_hash({"a": [1, 2]})

    def test_hash_is_fixed_length_printable(self):
        digests = [content_hash(v) for v in (1, "x" * 10000, [list(range(100))])]
        allowed = set(string.ascii_letters + string.digits + "-_=")
        assert len({len(d) for d in digests}) == 1
        for d in digests:
            assert set(d) <= allowed

    def test_small_sample_has_no_collisions(self):
        values = list(range(200)) + [str(i) for i in range(200)] + [float(i) + 0.5 for i in range(200)]
        digests = {content_hash(v) for v in values}
        assert len(digests) == len(values)


# =============================================================================
# CANONICAL RULES
# =============================================================================

class TestCanonicalRules:

    def test_float_zero_equivalence(self):
        """+0.0 and -0.0 encode identically."""
        assert encode(0.0) == encode(-0.0)

    def test_float_nan_equivalence(self):
        assert encode(float('nan')) == encode(math.nan)

    def test_string_unicode_normalization(self):
        """NFC and NFD forms of é encode identically."""
        assert encode('\u00e9') == encode('e\u0301')

    def test_set_order_independence(self):
        assert encode({3, 1, 2}) == encode({1, 2, 3})
        assert encode(frozenset([1, 2, 3])) == encode({1, 2, 3})

    def test_map_order_independence(self):
        assert encode({"a": 1, "b": 2}) == encode({"b": 2, "a": 1})

    def test_container_set_matches_builtin_set(self):
        assert encode(Set.from_values(1, 2)) == encode({1, 2})

    def test_container_dict_matches_builtin_dict(self):
        assert encode(Dict.from_key_values(["a"], [1])) == encode({"a": 1})

    def test_list_order_matters(self):
        assert encode([1, 2]) != encode([2, 1])


# =============================================================================
# TYPE SEPARATION
# =============================================================================

class TestTypeSeparation:

    def test_numeric_and_text_renderings_differ(self):
        values = [1, 1.0, True, "1", b"1"]
        assert len({encode(v) for v in values}) == len(values)

    def test_zero_values_differ(self):
        values = [0, 0.0, False, "", b"", [], (), {}, frozenset()]
        assert len({encode(v) for v in values}) == len(values)

    def test_list_and_tuple_differ(self):
        assert encode([1, 2]) != encode((1, 2))

    def test_container_sequences_tagged_by_class(self):
        encodings = {
            encode((1, 2)),
            encode(Tuple.from_values(1, 2)),
            encode(List.from_values(1, 2)),
        }
        assert len(encodings) == 3

    def test_dataclasses_with_same_fields_differ(self):
        assert encode(Point(1, 2)) != encode(Vector(1, 2))

    def test_dataclass_field_values_matter(self):
        assert encode(Point(1, 2)) != encode(Point(2, 1))

    def test_enum_differs_from_its_value(self):
        assert encode(Color.RED) != encode(1)
        assert encode(Color.RED) != encode(Color.GREEN)

    def test_nested_structure_distinction(self):
        structures = [
            [1, 2],
            [[1], 2],
            [1, [2]],
            [[1, 2]],
        ]
        assert len({encode(s) for s in structures}) == len(structures)

    def test_nested_none_differs_from_missing(self):
        assert encode([None]) != encode([])

    def test_top_level_tag(self):
        data = encode("x")
        assert int.from_bytes(data[:2], 'big') == TypeTag.STRING


# =============================================================================
# CANONICAL FORM HOOK
# =============================================================================

class TestCanonicalFormHook:

    def test_objects_encode_through_canonical_form(self):
        assert encode(Token("Hello")) == encode(Token("HELLO"))

    def test_canonical_form_tagged_with_class(self):
        assert encode(Token("hello")) != encode("hello")


# =============================================================================
# REJECTION
# =============================================================================

class TestRejection:

    def test_none_at_top_level_rejected(self):
        with pytest.raises(EncodingError):
            encode(None)

    def test_none_hash_rejected(self):
        with pytest.raises(EncodingError):
            content_hash(None)

    def test_function_rejected(self):
        with pytest.raises(EncodingError):
            encode(len)

    def test_nested_function_rejected(self):
        with pytest.raises(EncodingError):
            encode({"callback": lambda: None})

    def test_plain_object_rejected(self):
        with pytest.raises(EncodingError):
            encode(object())

    def test_class_rejected(self):
        with pytest.raises(EncodingError):
            encode(Token)

    def test_self_reference_rejected(self):
        value = [1]
        value.append(value)
        with pytest.raises(EncodingError):
            encode(value)

    def test_none_mapping_key_rejected(self):
        with pytest.raises(EncodingError):
            encode({None: 1})

    def test_encoding_error_is_type_error(self):
        with pytest.raises(TypeError):
            encode(object())

    def test_shared_reference_is_not_a_cycle(self):
        shared = [1, 2]
        assert encode([shared, shared]) == encode([[1, 2], [1, 2]])


# =============================================================================
# TAPE AND HASHER CONFIGURATION
# =============================================================================

class TestTape:

    def test_tape_layout(self):
        tape = CanonicalEncoder.tape(42, context_tag=0x0102).to_bytes()
        assert tape[:4] == CanonicalTape.MAGIC
        assert tape[4:6] == CanonicalTape.FORMAT_VERSION.to_bytes(2, 'big')
        assert tape[6:8] == b'\x01\x02'
        assert tape[8:] == encode(42)

    def test_context_tag_out_of_range(self):
        with pytest.raises(ValueError):
            CanonicalEncoder.tape(1, context_tag=0x10000)


class TestContentHasher:

    def test_default_matches_module_function(self):
        assert ContentHasher().derive("x") == content_hash("x")

    def test_context_separation(self):
        assert ContentHasher(context=1).derive("x") != ContentHasher(context=2).derive("x")

    def test_key_separation(self):
        assert ContentHasher(key=b"k1").derive("x") != ContentHasher(key=b"k2").derive("x")
        assert ContentHasher(key=b"k1").derive("x") != ContentHasher().derive("x")

    def test_hash_size(self):
        assert len(ContentHasher(hash_size=16).digest("x")) == 16
        assert len(ContentHasher().digest("x")) == ContentHasher.DEFAULT_HASH_SIZE

    def test_hash_size_too_small(self):
        with pytest.raises(ValueError):
            ContentHasher(hash_size=8)

    def test_invalid_context(self):
        with pytest.raises(ValueError):
            ContentHasher(context=-1)

    def test_hasher_equality(self):
        assert ContentHasher(context=3) == ContentHasher(context=3)
        assert ContentHasher(context=3) != ContentHasher(context=4)
