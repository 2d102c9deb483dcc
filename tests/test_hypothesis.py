"""
Property-Based Testing with Hypothesis

Generates random values and containers and checks that the content-hash
identity scheme and the container laws hold for all of them.
"""

import pytest
from hypothesis import given, strategies as st, settings
from hypothesis.strategies import composite

from dynacoll.encoder import encode
from dynacoll.hasher import content_hash
from dynacoll.hashdict import Dict
from dynacoll.hashset import Set


# =============================================================================
# STRATEGIES
# =============================================================================

primitives = st.one_of(
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False),
    st.text(max_size=20),
    st.binary(max_size=20),
)

values = st.recursive(
    primitives,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.tuples(children, children),
        st.dictionaries(st.text(max_size=5), children, max_size=4),
    ),
    max_leaves=10,
)


@composite
def value_sets(draw):
    return Set(draw(st.lists(values, max_size=10)))


# =============================================================================
# CONTENT HASH
# =============================================================================

class TestContentHash:

    @given(value=values)
    @settings(max_examples=300)
    def test_hash_deterministic(self, value):
        assert content_hash(value) == content_hash(value)

    @given(a=values, b=values)
    @settings(max_examples=300)
    def test_hash_follows_encoding(self, a, b):
        if encode(a) == encode(b):
            assert content_hash(a) == content_hash(b)
        else:
            assert content_hash(a) != content_hash(b)


# =============================================================================
# SET LAWS
# =============================================================================

class TestSetLaws:

    @given(items=st.lists(values, max_size=10))
    def test_add_then_contains(self, items):
        s = Set()
        for item in items:
            s.add(item)
        for item in items:
            assert s.contains(item)

    @given(s=value_sets(), value=values)
    def test_remove_then_not_contains(self, s, value):
        s.add(value)
        s.remove(value)
        assert not s.contains(value)

    @given(a=value_sets(), b=value_sets())
    def test_equals_symmetric(self, a, b):
        assert a.equals(b) == b.equals(a)

    @given(a=value_sets())
    def test_equals_reflexive(self, a):
        assert a.equals(a)
        assert a.equals(a.copy())

    @given(a=value_sets(), b=value_sets())
    def test_union_is_superset(self, a, b):
        u = a.union(b)
        assert u.superset_of(a)
        assert u.superset_of(b)

    @given(a=value_sets(), b=value_sets())
    def test_intersection_members(self, a, b):
        i = a.intersection(b)
        for value in i:
            assert a.contains(value) and b.contains(value)
        for value in a:
            if b.contains(value):
                assert i.contains(value)

    @given(a=value_sets(), b=value_sets())
    def test_symmetric_difference_members(self, a, b):
        d = a.symmetric_difference(b)
        for value in a.union(b):
            assert d.contains(value) == (a.contains(value) != b.contains(value))

    @given(a=value_sets(), value=values)
    def test_copy_independence(self, a, value):
        b = a.copy()
        had = a.contains(value)
        b.add(value)
        assert a.contains(value) == had

    @given(a=value_sets())
    def test_iterate_matches_snapshot(self, a):
        drained = list(a.iterate())
        assert len(drained) == len(a)
        assert Set(drained).equals(a)


# =============================================================================
# DICT LAWS
# =============================================================================

class TestDictLaws:

    @given(key=values, v1=values, v2=values)
    def test_set_get_overwrite(self, key, v1, v2):
        d = Dict()
        d.set(key, v1)
        assert d.get(key) == v1
        d.set(key, v2)
        assert d.get(key) == v2
        assert len(d) == 1

    @given(keys=st.lists(values, max_size=10), missing=values)
    def test_absent_key_returns_none(self, keys, missing):
        d = Dict.from_key_values(keys, range(len(keys)))
        d.remove(missing)
        assert d.get(missing) is None

    @given(keys=st.lists(values, max_size=10))
    def test_index_consistency(self, keys):
        d = Dict.from_key_values(keys, keys)
        d.pop_item()
        for digest, key in d._keys.items():
            assert content_hash(key) == digest
        assert set(d._keys) == set(d._values)
