"""
dynacoll: Generic Collections over Values of Any Type

Four container kinds:

- List:  ordered, mutable sequence
- Tuple: ordered, immutable sequence
- Set:   unordered collection of unique values
- Dict:  unordered key/value mapping

Set members and Dict keys are identified by a content hash derived from a
canonical encoding of the value, so they do not need to be hashable in the
Python sense: lists, dicts, dataclasses and nested containers all work.

Usage:
    from dynacoll import Set, Dict

    s = Set.from_values(1, 2.2, "hello", [1, 2])
    s.contains([1, 2])                      # True

    d = Dict.from_key_values([{"x": 1}], ["point"])
    d.get({"x": 1})                         # "point"
    d.get("missing")                        # None

    # Every container iterates lazily
    for value in s.iterate():
        ...

    # Content hashes directly
    from dynacoll import content_hash
    digest = content_hash({"name": "Alice", "age": 30})
"""

# Errors
from .errors import (
    CollectionError,
    EncodingError,
    IndexOutOfRangeError,
    ArityMismatchError,
    EmptyContainerError,
)

# Types
from .types import NO_VALUE, TypeTag, SchemaId

# Encoding and hashing
from .encoder import CanonicalEncoder, CanonicalTape, encode
from .hasher import ContentHasher, content_hash, default_hasher

# Iteration
from .iteration import LazySequence

# Containers
from .sequence import Tuple, List
from .hashset import Set
from .hashdict import Dict

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Errors
    "CollectionError",
    "EncodingError",
    "IndexOutOfRangeError",
    "ArityMismatchError",
    "EmptyContainerError",
    # Types
    "NO_VALUE",
    "TypeTag",
    "SchemaId",
    # Encoding and hashing
    "CanonicalEncoder",
    "CanonicalTape",
    "encode",
    "ContentHasher",
    "content_hash",
    "default_hasher",
    # Iteration
    "LazySequence",
    # Containers
    "Tuple",
    "List",
    "Set",
    "Dict",
]
