"""
Error taxonomy for dynacoll.

Every failure is raised to the immediate caller. Each error also derives from
the builtin exception a Python caller would expect for the same situation, so
``except IndexError`` or ``except TypeError`` keep working.
"""


class CollectionError(Exception):
    """Base class for all dynacoll errors."""


class EncodingError(CollectionError, TypeError):
    """
    A value has no canonical encoding.

    Raised for unencodable data (functions, arbitrary objects, reference
    cycles) and for the "no value" sentinel used where a key is required.
    The container involved is left unchanged.
    """


class IndexOutOfRangeError(CollectionError, IndexError):
    """Positional access outside the bounds of an ordered container."""


class ArityMismatchError(CollectionError, ValueError):
    """Bulk construction given mismatched key/value counts or malformed pairs."""


class EmptyContainerError(CollectionError, IndexError):
    """Positional removal from an empty ordered container."""
