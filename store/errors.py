"""
Indexed Store Errors
====================
Typed failures raised by the store. Every error derives from StoreError
and also from the builtin exception a caller would naturally expect, so
`except ValueError` around an insert keeps working.

Nothing here is fatal: a failed insert leaves the store as it was, a
failed bulk insert keeps the records applied before the failure.
"""

from typing import Any


class StoreError(Exception):
    """Base class for all store errors."""
    pass


class ConfigurationError(StoreError, ValueError):
    """Invalid index configuration (duplicate field names, bad config dict)."""
    pass


class DuplicateKeyError(StoreError, ValueError):
    """Insert would violate a uniqueness constraint."""

    def __init__(self, field: str, value: Any):
        super().__init__(
            f"Duplicate key for unique index '{field}': {value!r} already present"
        )
        self.field = field
        self.value = value


class InvalidRecordError(StoreError, ValueError):
    """Record lacks an indexed field, or the field cannot be read."""

    def __init__(self, field: str, record: Any = None):
        super().__init__(
            f"Record {record!r} has no readable field '{field}'"
        )
        self.field = field
        self.record = record


class NotComparableError(StoreError, TypeError):
    """Indexed field value has no usable ordering."""

    def __init__(self, field: str, value: Any = None, reason: str = ""):
        msg = f"Value {value!r} of field '{field}' is not comparable"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.field = field
        self.value = value


class UnknownIndexError(StoreError, LookupError):
    """Query against a field name that has no index."""

    def __init__(self, field: str, available: Any = ()):
        super().__init__(
            f"No index defined for field '{field}'. "
            f"Available: {list(available)}"
        )
        self.field = field
