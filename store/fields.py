"""
Field Extraction & Ordering
===========================
How the store reads an indexed value out of a record and how two such
values are ordered.

Extraction:
  - Default extractor reads a field by name: mapping records by key,
    everything else by attribute.
  - Any callable record -> value can be supplied instead.
  - A missing field surfaces as MissingFieldError, which the store turns
    into InvalidRecordError with the field name attached.

Ordering:
  - None sorts strictly before every non-None value; None == None.
  - Non-None values use Python's own < and ==.
  - NaN (float or Decimal) has no place in a total order and is rejected,
    as are sets, whose < means subset. Tuples and lists are checked per
    element.
  - Anything else that fails to order raises one of ORDERING_ERRORS.
"""

import math
from collections.abc import Mapping, Set as AbstractSet
from decimal import Decimal
from typing import Any, Callable, Tuple

FieldExtractor = Callable[[Any], Any]

# Raised by comparisons of values without a usable total order.
# Decimal signals InvalidOperation, an ArithmeticError.
ORDERING_ERRORS = (TypeError, ValueError, ArithmeticError)


class MissingFieldError(Exception):
    """Raised by an extractor when the record does not carry the field."""

    def __init__(self, field_name: str):
        super().__init__(field_name)
        self.field_name = field_name


# ─── Extraction ─────────────────────────────────────────────────────────────

def field_extractor(field_name: str) -> FieldExtractor:
    """
    Build the default extractor for a field name.
    Mappings are read by key, other records by attribute.
    """
    def extract(record: Any) -> Any:
        if isinstance(record, Mapping):
            try:
                return record[field_name]
            except KeyError:
                raise MissingFieldError(field_name) from None
        try:
            return getattr(record, field_name)
        except AttributeError:
            raise MissingFieldError(field_name) from None

    extract.field_name = field_name  # type: ignore[attr-defined]
    return extract


def is_default_extractor(extractor: FieldExtractor, field_name: str) -> bool:
    return getattr(extractor, "field_name", None) == field_name


# ─── Ordering ───────────────────────────────────────────────────────────────

def check_orderable(value: Any) -> None:
    """
    Ensure a value can take part in a total order.

    Raises ValueError for NaN (float or Decimal), TypeError for values
    that cannot be compared with themselves and for sets, whose < is
    subset inclusion rather than an ordering. Tuples and lists are
    checked element by element.
    """
    if value is None:
        return
    if isinstance(value, float) and math.isnan(value):
        raise ValueError("NaN values cannot be indexed")
    if isinstance(value, Decimal) and value.is_nan():
        raise ValueError("NaN values cannot be indexed")
    if isinstance(value, AbstractSet):
        raise TypeError(f"'{type(value).__name__}' is only partially ordered")
    if isinstance(value, (tuple, list)):
        for item in value:
            check_orderable(item)
    # Raises TypeError for values without ordering (dicts, plain objects)
    value < value


def compare_values(a: Any, b: Any) -> int:
    """
    Three-way comparison with None ordered first.
    Returns -1, 0 or 1. Propagates TypeError for incompatible values.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def sort_key(value: Any) -> Tuple[bool, Any]:
    """Key function giving the same ordering as compare_values."""
    return (value is not None, value)
