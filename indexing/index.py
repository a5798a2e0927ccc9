"""
Index Definition
================
An IndexedField names a field that the store keeps a sorted view for,
how to read that field from a record, and whether its values must be
unique across the store.

Descriptors are immutable once built. The declarative part (name and
uniqueness) round-trips through plain dicts for configuration files;
custom extractors do not, they are code.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from store.errors import ConfigurationError, InvalidRecordError
from store.fields import (
    FieldExtractor, MissingFieldError, field_extractor, is_default_extractor,
)


@dataclass(frozen=True)
class IndexedField:
    """Definition of a single index: field name, extractor, uniqueness."""
    name: str
    unique: bool = False
    extractor: Optional[FieldExtractor] = field(default=None, compare=False)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise ConfigurationError(
                f"Index field name must be a non-empty string, got {self.name!r}"
            )
        if self.extractor is None:
            object.__setattr__(self, "extractor", field_extractor(self.name))
        elif not callable(self.extractor):
            raise ConfigurationError(
                f"Extractor for index '{self.name}' is not callable"
            )

    @property
    def has_custom_extractor(self) -> bool:
        return not is_default_extractor(self.extractor, self.name)

    def extract(self, record: Any) -> Any:
        """
        Read this index's value from a record.
        Raises InvalidRecordError if the field is missing or unreadable.
        """
        try:
            return self.extractor(record)
        except MissingFieldError:
            raise InvalidRecordError(self.name, record) from None
        except (AttributeError, KeyError, IndexError) as e:
            raise InvalidRecordError(self.name, record) from e

    # ─── Serialization ──────────────────────────────────────────────

    def to_dict(self) -> dict:
        d: dict = {"field": self.name, "unique": self.unique}
        if self.has_custom_extractor:
            d["custom_extractor"] = True
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "IndexedField":
        """Deserialize an index definition. Always uses the default extractor."""
        if not isinstance(d, dict) or "field" not in d:
            raise ConfigurationError(f"Index definition needs a 'field' key: {d!r}")
        unique = d.get("unique", False)
        if not isinstance(unique, bool):
            raise ConfigurationError(
                f"'unique' for index '{d['field']}' must be a boolean, got {unique!r}"
            )
        return cls(name=d["field"], unique=unique)
