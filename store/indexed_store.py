"""
Indexed Store
=============
In-memory record store with declared secondary indexes.

Owns:
  - The primary sequence: records in insertion order, source of truth.
  - One IndexedField per indexed field name.
  - One SortedView per index, rebuilt from the primary sequence after
    every structural mutation.

Mutation flow:
  1. Validate the record: first every indexed field readable and
     orderable, then unique fields not already present.
  2. Change the primary sequence.
  3. Rebuild every view (full O(n log n) rebuild, never incremental).

Caller contract:
  - Records must not change their indexed fields while stored. If one
    does, call reindex().
  - bulk_insert() is NOT atomic: records before the first failure stay.

Concurrency: single-threaded. See concurrency.synchronized for a locked
wrapper.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from indexing.index import IndexedField
from indexing.sorted_view import SortedView
from store.errors import (
    ConfigurationError, DuplicateKeyError, StoreError, UnknownIndexError,
)

logger = logging.getLogger(__name__)


class IndexedStore:
    """
    Insertion-ordered record store with sorted lookup by indexed field.

    Usage:
        store = IndexedStore(IndexedField("id", unique=True), "name")
        store.insert(user)
        store.find("name", "alice")
        store.find_one("id", 42)
    """

    def __init__(self, *indexes: Union[IndexedField, str], name: Optional[str] = None):
        self.name = name or "store"
        self._records: List[Any] = []
        self._indexes: Dict[str, IndexedField] = {}
        self._views: Dict[str, SortedView] = {}

        for idx in indexes:
            if isinstance(idx, str):
                idx = IndexedField(idx)
            elif not isinstance(idx, IndexedField):
                raise ConfigurationError(
                    f"Expected IndexedField or field name, got {idx!r}"
                )
            if idx.name in self._indexes:
                raise ConfigurationError(
                    f"Index for field '{idx.name}' declared more than once"
                )
            self._indexes[idx.name] = idx
            self._views[idx.name] = SortedView(idx)

        self.stats = {
            "inserts": 0,
            "inserts_rejected": 0,
            "removals": 0,
            "reindexes": 0,
        }
        logger.debug("Created store '%s' with indexes %s",
                     self.name, list(self._indexes))

    # ─── Configuration ──────────────────────────────────────────────

    @classmethod
    def from_config(cls, config: dict) -> "IndexedStore":
        """
        Build a store from a config dict:
            {"name": "users", "indexes": [{"field": "id", "unique": true}]}
        """
        if not isinstance(config, dict):
            raise ConfigurationError(f"Store config must be a dict, got {config!r}")
        index_defs = config.get("indexes", [])
        if not isinstance(index_defs, list):
            raise ConfigurationError("'indexes' must be a list of index definitions")
        indexes = [IndexedField.from_dict(d) for d in index_defs]
        return cls(*indexes, name=config.get("name"))

    def to_config(self) -> dict:
        return {
            "name": self.name,
            "indexes": [idx.to_dict() for idx in self._indexes.values()],
        }

    @property
    def index_names(self) -> List[str]:
        return list(self._indexes)

    def get_index(self, field_name: str) -> IndexedField:
        """Get an index definition by field name. Raises UnknownIndexError."""
        try:
            return self._indexes[field_name]
        except KeyError:
            raise UnknownIndexError(field_name, self._indexes) from None

    # ─── Collection protocol ────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._records)

    def is_empty(self) -> bool:
        return not self._records

    def __contains__(self, record: Any) -> bool:
        return record in self._records

    def contains(self, record: Any) -> bool:
        return record in self._records

    def contains_all(self, records: Iterable[Any]) -> bool:
        return all(r in self._records for r in records)

    def __iter__(self) -> Iterator[Any]:
        """Iterate a snapshot in insertion order; unaffected by later mutation."""
        return iter(tuple(self._records))

    def iter_sorted_by(self, field_name: str) -> Iterator[Any]:
        """Iterate a snapshot of the records ordered by an indexed field."""
        return iter(self._view(field_name))

    def to_list(self) -> List[Any]:
        return list(self._records)

    def __repr__(self) -> str:
        return (f"IndexedStore(name={self.name!r}, records={len(self._records)}, "
                f"indexes={list(self._indexes)})")

    # ─── Queries ────────────────────────────────────────────────────

    def find(self, field_name: str, value: Any) -> List[Any]:
        """
        All records whose indexed field compares equal to `value`.
        Equal keys come back in insertion order. Empty list if none.
        Raises UnknownIndexError if `field_name` has no index.
        """
        return self._view(field_name).find(value)

    def find_one(self, field_name: str, value: Any) -> Optional[Any]:
        """First record from find(), or None."""
        matches = self.find(field_name, value)
        return matches[0] if matches else None

    def _view(self, field_name: str) -> SortedView:
        view = self._views.get(field_name)
        if view is None:
            raise UnknownIndexError(field_name, self._indexes)
        return view

    # ─── Mutation ───────────────────────────────────────────────────

    def insert(self, record: Any) -> None:
        """
        Validate and append a record, then rebuild all views.

        Raises:
            InvalidRecordError: an indexed field is missing or unreadable.
            NotComparableError: an indexed value has no usable ordering.
            DuplicateKeyError: a unique field value is already present.
        Field errors are reported before any uniqueness violation.
        The store is unchanged when any of these is raised.
        """
        try:
            self._validate(record)
        except StoreError as e:
            self.stats["inserts_rejected"] += 1
            logger.debug("Rejected insert into '%s': %s", self.name, e)
            raise

        self._records.append(record)
        try:
            self._reindex()
        except StoreError:
            self._records.pop()
            self._reindex()
            self.stats["inserts_rejected"] += 1
            raise
        self.stats["inserts"] += 1

    def add(self, record: Any) -> bool:
        """Collection-style insert. Always True on success."""
        self.insert(record)
        return True

    def bulk_insert(self, records: Iterable[Any]) -> int:
        """
        Insert records one at a time, validating and reindexing after each.

        NOT atomic: stops at the first failure and re-raises, keeping every
        record inserted before it. An earlier record in the batch can make a
        later one a duplicate. Returns the number inserted.
        """
        count = 0
        for record in records:
            self.insert(record)
            count += 1
        logger.debug("Bulk inserted %d records into '%s'", count, self.name)
        return count

    add_all = bulk_insert

    def remove(self, record: Any) -> bool:
        """Remove the first record equal to `record`. False if none matched."""
        try:
            self._records.remove(record)
        except ValueError:
            return False
        self._reindex()
        self.stats["removals"] += 1
        return True

    def remove_all(self, records: Iterable[Any]) -> bool:
        """Remove one occurrence per given record. True if anything changed."""
        changed = False
        for record in records:
            if self.remove(record):
                changed = True
        return changed

    def retain_all(self, records: Iterable[Any]) -> bool:
        """Keep only records equal to one of `records`. True if anything changed."""
        keep = list(records)
        retained = [r for r in self._records if r in keep]
        removed = len(self._records) - len(retained)
        if removed == 0:
            return False
        self._records = retained
        self._reindex()
        self.stats["removals"] += removed
        return True

    def clear(self) -> None:
        """Empty the store. Indexes stay declared."""
        if not self._records:
            return
        self._records.clear()
        for view in self._views.values():
            view.clear()
        logger.debug("Cleared store '%s'", self.name)

    def reindex(self) -> None:
        """
        Rebuild every view from the primary sequence.

        Only needed after a caller changed an indexed field of a stored
        record. Raises NotComparableError if the changed values can no
        longer be ordered; views that could not be rebuilt keep their
        previous ordering.
        """
        self._reindex()

    # ─── Internals ──────────────────────────────────────────────────

    def _validate(self, record: Any) -> None:
        # Pass 1: every indexed value readable and orderable.
        # Pass 2: uniqueness. A bad record never reports a duplicate first.
        values = {}
        for idx in self._indexes.values():
            value = idx.extract(record)
            self._views[idx.name].check_key(value)
            values[idx.name] = value

        for idx in self._indexes.values():
            if idx.unique and self._views[idx.name].contains_key(values[idx.name]):
                raise DuplicateKeyError(idx.name, values[idx.name])

    def _reindex(self) -> None:
        for view in self._views.values():
            view.rebuild(self._records)
        self.stats["reindexes"] += 1

    # ─── Debug / Verification ───────────────────────────────────────

    def verify_structure(self) -> List[str]:
        """
        Verify every view against the primary sequence.
        Returns list of issues found (empty = healthy).
        """
        issues: List[str] = []
        for view in self._views.values():
            issues.extend(view.verify_structure(self._records))
        return issues
