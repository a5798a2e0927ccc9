"""
Synchronized Store
==================
Thread-safe facade over an IndexedStore.

Design rules:
  - One re-entrant lock guards every call, queries included. During a
    mutation the primary sequence and the views are transiently out of
    step, so an unguarded find could disagree with len() or iteration.
  - Iteration takes its snapshot under the lock; the returned iterator
    is then free of it.
  - compound() hands out the lock for multi-step read-modify-write.

Thread safety: all public methods guarded by threading.RLock.
"""

import threading
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional

from store.indexed_store import IndexedStore


class SynchronizedStore:
    """
    Lock-guarded wrapper.

    Usage:
        shared = SynchronizedStore(IndexedStore("id"))
        shared.insert(record)             # from any thread
        with shared.compound() as store:  # atomic check-then-insert
            if store.find_one("id", 7) is None:
                store.insert(record)
    """

    def __init__(self, store: IndexedStore):
        self._store = store
        self._mutex = threading.RLock()

    @contextmanager
    def compound(self):
        """Hold the lock across several operations on the underlying store."""
        with self._mutex:
            yield self._store

    # ─── Queries ────────────────────────────────────────────────────

    def find(self, field_name: str, value: Any) -> List[Any]:
        with self._mutex:
            return self._store.find(field_name, value)

    def find_one(self, field_name: str, value: Any) -> Optional[Any]:
        with self._mutex:
            return self._store.find_one(field_name, value)

    def contains(self, record: Any) -> bool:
        with self._mutex:
            return self._store.contains(record)

    __contains__ = contains

    def __len__(self) -> int:
        with self._mutex:
            return len(self._store)

    def __iter__(self) -> Iterator[Any]:
        with self._mutex:
            return iter(self._store)

    def iter_sorted_by(self, field_name: str) -> Iterator[Any]:
        with self._mutex:
            return self._store.iter_sorted_by(field_name)

    def is_empty(self) -> bool:
        with self._mutex:
            return self._store.is_empty()

    def contains_all(self, records: Iterable[Any]) -> bool:
        with self._mutex:
            return self._store.contains_all(records)

    def to_list(self) -> List[Any]:
        with self._mutex:
            return self._store.to_list()

    def verify_structure(self) -> List[str]:
        with self._mutex:
            return self._store.verify_structure()

    # ─── Mutation ───────────────────────────────────────────────────

    def insert(self, record: Any) -> None:
        with self._mutex:
            self._store.insert(record)

    def add(self, record: Any) -> bool:
        with self._mutex:
            return self._store.add(record)

    def bulk_insert(self, records: Iterable[Any]) -> int:
        with self._mutex:
            return self._store.bulk_insert(records)

    add_all = bulk_insert

    def remove(self, record: Any) -> bool:
        with self._mutex:
            return self._store.remove(record)

    def remove_all(self, records: Iterable[Any]) -> bool:
        with self._mutex:
            return self._store.remove_all(records)

    def retain_all(self, records: Iterable[Any]) -> bool:
        with self._mutex:
            return self._store.retain_all(records)

    def clear(self) -> None:
        with self._mutex:
            self._store.clear()

    def reindex(self) -> None:
        with self._mutex:
            self._store.reindex()
