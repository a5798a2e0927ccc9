"""
Sorted View
===========
A derived ordering of the store's records by one index's field value.

Structure:
  - A plain list of record references, the same objects held by the
    primary sequence, sorted by extracted value with None first.
  - A parallel list of the extracted values, so searches never call the
    extractor again.

Maintenance:
  - rebuild() copies the primary sequence and stable-sorts it. Equal keys
    therefore keep insertion order. Always a full O(n log n) rebuild.

Search:
  - Binary search lands on *some* match; expand() then widens it to the
    full contiguous run of equal keys. O(log n + k).

Not thread-safe. The view is private to its store; callers only see
copies.
"""

import logging
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from indexing.index import IndexedField
from store.errors import NotComparableError
from store.fields import ORDERING_ERRORS, check_orderable, compare_values, sort_key

logger = logging.getLogger(__name__)


class SortedView:
    """
    Sorted view of records for one IndexedField.

    Usage:
        view = SortedView(IndexedField("age"))
        view.rebuild(records)
        matches = view.find(42)
    """

    __slots__ = ('_index', '_records', '_keys')

    def __init__(self, index: IndexedField):
        self._index = index
        self._records: List[Any] = []
        self._keys: List[Any] = []

    @property
    def index(self) -> IndexedField:
        return self._index

    @property
    def field_name(self) -> str:
        return self._index.name

    def __len__(self) -> int:
        return len(self._records)

    # ─── Maintenance ────────────────────────────────────────────────

    def rebuild(self, records: Sequence[Any]) -> None:
        """
        Replace the view with a freshly sorted copy of `records`.
        On failure the previous contents are kept and NotComparableError raised.
        """
        pairs = [(self._index.extract(r), r) for r in records]
        try:
            pairs.sort(key=lambda p: sort_key(p[0]))
        except ORDERING_ERRORS as e:
            raise NotComparableError(self.field_name, reason=str(e)) from e

        self._keys = [k for k, _ in pairs]
        self._records = [r for _, r in pairs]
        logger.debug("Rebuilt view '%s' (%d records)", self.field_name, len(pairs))

    def clear(self) -> None:
        self._records = []
        self._keys = []

    def sample_key(self) -> Optional[Any]:
        """Any non-None key in the view, or None if there is none."""
        # Nulls sort first, so the last key is non-None whenever one exists
        return self._keys[-1] if self._keys else None

    # ─── Search ─────────────────────────────────────────────────────

    def check_key(self, value: Any) -> None:
        """
        Reject a value that cannot be ordered against this view's keys.
        Raises NotComparableError.
        """
        try:
            check_orderable(value)
            existing = self.sample_key()
            if value is not None and existing is not None:
                compare_values(value, existing)
        except ORDERING_ERRORS as e:
            raise NotComparableError(self.field_name, value, str(e)) from e

    def binary_search(self, value: Any) -> int:
        """
        Position of some entry whose key compares equal to `value`, or -1.
        Not necessarily the first or last of a run of duplicates.
        """
        low = 0
        high = len(self._keys) - 1
        while low <= high:
            mid = (low + high) // 2
            try:
                cmp = compare_values(self._keys[mid], value)
            except ORDERING_ERRORS as e:
                raise NotComparableError(self.field_name, value, str(e)) from e
            if cmp < 0:
                low = mid + 1
            elif cmp > 0:
                high = mid - 1
            else:
                return mid
        return -1

    def expand(self, pos: int) -> Tuple[int, int]:
        """
        Widen a match at `pos` to the contiguous run of equal keys.
        Returns (first, last), both inclusive.
        """
        target = self._keys[pos]
        first = pos
        last = pos
        while first > 0 and compare_values(self._keys[first - 1], target) == 0:
            first -= 1
        while last < len(self._keys) - 1 and compare_values(self._keys[last + 1], target) == 0:
            last += 1
        return first, last

    def find(self, value: Any) -> List[Any]:
        """All records whose key equals `value`, in view order. New list."""
        self.check_key(value)
        pos = self.binary_search(value)
        if pos == -1:
            return []
        first, last = self.expand(pos)
        return self._records[first:last + 1]

    def contains_key(self, value: Any) -> bool:
        self.check_key(value)
        return self.binary_search(value) != -1

    # ─── Snapshots ──────────────────────────────────────────────────

    def snapshot(self) -> Tuple[Any, ...]:
        return tuple(self._records)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot())

    # ─── Debug / Verification ───────────────────────────────────────

    def verify_structure(self, primary: Sequence[Any]) -> List[str]:
        """
        Check the view against the primary sequence.
        Returns list of issues found (empty = healthy).
        """
        issues: List[str] = []
        name = self.field_name

        if len(self._records) != len(primary):
            issues.append(
                f"View '{name}': length {len(self._records)} != primary {len(primary)}")
        if len(self._keys) != len(self._records):
            issues.append(f"View '{name}': key/record length mismatch")
            return issues

        # Permutation check by identity, counting multiplicity
        counts: dict = {}
        for r in primary:
            counts[id(r)] = counts.get(id(r), 0) + 1
        for r in self._records:
            counts[id(r)] = counts.get(id(r), 0) - 1
        if any(c != 0 for c in counts.values()):
            issues.append(f"View '{name}': not a permutation of the primary sequence")

        for i in range(1, len(self._keys)):
            try:
                out_of_order = compare_values(self._keys[i - 1], self._keys[i]) > 0
            except ORDERING_ERRORS:
                issues.append(f"View '{name}': incomparable keys at position {i}")
                continue
            if out_of_order:
                issues.append(f"View '{name}': keys not sorted at position {i}")
            elif self._index.unique and compare_values(self._keys[i - 1], self._keys[i]) == 0:
                issues.append(
                    f"View '{name}': duplicate key {self._keys[i]!r} in unique index")

        # Stored keys must still match the records (mutated indexed field)
        for i, r in enumerate(self._records):
            try:
                current = self._index.extract(r)
            except Exception as e:
                issues.append(f"View '{name}': record at {i} unreadable: {e}")
                continue
            if current is not self._keys[i] and current != self._keys[i]:
                issues.append(f"View '{name}': stale key at position {i}")

        return issues
