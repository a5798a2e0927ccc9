"""
Indexing Module
===============
Per-field sorted views used by the store for lookup.

Components:
  - index: IndexedField descriptor (field name, extractor, uniqueness)
  - sorted_view: Full-rebuild sorted view with binary search and
    duplicate-range expansion
"""
