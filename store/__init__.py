"""
Indexed Store Module
====================
In-memory record store with declared secondary indexes.

Components:
  - errors: Typed store failures (configuration, duplicate key, invalid
    record, not comparable, unknown index)
  - fields: Field extraction and null-first value ordering
  - indexed_store: IndexedStore (primary sequence + per-index sorted views)
"""
