"""
Concurrency Module
==================
The store itself is single-threaded. This package provides the external
mutual exclusion a multi-threaded caller needs.

Components:
  - synchronized: SynchronizedStore, every call serialised on one RLock
"""
