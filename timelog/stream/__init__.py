"""
Log stream access for timelog.

This package provides a pluggable log store interface supporting:
- Redis Streams (production)
- In-memory (for testing)

and the adapter that moves TimeRecords in and out of a store.

Invariants:
    - The store assigns entry ids; callers never generate them
    - Range reads are ordered oldest to newest
    - A malformed entry never aborts a read of the rest of the stream

How to change safely:
    - New backends must implement the LogStore protocol and return raw
      replies in the XRANGE shape
"""

from .adapter import DecodedEntry, ReadResult, StreamEntryAdapter
from .base import (
    AUTO_ID,
    MAX_ID,
    MIN_ID,
    LogStore,
    LogStoreConnectionError,
    LogStoreError,
    LogStoreTimeoutError,
    create_log_store,
)
from .entry import MalformedEntryError, StreamEntry, parse_entry
from .memory import InMemoryLogStore
from .redis import RedisLogStore

__all__ = [
    # Protocol and types
    "LogStore",
    "StreamEntry",
    "LogStoreError",
    "LogStoreConnectionError",
    "LogStoreTimeoutError",
    "MalformedEntryError",
    "AUTO_ID",
    "MIN_ID",
    "MAX_ID",
    # Parsing and adapter
    "parse_entry",
    "StreamEntryAdapter",
    "DecodedEntry",
    "ReadResult",
    # Factory
    "create_log_store",
    # Implementations
    "RedisLogStore",
    "InMemoryLogStore",
]
