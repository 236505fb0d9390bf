"""
timelog - typed records on an append-only log stream.

Applications work with TimeRecord values; the log store (Redis Streams in
production) only understands flat string field maps. timelog converts
between the two and reads streams back tolerantly:

    TimeRecord ──encode──▶ [(name, value), ...] ──XADD──▶ stream
    stream ──XRANGE──▶ raw entries ──parse──▶ StreamEntry ──decode──▶ TimeRecord

Invariants:
    - decode(encode(record)) == record for every valid record
    - Entry ids are assigned by the store and never interpreted here
    - A malformed or undecodable entry does not abort a read

Version: see _version.py.
"""

from ._version import __version__
from .record import DecodeError, InvalidFormatError, MissingFieldError, TimeRecord
from .stream import (
    InMemoryLogStore,
    LogStore,
    LogStoreError,
    RedisLogStore,
    StreamEntry,
    StreamEntryAdapter,
)

__all__ = [
    "__version__",
    "TimeRecord",
    "StreamEntry",
    "StreamEntryAdapter",
    "LogStore",
    "RedisLogStore",
    "InMemoryLogStore",
    "DecodeError",
    "MissingFieldError",
    "InvalidFormatError",
    "LogStoreError",
]
