"""
In-memory log store implementation for testing.

This module provides a simple in-memory backend for:
- Unit tests
- Local development without a Redis server

Invariants:
    - All data is lost on close() or process exit
    - Entry ids follow the Redis stream format "<ms>-<seq>" and strictly
      increase within a stream
    - range() replies have the same raw byte shape as Redis XRANGE
    - Thread-safe for concurrent access

How to change safely:
    - This is test-only code, changes don't affect production
    - Keep interface compatible with LogStore protocol
    - Keep range bound semantics aligned with Redis XRANGE
"""

from __future__ import annotations

import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from .base import (
    AUTO_ID,
    MAX_ID,
    MIN_ID,
    LogStoreConnectionError,
    LogStoreError,
)

logger = logging.getLogger(__name__)

_MAX_SEQ = 2**64 - 1

EntryKey = Tuple[int, int]


@dataclass
class InMemoryStream:
    """In-memory stream storage.

    Entries are kept in append order, which is also id order.
    """
    entries: List[Tuple[EntryKey, Any]] = field(default_factory=list)
    last_id: EntryKey = (0, 0)


class InMemoryLogStore:
    """In-memory implementation of LogStore for testing.

    Attributes:
        streams: Storage for stream data

    Thread safety:
        Uses a threading lock around all stream state.

    Example:
        >>> store = InMemoryLogStore()
        >>> entry_id = store.append("test", [("owner", "Taro")])
        >>> store.range("test", "-", "+")
        [[b'1700000000000-0', [b'owner', b'Taro']]]
    """

    def __init__(self) -> None:
        self._streams: Dict[str, InMemoryStream] = defaultdict(InMemoryStream)
        self._lock = threading.Lock()
        self._closed = False
        self._pending_failure: Optional[Exception] = None

    def append(
        self,
        stream: str,
        fields: Sequence[Tuple[str, str]],
        entry_id: str = AUTO_ID,
    ) -> str:
        """Append a field map to an in-memory stream.

        Args:
            stream: Stream name
            fields: Ordered (name, value) pairs
            entry_id: "*" for an auto id, or an explicit "<ms>-<seq>"

        Returns:
            The new entry id
        """
        payload: List[bytes] = []
        for name, value in fields:
            payload.append(name.encode("utf-8"))
            payload.append(value.encode("utf-8"))

        with self._lock:
            self._check_available()
            key = self._add(stream, entry_id, payload)

        new_id = _format_id(key)
        logger.debug(
            "Entry appended to in-memory stream",
            extra={"stream": stream, "entry_id": new_id},
        )
        return new_id

    def range(self, stream: str, lower: str, upper: str) -> List[Any]:
        """Read raw entries between two ids, inclusive.

        Args:
            stream: Stream name
            lower: "-", "<ms>", "<ms>-<seq>", optionally prefixed with "("
            upper: "+", "<ms>", "<ms>-<seq>", optionally prefixed with "("

        Returns:
            Raw replies, oldest first
        """
        with self._lock:
            self._check_available()
            low, low_exclusive = _parse_bound(lower, is_upper=False)
            high, high_exclusive = _parse_bound(upper, is_upper=True)

            if stream not in self._streams:
                return []

            result = []
            for key, reply in self._streams[stream].entries:
                if key < low or (low_exclusive and key == low):
                    continue
                if key > high or (high_exclusive and key == high):
                    continue
                result.append(reply)
            return result

    def close(self) -> None:
        """Close and clear all data."""
        with self._lock:
            self._closed = True
            self._streams.clear()
        logger.debug("InMemoryLogStore closed")

    def _check_available(self) -> None:
        if self._closed:
            raise LogStoreConnectionError("Store is closed")
        if self._pending_failure is not None:
            failure, self._pending_failure = self._pending_failure, None
            raise failure

    def _add(self, stream: str, entry_id: str, payload: Any) -> EntryKey:
        """Store a reply under a new id. Caller must hold the lock."""
        data = self._streams[stream]
        last_ms, last_seq = data.last_id

        if entry_id == AUTO_ID:
            now_ms = int(time.time() * 1000)
            if now_ms > last_ms:
                key = (now_ms, 0)
            else:
                key = (last_ms, last_seq + 1)
        else:
            key = _parse_id(entry_id, default_seq=0)
            if key is None:
                raise LogStoreError(f"Invalid stream ID specified as stream command argument: {entry_id}")
            if key == (0, 0):
                raise LogStoreError("The ID specified in XADD must be greater than 0-0")
            if key <= data.last_id:
                raise LogStoreError(
                    "The ID specified in XADD is equal or smaller than the target stream top item"
                )

        data.entries.append((key, [_format_id(key).encode("utf-8"), payload]))
        data.last_id = key
        return key

    # Testing helpers

    def inject_raw(self, stream: str, reply: Any, entry_id: str = AUTO_ID) -> str:
        """Store an arbitrary raw reply as the next entry (testing helper).

        The reply is returned by range() exactly as given, so malformed
        replies can be fed to readers. entry_id only positions the reply
        in the stream.

        Returns:
            The id used to position the reply
        """
        with self._lock:
            self._check_available()
            key = self._add(stream, entry_id, None)
            data = self._streams[stream]
            data.entries[-1] = (key, reply)
        return _format_id(key)

    def fail_next(self, exception: Exception) -> None:
        """Make the next append() or range() raise exception (testing helper)."""
        with self._lock:
            self._pending_failure = exception

    def get_entry_count(self, stream: str) -> int:
        """Get entry count for a stream (testing helper)."""
        with self._lock:
            if stream not in self._streams:
                return 0
            return len(self._streams[stream].entries)

    def clear_stream(self, stream: str) -> None:
        """Remove all entries of a stream (testing helper)."""
        with self._lock:
            self._streams.pop(stream, None)


def _format_id(key: EntryKey) -> str:
    return f"{key[0]}-{key[1]}"


def _parse_id(value: str, default_seq: int) -> Optional[EntryKey]:
    """Parse "<ms>" or "<ms>-<seq>", None if malformed."""
    ms_part, sep, seq_part = value.partition("-")
    if not ms_part.isdigit() or not ms_part.isascii():
        return None
    if not sep:
        return int(ms_part), default_seq
    if not seq_part.isdigit() or not seq_part.isascii():
        return None
    return int(ms_part), int(seq_part)


def _parse_bound(value: str, is_upper: bool) -> Tuple[EntryKey, bool]:
    """Parse a range bound into (key, exclusive)."""
    if value == MIN_ID:
        return (0, 0), False
    if value == MAX_ID:
        return (_MAX_SEQ, _MAX_SEQ), False

    exclusive = value.startswith("(")
    if exclusive:
        value = value[1:]

    key = _parse_id(value, default_seq=_MAX_SEQ if is_upper else 0)
    if key is None:
        raise LogStoreError(f"Invalid stream ID specified as stream command argument: {value}")
    return key, exclusive
