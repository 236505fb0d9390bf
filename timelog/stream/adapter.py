"""
Stream entry adapter for timelog.

The adapter writes TimeRecords to a log stream and reads them back. It
ensures:
- Records are encoded with the record codec before append
- Range reads decode every entry independently
- One bad entry never hides the others

Invariants:
    - Exactly one store call per append_record / read_range
    - Store errors propagate unchanged, nothing is retried here
    - A store failure during a read yields no partial result
    - Entries that cannot be parsed are dropped and counted
    - Decode failures are returned alongside their entry, in store order

How to change safely:
    - Keep the adapter stateless, the store is the only collaborator
    - Test with malformed entries injected into InMemoryLogStore
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from ..record import DecodeError, TimeRecord, decode_record, encode_record
from .base import AUTO_ID, MAX_ID, MIN_ID, LogStore
from .entry import MalformedEntryError, StreamEntry, parse_entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedEntry:
    """A stream entry paired with the outcome of decoding it.

    Attributes:
        entry: The parsed stream entry
        record: Decoded record, None if decoding failed
        error: Decode error, None if decoding succeeded
    """

    entry: StreamEntry
    record: Optional[TimeRecord] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        """Whether the entry decoded into a record."""
        return self.error is None


@dataclass
class ReadResult:
    """Result of a range read.

    Iterating yields DecodedEntry objects in stream order.

    Attributes:
        entries: Every parsed entry with its decode outcome
        dropped: Number of raw entries that could not be parsed
    """

    entries: List[DecodedEntry] = field(default_factory=list)
    dropped: int = 0

    def __iter__(self) -> Iterator[DecodedEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> DecodedEntry:
        return self.entries[index]

    @property
    def records(self) -> List[TimeRecord]:
        """Successfully decoded records, in stream order."""
        return [e.record for e in self.entries if e.record is not None]

    @property
    def failures(self) -> List[DecodedEntry]:
        """Entries that failed to decode."""
        return [e for e in self.entries if not e.ok]


class StreamEntryAdapter:
    """Reads and writes TimeRecords on a log store.

    Attributes:
        store: The log store backend

    Example:
        >>> adapter = StreamEntryAdapter(InMemoryLogStore())
        >>> adapter.append_record("test", TimeRecord(1, "Taro", "Hello world"))
        >>> for item in adapter.read_range("test"):
        ...     print(item.entry.entry_id, item.record)
    """

    def __init__(self, store: LogStore) -> None:
        self.store = store

    def append_record(self, stream: str, record: TimeRecord) -> str:
        """Append a record to a stream.

        Args:
            stream: Stream name
            record: Record to append

        Returns:
            The store-assigned entry id

        Raises:
            LogStoreError: If the store rejects or fails the write
        """
        entry_id = self.store.append(stream, encode_record(record), entry_id=AUTO_ID)
        logger.debug(
            "Record appended",
            extra={"stream": stream, "entry_id": entry_id, "record_id": record.id},
        )
        return entry_id

    def read_range(
        self,
        stream: str,
        lower: str = MIN_ID,
        upper: str = MAX_ID,
    ) -> ReadResult:
        """Read and decode entries between two ids, inclusive.

        Args:
            stream: Stream name
            lower: Lower id bound, passed to the store verbatim
            upper: Upper id bound, passed to the store verbatim

        Returns:
            ReadResult with one DecodedEntry per parseable entry

        Raises:
            LogStoreError: If the read fails
        """
        raw_entries = self.store.range(stream, lower, upper)

        result = ReadResult()
        for raw in raw_entries:
            try:
                entry = parse_entry(raw)
            except MalformedEntryError as e:
                result.dropped += 1
                logger.warning(
                    f"Dropping malformed stream entry: {e}",
                    extra={"stream": stream},
                )
                continue

            try:
                record = decode_record(entry.fields)
            except DecodeError as e:
                logger.debug(
                    f"Entry failed to decode: {e}",
                    extra={"stream": stream, "entry_id": entry.entry_id},
                )
                result.entries.append(DecodedEntry(entry=entry, error=e))
                continue

            result.entries.append(DecodedEntry(entry=entry, record=record))

        return result

    def read_records(
        self,
        stream: str,
        lower: str = MIN_ID,
        upper: str = MAX_ID,
    ) -> List[TimeRecord]:
        """Read only the records that decode cleanly."""
        return self.read_range(stream, lower, upper).records
