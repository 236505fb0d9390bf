"""
Parsing of raw stream entry replies.

A range read returns each entry as a two element sequence:

    [b"1700000000000-0", [b"id", b"1", b"owner", b"Taro", ...]]

parse_entry turns that into a StreamEntry with text id and field map.

Invariants:
    - Entry ids are decoded as UTF-8 with replacement, never rejected for
      bad bytes
    - Malformed field pairs are skipped, the rest of the entry is kept
    - Only a reply that is not [id, pairs], or whose id is not a string,
      is rejected
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

_SEQUENCE_TYPES = (list, tuple)


class MalformedEntryError(ValueError):
    """Raw reply does not have the shape of a stream entry."""

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.raw = raw


@dataclass(frozen=True)
class StreamEntry:
    """One entry read from a stream.

    Attributes:
        entry_id: Store-assigned id, opaque to this package
        fields: Field name to value map
    """

    entry_id: str
    fields: Dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"StreamEntry(id={self.entry_id}, fields={len(self.fields)})"


def parse_entry(raw: Any) -> StreamEntry:
    """Parse a raw entry reply into a StreamEntry.

    Args:
        raw: Two element sequence [entry_id, flat_pairs]

    Returns:
        StreamEntry with every well-formed field pair

    Raises:
        MalformedEntryError: If raw is not a two element sequence or the
            entry id is not a byte string
    """
    if not isinstance(raw, _SEQUENCE_TYPES) or len(raw) != 2:
        raise MalformedEntryError("Invalid entry format", raw=raw)

    raw_id, raw_pairs = raw
    entry_id = _to_text(raw_id)
    if entry_id is None:
        raise MalformedEntryError("Invalid ID", raw=raw)

    fields: Dict[str, str] = {}
    if isinstance(raw_pairs, _SEQUENCE_TYPES):
        # An unpaired trailing element is ignored.
        for i in range(0, len(raw_pairs) - 1, 2):
            name = _to_text(raw_pairs[i])
            value = _to_text(raw_pairs[i + 1])
            if name is None or value is None:
                continue
            fields[name] = value

    return StreamEntry(entry_id=entry_id, fields=fields)


def _to_text(value: Any) -> Optional[str]:
    """Decode a byte string reply member, None if it is not one."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    return None
