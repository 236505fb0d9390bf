"""
Record codec for timelog.

Maps a TimeRecord to the flat string field map a log stream persists,
and reconstructs TimeRecords from field maps read back from the stream.

Invariants:
    - Encoding is total and lossless: decode_record(dict(encode_record(r))) == r
    - Integers are written as decimal text
    - Decoding checks fields in the order id, owner, message and reports
      only the first failure
    - Unknown fields are ignored when decoding

How to change safely:
    - New fields must be optional on decode so older entries keep reading
    - Never rename an existing field name, entries already in the stream use it
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Mapping, Tuple

from .errors import InvalidFormatError, MissingFieldError

FIELD_ID = "id"
FIELD_OWNER = "owner"
FIELD_MESSAGE = "message"

FieldPairs = List[Tuple[str, str]]

# Unsigned decimal, optional leading '+'; ASCII digits only.
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class TimeRecord:
    """A timestamped message posted by an owner.

    Attributes:
        id: Caller-assigned non-negative identifier (uniqueness is not enforced)
        owner: Who posted the message
        message: Message body, may be empty

    Example:
        >>> record = TimeRecord(id=1, owner="Taro", message="Hello world")
        >>> str(record)
        '(1) [Taro] Hello world'
    """

    id: int
    owner: str
    message: str

    def __post_init__(self) -> None:
        if not isinstance(self.id, int) or isinstance(self.id, bool):
            raise ValueError(f"id must be an integer, got {type(self.id).__name__}")
        if self.id < 0:
            raise ValueError(f"id must be non-negative, got {self.id}")

    def to_fields(self) -> FieldPairs:
        """Encode this record as ordered field pairs."""
        return encode_record(self)

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> TimeRecord:
        """Decode a record from a field map.

        Raises:
            MissingFieldError: If a required field is absent
            InvalidFormatError: If the id is not a non-negative integer
        """
        return decode_record(fields)

    def __str__(self) -> str:
        return f"({self.id}) [{self.owner}] {self.message}"


def encode_record(record: TimeRecord) -> FieldPairs:
    """Encode a record into ordered (name, value) pairs.

    Args:
        record: Record to encode

    Returns:
        [("id", ...), ("owner", ...), ("message", ...)]
    """
    return [
        (FIELD_ID, str(record.id)),
        (FIELD_OWNER, record.owner),
        (FIELD_MESSAGE, record.message),
    ]


def decode_record(fields: Mapping[str, str]) -> TimeRecord:
    """Decode a record from a field map.

    Args:
        fields: Field name to value mapping; extra keys are ignored

    Returns:
        The decoded TimeRecord

    Raises:
        MissingFieldError: If id, owner or message is absent
        InvalidFormatError: If id is not a non-negative decimal integer
    """
    raw_id = fields.get(FIELD_ID)
    if raw_id is None:
        raise MissingFieldError(FIELD_ID)
    record_id = _parse_unsigned(raw_id)
    if record_id is None:
        raise InvalidFormatError(FIELD_ID, raw_id)

    owner = fields.get(FIELD_OWNER)
    if owner is None:
        raise MissingFieldError(FIELD_OWNER)

    message = fields.get(FIELD_MESSAGE)
    if message is None:
        raise MissingFieldError(FIELD_MESSAGE)

    return TimeRecord(id=record_id, owner=owner, message=message)


def _parse_unsigned(value: str) -> int | None:
    """Parse a non-negative decimal integer, None if it isn't one."""
    if not isinstance(value, str) or not _UNSIGNED_RE.fullmatch(value):
        return None
    return int(value)
