"""
Typed records and their field-map codec.

A TimeRecord is what applications work with; a field map is what the
log stream stores. This package converts between the two.
"""

from .codec import (
    FIELD_ID,
    FIELD_MESSAGE,
    FIELD_OWNER,
    TimeRecord,
    decode_record,
    encode_record,
)
from .errors import DecodeError, InvalidFormatError, MissingFieldError

__all__ = [
    "TimeRecord",
    "encode_record",
    "decode_record",
    "FIELD_ID",
    "FIELD_OWNER",
    "FIELD_MESSAGE",
    # Errors
    "DecodeError",
    "MissingFieldError",
    "InvalidFormatError",
]
