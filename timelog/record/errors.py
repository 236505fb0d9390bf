"""
Error types raised while decoding records from stream field maps.

- DecodeError: Base exception, carries the offending field name
- MissingFieldError: A required field is absent
- InvalidFormatError: A field is present but its value cannot be parsed

Invariants:
    - Exactly one error is reported per record (the first field that fails)
    - Errors include the field name for programmatic handling
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DecodeError(Exception):
    """Base exception for record decoding failures.

    Attributes:
        field_name: Name of the field that failed
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        field_name: str,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.message = message
        self.code = code or "DECODE_ERROR"
        self.details = details or {}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecodeError):
            return NotImplemented
        return type(self) is type(other) and self.field_name == other.field_name

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.field_name))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field_name!r})"


class MissingFieldError(DecodeError):
    """Required field is missing from the field map."""

    def __init__(self, field_name: str) -> None:
        super().__init__(
            field_name,
            f"Missing {field_name} field",
            code="MISSING_FIELD",
        )


class InvalidFormatError(DecodeError):
    """Field value has the wrong format.

    Attributes:
        value: The raw value that failed to parse
    """

    def __init__(self, field_name: str, value: Optional[str] = None) -> None:
        super().__init__(
            field_name,
            f"Invalid {field_name} field: {value!r}",
            code="INVALID_FORMAT",
            details={"value": value},
        )
        self.value = value
