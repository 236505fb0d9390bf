"""
Unit tests for the record codec.

Tests cover:
- Encoding field order and formatting
- Round trip of valid records
- Missing and malformed field detection
- Error precedence (id, then owner, then message)
"""

import pytest

from timelog.record import (
    DecodeError,
    InvalidFormatError,
    MissingFieldError,
    TimeRecord,
    decode_record,
    encode_record,
)


class TestTimeRecord:
    """Tests for TimeRecord construction."""

    def test_str_format(self):
        """Records render as (id) [owner] message."""
        record = TimeRecord(id=1, owner="Taro", message="Hello world")
        assert str(record) == "(1) [Taro] Hello world"

    def test_negative_id_rejected(self):
        """Negative ids are not valid records."""
        with pytest.raises(ValueError):
            TimeRecord(id=-1, owner="Taro", message="hi")

    def test_non_integer_id_rejected(self):
        """Ids must be real integers."""
        with pytest.raises(ValueError):
            TimeRecord(id="1", owner="Taro", message="hi")
        with pytest.raises(ValueError):
            TimeRecord(id=True, owner="Taro", message="hi")

    def test_records_are_immutable(self):
        """Records cannot be mutated after construction."""
        record = TimeRecord(id=1, owner="Taro", message="hi")
        with pytest.raises(AttributeError):
            record.owner = "Jiro"


class TestEncode:
    """Tests for encode_record."""

    def test_field_order(self):
        """Fields are emitted as id, owner, message."""
        record = TimeRecord(id=42, owner="Taro", message="Hello world")
        assert encode_record(record) == [
            ("id", "42"),
            ("owner", "Taro"),
            ("message", "Hello world"),
        ]

    def test_to_fields_matches_encode(self):
        record = TimeRecord(id=7, owner="x", message="y")
        assert record.to_fields() == encode_record(record)

    def test_large_id_written_as_decimal(self):
        record = TimeRecord(id=2**64 - 1, owner="x", message="y")
        assert dict(encode_record(record))["id"] == "18446744073709551615"


class TestDecode:
    """Tests for decode_record."""

    @pytest.mark.parametrize(
        "record",
        [
            TimeRecord(id=1, owner="Taro", message="Hello world"),
            TimeRecord(id=0, owner="", message=""),
            TimeRecord(id=123456789, owner="名前", message="line one\nline two"),
        ],
    )
    def test_round_trip(self, record):
        """Decoding an encoded record gives the record back."""
        assert decode_record(dict(encode_record(record))) == record

    def test_from_fields_matches_decode(self):
        fields = {"id": "3", "owner": "x", "message": "y"}
        assert TimeRecord.from_fields(fields) == decode_record(fields)

    def test_missing_owner(self):
        """Missing owner is reported by name."""
        with pytest.raises(MissingFieldError) as exc_info:
            decode_record({"id": "1", "message": "hi"})
        assert exc_info.value.field_name == "owner"
        assert exc_info.value.code == "MISSING_FIELD"

    def test_missing_id(self):
        with pytest.raises(MissingFieldError) as exc_info:
            decode_record({"owner": "x", "message": "y"})
        assert exc_info.value.field_name == "id"

    def test_missing_message(self):
        with pytest.raises(MissingFieldError) as exc_info:
            decode_record({"id": "1", "owner": "x"})
        assert exc_info.value.field_name == "message"

    def test_invalid_id(self):
        """Non-numeric id is an invalid format, not a missing field."""
        with pytest.raises(InvalidFormatError) as exc_info:
            decode_record({"id": "abc", "owner": "x", "message": "y"})
        assert exc_info.value.field_name == "id"
        assert exc_info.value.value == "abc"
        assert exc_info.value.code == "INVALID_FORMAT"

    @pytest.mark.parametrize("raw_id", ["-1", " 1", "1 ", "1.0", "", "0x10", "١"])
    def test_invalid_id_forms(self, raw_id):
        """Anything but an unsigned decimal is rejected."""
        with pytest.raises(InvalidFormatError):
            decode_record({"id": raw_id, "owner": "x", "message": "y"})

    def test_plus_sign_accepted(self):
        """A leading plus sign is allowed on the id."""
        record = decode_record({"id": "+5", "owner": "x", "message": "y"})
        assert record.id == 5

    def test_extra_fields_ignored(self):
        """Unknown fields do not affect decoding."""
        record = decode_record({"id": "1", "owner": "x", "message": "y", "extra": "z"})
        assert record == TimeRecord(id=1, owner="x", message="y")

    def test_empty_owner_accepted(self):
        record = decode_record({"id": "1", "owner": "", "message": "y"})
        assert record.owner == ""

    def test_first_failure_wins(self):
        """With several problems, the first field in lookup order is reported."""
        with pytest.raises(InvalidFormatError) as exc_info:
            decode_record({"id": "abc"})
        assert exc_info.value.field_name == "id"

        with pytest.raises(MissingFieldError) as exc_info:
            decode_record({"id": "1"})
        assert exc_info.value.field_name == "owner"

    def test_errors_share_base_class(self):
        with pytest.raises(DecodeError):
            decode_record({})

    def test_error_equality(self):
        """Errors compare by kind and field name."""
        assert MissingFieldError("owner") == MissingFieldError("owner")
        assert MissingFieldError("owner") != MissingFieldError("id")
        assert MissingFieldError("id") != InvalidFormatError("id")
