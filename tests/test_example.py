from datetime import datetime, timezone

import pytest

from protocanon.errors import CanonicalError
from protocanon.example import Example, KitchenSink, NameConflicts, Nested, Status
from protocanon.message import Choice
from protocanon.wkt import Timestamp

SAMPLE = {
    "int32Field": 123,
    "int64Field": "9007199254740993",
    "uint64Field": "18446744073709551615",
    "boolField": True,
    "stringField": "hello",
    "bytesField": "AAEC/w==",
    "floatField": "12.5",
    "doubleField": "-3.25",
    "status": "STATUS_ACTIVE",
    "nested": {"id": 42, "note": "primary"},
    "repeatedNested": [{"id": 7, "note": "first"}, {"id": 8, "note": "second"}],
    "stringToInt": {"alpha": 1, "beta": 2},
    "intToString": {"7": "seven"},
    "timestamp": "2022-01-01T00:00:00.123Z",
    "name": "choice name",
}


def sample_message() -> KitchenSink:
    return KitchenSink.from_json(SAMPLE)


def test_kitchen_sink_decodes_native_values():
    message = sample_message()
    assert message.int32_field == 123
    assert message.int64_field == 9_007_199_254_740_993
    assert message.uint64_field == 2**64 - 1
    assert message.bool_field is True
    assert message.string_field == "hello"
    assert message.bytes_field == bytes([0, 1, 2, 255])
    assert message.float_field == 12.5
    assert message.double_field == -3.25
    assert message.status == Status.STATUS_ACTIVE
    assert message.nested == Nested.from_json({"id": 42, "note": "primary"})
    assert [item.id for item in message.repeated_nested] == [7, 8]
    assert message.string_to_int == {"alpha": 1, "beta": 2}
    assert message.int_to_string == {7: "seven"}
    assert message.choice == Choice("name", "choice name")
    assert message.timestamp == Timestamp(seconds=1_640_995_200, nanos=123_000_000)
    assert message.optional_int32 is None


def test_kitchen_sink_canonical_json_roundtrip():
    message = sample_message()
    decoded = KitchenSink.loads(message.dumps())
    assert decoded == message


def test_kitchen_sink_canonical_values():
    data = sample_message().to_json()
    assert data == SAMPLE
    assert data["int64Field"] == "9007199254740993"
    assert data["uint64Field"] == "18446744073709551615"
    assert data["timestamp"] == "2022-01-01T00:00:00.123Z"
    assert "optionalInt32" not in data


def test_kitchen_sink_nested_choice_roundtrip():
    data = {"nestedChoice": {"id": 1, "note": "x"}}
    message = KitchenSink.from_json(data)
    assert message.choice == Choice("nested_choice", Nested.from_json({"id": 1, "note": "x"}))
    assert message.to_json() == data


def test_kitchen_sink_accepts_proto_names_and_enum_numbers():
    decoded = KitchenSink.from_json({"int32_field": "5", "status": 2, "optional_int32": 0})
    assert decoded.int32_field == 5
    assert decoded.status == Status.STATUS_SUSPENDED
    assert decoded.optional_int32 == 0


def test_kitchen_sink_rejects_unknown_enum_name():
    with pytest.raises(CanonicalError, match="invalid enum string"):
        KitchenSink.from_json({"status": "STATUS_GONE"})


def test_empty_kitchen_sink_is_empty_object():
    assert KitchenSink().dumps() == "{}"


def test_example_canonical_json_roundtrip():
    moment = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
    created_at = Timestamp(seconds=int(moment.timestamp()), nanos=123_456_000)
    message = Example.from_json(
        {
            "name": "demo",
            "count": "42",
            "payload": "AAEC/w==",
            "createdAt": "2006-01-02T15:04:05.123456Z",
        }
    )
    assert message.name == "demo"
    assert message.count == 42
    assert message.payload == bytes([0, 1, 2, 255])
    assert message.created_at == created_at

    data = message.to_json()
    assert data["count"] == "42"
    assert data["payload"] == "AAEC/w=="
    assert data["createdAt"] == "2006-01-02T15:04:05.123456Z"

    assert Example.from_json(data) == message


def test_name_conflicts_roundtrip():
    text = '{"key":"alpha","value":"bravo","map":7,"valueChoice":42}'
    message = NameConflicts.loads(text)
    assert message.key == "alpha"
    assert message.value == "bravo"
    assert message.map == 7
    assert message.choice == Choice("value_choice", 42)
    assert message.dumps() == text
    assert NameConflicts.loads(message.dumps()) == message


def test_name_conflicts_key_choice_by_proto_name():
    decoded = NameConflicts.from_json({"key_choice": "k"})
    assert decoded.choice == Choice("key_choice", "k")
    assert decoded.to_json() == {"keyChoice": "k"}


def test_status_names():
    assert Status.STATUS_ACTIVE.as_str_name() == "STATUS_ACTIVE"
    assert Status.from_str_name("STATUS_SUSPENDED") is Status.STATUS_SUSPENDED
    assert Status.from_str_name("ACTIVE") is None