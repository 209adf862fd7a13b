"""Sample messages covering the field kinds the canonical JSON mapping supports."""

from __future__ import annotations

from typing import Optional

from .enums import ProtoEnum
from .maps import MapCodec
from .message import Choice, Message, MessageCodec, Oneof, Variant, oneof_field, proto_field
from .scalar import ScalarKind
from .wkt import Timestamp
from .wrappers import OptionalCodec, RepeatedCodec


class Status(ProtoEnum):
    """Account status."""

    STATUS_UNSPECIFIED = 0
    STATUS_ACTIVE = 1
    STATUS_SUSPENDED = 2


class Nested(Message):
    """A small message used inside other messages."""

    id: int = proto_field(ScalarKind.INT32)
    note: str = proto_field(ScalarKind.STRING)


_KITCHEN_SINK_CHOICE = Oneof(
    Variant("name", ScalarKind.STRING),
    Variant("nested_choice", Nested),
)


class KitchenSink(Message):
    """A message with one field of nearly every kind."""

    int32_field: int = proto_field(ScalarKind.INT32)
    int64_field: int = proto_field(ScalarKind.INT64)
    uint64_field: int = proto_field(ScalarKind.UINT64)
    bool_field: bool = proto_field(ScalarKind.BOOL)
    string_field: str = proto_field(ScalarKind.STRING)
    bytes_field: bytes = proto_field(ScalarKind.BYTES)
    float_field: float = proto_field(ScalarKind.FLOAT)
    double_field: float = proto_field(ScalarKind.DOUBLE)
    status: int = proto_field(Status)
    nested: Optional[Nested] = proto_field(OptionalCodec(MessageCodec(Nested)))
    repeated_nested: list = proto_field(RepeatedCodec(MessageCodec(Nested)))
    string_to_int: dict = proto_field(MapCodec(ScalarKind.STRING, ScalarKind.INT32))
    int_to_string: dict = proto_field(MapCodec(ScalarKind.INT32, ScalarKind.STRING))
    timestamp: Optional[Timestamp] = proto_field(OptionalCodec(Timestamp))
    optional_int32: Optional[int] = proto_field(OptionalCodec(ScalarKind.INT32))
    choice: Optional[Choice] = oneof_field(_KITCHEN_SINK_CHOICE)


class Example(Message):
    """A minimal message with a name, a count, a payload and a creation time."""

    name: str = proto_field(ScalarKind.STRING)
    count: int = proto_field(ScalarKind.INT64)
    payload: bytes = proto_field(ScalarKind.BYTES)
    created_at: Optional[Timestamp] = proto_field(OptionalCodec(Timestamp))


_NAME_CONFLICTS_CHOICE = Oneof(
    Variant("key_choice", ScalarKind.STRING),
    Variant("value_choice", ScalarKind.INT32),
)


class NameConflicts(Message):
    """A message whose field names collide with common container words."""

    key: str = proto_field(ScalarKind.STRING)
    value: str = proto_field(ScalarKind.STRING)
    map: int = proto_field(ScalarKind.INT32)
    choice: Optional[Choice] = oneof_field(_NAME_CONFLICTS_CHOICE)